"""Endpoint clients for the APsystems EMA API."""

from __future__ import annotations

from .base import BaseEndpoint
from .dashboard import DashboardEndpoints
from .legacy import LegacyEndpoints

__all__ = [
    "BaseEndpoint",
    "DashboardEndpoints",
    "LegacyEndpoints",
]
