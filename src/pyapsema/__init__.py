"""Python client library for the APsystems EMA inverter monitoring site.

Usage:
    One-shot reading:
        from pyapsema import ReadingKind, get_accessory_value

        kwh = await get_accessory_value(ReadingKind.KWH, user_id="1234567")

    Long-lived accessory:
        from pyapsema import InverterAccessory

        accessory = InverterAccessory({"inverter_data": "Watts", "demoUserId": "1234567"})
        watts = await accessory.read_current_value()
        await accessory.close()
"""

from __future__ import annotations

from .accessory import InverterAccessory
from .auth import acquire_session, build_demo_login_url
from .client import ApsemaClient, HttpResponse
from .config import AccessoryConfig
from .endpoints import DashboardEndpoints, LegacyEndpoints
from .exceptions import (
    ApsemaAPIError,
    ApsemaAuthError,
    ApsemaConfigError,
    ApsemaConnectionError,
    ApsemaError,
    ApsemaHTTPStatusError,
)
from .models import FetchOutcome, FetchResult, ReadingKind, SessionHandle
from .normalizer import normalize_dashboard, normalize_legacy
from .poller import InverterPoller, get_accessory_value

__version__ = "0.1.0"
__all__ = [
    "ApsemaClient",
    "HttpResponse",
    "InverterAccessory",
    "InverterPoller",
    "AccessoryConfig",
    "get_accessory_value",
    "acquire_session",
    "build_demo_login_url",
    "normalize_dashboard",
    "normalize_legacy",
    # Endpoint modules
    "DashboardEndpoints",
    "LegacyEndpoints",
    # Models
    "FetchOutcome",
    "FetchResult",
    "ReadingKind",
    "SessionHandle",
    # Exceptions
    "ApsemaError",
    "ApsemaAPIError",
    "ApsemaAuthError",
    "ApsemaConfigError",
    "ApsemaConnectionError",
    "ApsemaHTTPStatusError",
]
