"""Pytest configuration and fixtures for pyapsema tests."""

from __future__ import annotations

import json
from collections.abc import AsyncGenerator, Generator
from pathlib import Path
from typing import Any

import pytest
from aioresponses import aioresponses

from pyapsema import ApsemaClient

# Load sample API responses
SAMPLES_DIR = Path(__file__).parent / "samples"

DASHBOARD_URL = "https://www.apsystemsema.com"
LEGACY_URL = "http://api.apsystemsema.com:8073/apsema/v1/ecu/getPowerInfo"
DAILY_URL = (
    f"{DASHBOARD_URL}/ema/ajax/getDashboardApiAjax/getDashboardUserDailyEnergyInLastWeekAjax"
)
MONTHLY_URL = (
    f"{DASHBOARD_URL}/ema/ajax/getDashboardApiAjax/getDashboardUserMonthlyEnergyInCurrentYearAjax"
)
LOGIN_URL = f"{DASHBOARD_URL}/ema/intoDemoUser.action?id=1234567&local=en_US"
LANDING_URL = f"{DASHBOARD_URL}/ema/security/optmainmenu/intoLargeDashboard.action?locale=en_US"


def load_sample(filename: str) -> Any:
    """Load a sample JSON response file."""
    file_path = SAMPLES_DIR / filename
    with open(file_path) as f:
        return json.load(f)


def count_requests(mocked: aioresponses, method: str, url: str) -> int:
    """Number of requests aioresponses recorded for ``method`` and ``url``."""
    return sum(
        len(calls)
        for (req_method, req_url), calls in mocked.requests.items()
        if req_method == method and str(req_url) == url
    )


@pytest.fixture
def legacy_response() -> dict[str, Any]:
    """Sample legacy getPowerInfo response."""
    return load_sample("legacy_power.json")


@pytest.fixture
def daily_response() -> dict[str, Any]:
    """Sample dashboard daily energy response."""
    return load_sample("dashboard_daily.json")


@pytest.fixture
def monthly_response() -> dict[str, Any]:
    """Sample dashboard monthly energy response."""
    return load_sample("dashboard_monthly.json")


@pytest.fixture
def mocked_api() -> Generator[aioresponses, None, None]:
    """Create aioresponses mock for HTTP requests.

    This fixture provides a context manager for mocking aiohttp requests
    using the aioresponses library.
    """
    with aioresponses() as m:
        yield m


@pytest.fixture
async def client() -> AsyncGenerator[ApsemaClient, None]:
    """Client with its own cookie jar and cache, closed after the test."""
    api_client = ApsemaClient()
    yield api_client
    await api_client.close()
