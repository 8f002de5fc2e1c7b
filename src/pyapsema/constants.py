"""Constants for the APsystems EMA web endpoints.

Endpoint paths and header sets were captured from the EMA web dashboard
(large dashboard view) and the legacy ECU API used by older integrations.
"""

from __future__ import annotations

from datetime import timedelta

# Dashboard API (session-cookie authenticated)
DASHBOARD_BASE_URL = "https://www.apsystemsema.com"
DASHBOARD_DOMAIN = "www.apsystemsema.com"
DEMO_LOGIN_PATH = "/ema/intoDemoUser.action"
DASHBOARD_LANDING_PATH = "/ema/security/optmainmenu/intoLargeDashboard.action"
DASHBOARD_LANDING_URL = f"{DASHBOARD_BASE_URL}{DASHBOARD_LANDING_PATH}?locale=en_US"
DASHBOARD_DAILY_ENERGY_ENDPOINT = (
    "/ema/ajax/getDashboardApiAjax/getDashboardUserDailyEnergyInLastWeekAjax"
)
DASHBOARD_MONTHLY_ENERGY_ENDPOINT = (
    "/ema/ajax/getDashboardApiAjax/getDashboardUserMonthlyEnergyInCurrentYearAjax"
)

# Legacy ECU API (unauthenticated, form-encoded)
LEGACY_BASE_URL = "http://api.apsystemsema.com:8073"
LEGACY_POWER_INFO_PATH = "/apsema/v1/ecu/getPowerInfo"

# Markers of an HTML error page returned in place of JSON
HTML_ERROR_MARKERS: tuple[str, ...] = (
    "<!DOCTYPE",
    "EMA has encountered an error",
)

USER_AGENT = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/143.0.0.0 Safari/537.36"
)

# Headers for the login redirect chain (behaves like a browser page load)
BROWSER_HEADERS: dict[str, str] = {
    "User-Agent": USER_AGENT,
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,image/webp,*/*;q=0.8",
    "Accept-Language": "en-US,en;q=0.9",
    "Upgrade-Insecure-Requests": "1",
}

# Headers for the XHR-style dashboard data calls
API_HEADERS: dict[str, str] = {
    "User-Agent": USER_AGENT,
    "Accept": "application/json, text/javascript, */*; q=0.01",
    "Accept-Language": "en-US,en;q=0.9",
    "X-Requested-With": "XMLHttpRequest",
    "Origin": DASHBOARD_BASE_URL,
    "Referer": f"{DASHBOARD_BASE_URL}{DASHBOARD_LANDING_PATH}",
}

FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"

# Timeouts (seconds)
LOGIN_TIMEOUT = 30
DATA_TIMEOUT = 10

# Redirect limits
LOGIN_MAX_REDIRECTS = 10
LANDING_MAX_REDIRECTS = 5

# Response cache freshness window; entries older than twice this are purged
CACHE_MAX_AGE = timedelta(seconds=5)

# Accepted status ranges, as [low, high)
STATUS_SUCCESS: tuple[int, int] = (200, 300)
STATUS_REDIRECT_OK: tuple[int, int] = (200, 400)
STATUS_INSPECTABLE: tuple[int, int] = (200, 500)

# Energy per legacy power sample: Wh per W for the ECU sampling interval.
# Specific to this device family; do not change.
LEGACY_SAMPLE_KWH_FACTOR = 0.08345

# Hours used to average a daily total into a power figure
HOURS_PER_DAY = 24

# Host-side sensor defaults
DEFAULT_MANUFACTURER = "AP Systems"
DEFAULT_MODEL = "Inverter"
DEFAULT_SERIAL = "APSystems-inverter"
DEFAULT_MIN_LUX = 0
DEFAULT_MAX_LUX = 10000

LEGACY_RETIRED_MESSAGE = (
    "Legacy API endpoint returned 404 - the endpoint may be deprecated. "
    'Please remove "useLegacyApi: true" from your config and use "demoUserId" instead.'
)
