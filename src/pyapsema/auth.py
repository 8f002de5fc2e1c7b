"""Demo-user session acquisition.

EMA exposes read-only "demo" views of real installations through a public
login URL. Replaying that URL, following its redirects and then loading the
large dashboard page leaves the cookie jar holding a session that the
dashboard AJAX endpoints accept.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING
from urllib.parse import urlencode

from .constants import (
    BROWSER_HEADERS,
    DASHBOARD_BASE_URL,
    DASHBOARD_LANDING_URL,
    DEMO_LOGIN_PATH,
    LANDING_MAX_REDIRECTS,
    LOGIN_MAX_REDIRECTS,
    LOGIN_TIMEOUT,
    STATUS_REDIRECT_OK,
)
from .exceptions import ApsemaAuthError, ApsemaError, ApsemaHTTPStatusError
from .models import SessionHandle

if TYPE_CHECKING:
    from .client import ApsemaClient

_LOGGER = logging.getLogger(__name__)


def build_demo_login_url(user_id: str | int, base_url: str = DASHBOARD_BASE_URL) -> str:
    """Build the demo login URL for a demo user id.

    Example:
        >>> build_demo_login_url("1234567")
        'https://www.apsystemsema.com/ema/intoDemoUser.action?id=1234567&local=en_US'
    """
    query = urlencode({"id": str(user_id), "local": "en_US"})
    return f"{base_url.rstrip('/')}{DEMO_LOGIN_PATH}?{query}"


async def acquire_session(
    client: ApsemaClient,
    login_url: str | None = None,
    user_id: str | int | None = None,
) -> SessionHandle:
    """Log in as a demo user and harvest the session cookies.

    Args:
        client: Client whose cookie jar receives the session
        login_url: Full demo login URL; takes precedence over ``user_id``
        user_id: Demo user id, used to build the login URL

    Returns:
        SessionHandle: Cookies held for the dashboard domain. Empty if the
        login failed; this function never raises.
    """
    try:
        url = login_url or _login_url_for(user_id, client.dashboard_url)

        client.clear_cookies()

        await client.request(
            "GET",
            url,
            headers=BROWSER_HEADERS,
            timeout=LOGIN_TIMEOUT,
            accept=STATUS_REDIRECT_OK,
            max_redirects=LOGIN_MAX_REDIRECTS,
            use_cache=False,
        )

        await _warm_up_dashboard(client)

        cookies = client.cookies_for(client.dashboard_url)
    except ApsemaHTTPStatusError as err:
        _LOGGER.error("Error getting demo session cookies: %s", err)
        _LOGGER.error("Status: %d", err.status)
        _LOGGER.error("Response URL: %s", err.url)
        return SessionHandle()
    except ApsemaError as err:
        _LOGGER.error("Error getting demo session cookies: %s", err)
        return SessionHandle()

    _LOGGER.debug("Demo login produced %d cookies", len(cookies))
    return SessionHandle(cookies=cookies)


def _login_url_for(user_id: str | int | None, base_url: str) -> str:
    if user_id is None or user_id == "":
        raise ApsemaAuthError("demoUserId is required")
    return build_demo_login_url(user_id, base_url)


async def _warm_up_dashboard(client: ApsemaClient) -> None:
    """Load the dashboard page so lazily-set session cookies exist."""
    landing_url = DASHBOARD_LANDING_URL.replace(DASHBOARD_BASE_URL, client.dashboard_url, 1)
    try:
        await client.request(
            "GET",
            landing_url,
            headers=BROWSER_HEADERS,
            timeout=LOGIN_TIMEOUT,
            accept=STATUS_REDIRECT_OK,
            max_redirects=LANDING_MAX_REDIRECTS,
            use_cache=False,
        )
    except ApsemaError as err:
        _LOGGER.warning("Failed to visit dashboard after login: %s", err)
