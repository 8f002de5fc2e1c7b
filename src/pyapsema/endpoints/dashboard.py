"""Session-based dashboard endpoints.

The dashboard answers expired or invalid sessions with an HTML error page
(often with HTTP 200), so every body is classified before use.
"""

from __future__ import annotations

import json
import logging
from typing import Any

from pyapsema.constants import (
    API_HEADERS,
    DASHBOARD_DAILY_ENERGY_ENDPOINT,
    DASHBOARD_MONTHLY_ENERGY_ENDPOINT,
    DATA_TIMEOUT,
    HTML_ERROR_MARKERS,
    STATUS_INSPECTABLE,
)
from pyapsema.endpoints.base import BaseEndpoint
from pyapsema.exceptions import ApsemaError, ApsemaHTTPStatusError
from pyapsema.models import FetchOutcome, FetchResult, SessionHandle

_LOGGER = logging.getLogger(__name__)


def classify_body(body: Any, status: int | None = None) -> FetchResult:
    """Classify a dashboard response body.

    Args:
        body: Decoded body (parsed JSON or raw text)
        status: HTTP status, kept on the result for diagnostics

    Returns:
        FetchResult: ``invalid_session`` for HTML error pages,
        ``invalid_payload`` for text that is not JSON, otherwise ``ok``.
    """
    if isinstance(body, str):
        if any(marker in body for marker in HTML_ERROR_MARKERS):
            _LOGGER.error("API returned HTML error page - session may be invalid")
            return FetchResult.failed(
                FetchOutcome.INVALID_SESSION, "HTML error page", status=status
            )
        try:
            body = json.loads(body)
        except ValueError:
            _LOGGER.error("Response is not valid JSON")
            return FetchResult.failed(
                FetchOutcome.INVALID_PAYLOAD, "Response is not valid JSON", status=status
            )

    return FetchResult(outcome=FetchOutcome.OK, payload=body, status=status)


class DashboardEndpoints(BaseEndpoint):
    """Energy summary endpoints of the EMA web dashboard."""

    async def fetch(self, session: SessionHandle, endpoint: str) -> FetchResult:
        """POST to a dashboard AJAX endpoint with the session's cookies.

        The handle's cookies replace whatever the jar holds. An empty handle
        leaves the jar untouched.

        Args:
            session: Cookies from :func:`pyapsema.auth.acquire_session`
            endpoint: Path below the dashboard base URL

        Returns:
            FetchResult: Classified response; never raises.
        """
        url = f"{self.client.dashboard_url}{endpoint}"

        if session.cookies:
            self.client.set_cookies(session.cookies, self.client.dashboard_url)

        headers = {**API_HEADERS, "Content-Length": "0"}

        try:
            response = await self.client.request(
                "POST",
                url,
                data="",
                headers=headers,
                timeout=DATA_TIMEOUT,
                accept=STATUS_INSPECTABLE,
            )
        except ApsemaHTTPStatusError as err:
            _LOGGER.error("Dashboard API Error: HTTP %d", err.status)
            if err.body and HTML_ERROR_MARKERS[0] in err.body:
                _LOGGER.error("Received HTML error page - session may have expired")
            else:
                _LOGGER.error("Data: %s", err.body)
            return FetchResult.failed(FetchOutcome.TRANSPORT_ERROR, str(err), status=err.status)
        except ApsemaError as err:
            _LOGGER.error("Dashboard API Error: %s", err)
            return FetchResult.failed(FetchOutcome.TRANSPORT_ERROR, str(err))

        return classify_body(response.data, response.status)

    async def get_daily_energy(self, session: SessionHandle) -> FetchResult:
        """Daily energy totals for the last week; the last entry is today."""
        return await self.fetch(session, DASHBOARD_DAILY_ENERGY_ENDPOINT)

    async def get_monthly_energy(self, session: SessionHandle) -> FetchResult:
        """Monthly energy totals for the current year."""
        return await self.fetch(session, DASHBOARD_MONTHLY_ENERGY_ENDPOINT)
