"""Legacy ECU power endpoint.

The endpoint is unauthenticated and takes a form-encoded body. APsystems has
been retiring it; a 404 means the accessory should move to demo-login mode.
"""

from __future__ import annotations

import logging
from datetime import date

from pyapsema.constants import (
    DATA_TIMEOUT,
    FORM_CONTENT_TYPE,
    LEGACY_POWER_INFO_PATH,
    LEGACY_RETIRED_MESSAGE,
    STATUS_INSPECTABLE,
)
from pyapsema.endpoints.base import BaseEndpoint
from pyapsema.exceptions import ApsemaError, ApsemaHTTPStatusError
from pyapsema.models import FetchOutcome, FetchResult

_LOGGER = logging.getLogger(__name__)


def format_legacy_date(day: date) -> str:
    """Format a calendar date as ``YYYYMMDD``."""
    return day.strftime("%Y%m%d")


class LegacyEndpoints(BaseEndpoint):
    """getPowerInfo endpoint of the legacy ECU API."""

    async def get_power_info(self, ecu_id: str, day: date | None = None) -> FetchResult:
        """Fetch the power samples recorded by an ECU for one day.

        Args:
            ecu_id: ECU identifier
            day: Local calendar date (default: today)

        Returns:
            FetchResult: ``ok`` with the decoded body, ``endpoint_retired`` on
            HTTP 404, ``transport_error`` otherwise. Never raises.
        """
        day = day or date.today()
        url = f"{self.client.legacy_url}{LEGACY_POWER_INFO_PATH}"
        body = f"filter=power&ecuId={ecu_id}&date={format_legacy_date(day)}"

        try:
            response = await self.client.request(
                "POST",
                url,
                data=body,
                headers={"Content-Type": FORM_CONTENT_TYPE},
                timeout=DATA_TIMEOUT,
                accept=STATUS_INSPECTABLE,
            )
        except ApsemaHTTPStatusError as err:
            _LOGGER.error("API Error Response: HTTP %d %s", err.status, err.body)
            return FetchResult.failed(FetchOutcome.TRANSPORT_ERROR, str(err), status=err.status)
        except ApsemaError as err:
            _LOGGER.error("API Error: No response received %s", err)
            return FetchResult.failed(FetchOutcome.TRANSPORT_ERROR, str(err))

        if response.status == 404:
            _LOGGER.error(LEGACY_RETIRED_MESSAGE)
            return FetchResult.failed(
                FetchOutcome.ENDPOINT_RETIRED, LEGACY_RETIRED_MESSAGE, status=404
            )

        return FetchResult(outcome=FetchOutcome.OK, payload=response.data, status=response.status)
