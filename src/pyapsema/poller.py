"""Polling facade.

One poll picks the configured mode, fetches, normalizes and returns a float.
Every degraded path (missing credentials, failed login, HTML error page,
retired endpoint, network failure) logs its reason and yields ``0.0``.
"""

from __future__ import annotations

import logging
from typing import Any

from .auth import acquire_session
from .client import ApsemaClient
from .config import AccessoryConfig
from .models import FetchOutcome, ReadingKind
from .normalizer import normalize_dashboard, normalize_legacy

_LOGGER = logging.getLogger(__name__)


class InverterPoller:
    """Polls one inverter reading through a dedicated client.

    Session mode logs in again on every poll; the session is not kept between
    polls.

    Example:
        ```python
        config = AccessoryConfig(user_id="1234567", reading_kind=ReadingKind.KWH)
        async with InverterPoller(config) as poller:
            kwh = await poller.poll()
        ```
    """

    def __init__(self, config: AccessoryConfig, client: ApsemaClient | None = None) -> None:
        """Initialize the poller.

        Args:
            config: Accessory configuration; not validated here
            client: Optional client to poll through. A client is created (and
                owned) when omitted.
        """
        self.config = config
        self._client = client or ApsemaClient()
        self._owns_client = client is None

    async def __aenter__(self) -> InverterPoller:
        """Async context manager entry."""
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: Any,
    ) -> None:
        """Async context manager exit."""
        await self.close()

    @property
    def client(self) -> ApsemaClient:
        """Client used for every poll."""
        return self._client

    async def close(self) -> None:
        """Close the client if this poller created it."""
        if self._owns_client:
            await self._client.close()

    async def poll(self, kind: ReadingKind | None = None) -> float:
        """Fetch the current reading.

        Args:
            kind: Reading to derive (default: the configured reading kind)

        Returns:
            float: The reading, or 0.0 on any degraded path
        """
        kind = kind or self.config.reading_kind
        if self.config.use_legacy_api:
            return await self._poll_legacy(kind)
        return await self._poll_dashboard(kind)

    async def _poll_legacy(self, kind: ReadingKind) -> float:
        if not self.config.ecu_id:
            _LOGGER.error("ECU ID (ecuId) is required for legacy API")
            return 0.0

        result = await self._client.legacy.get_power_info(self.config.ecu_id)
        if result.outcome is FetchOutcome.ENDPOINT_RETIRED:
            return 0.0
        if not result.ok or not result.payload:
            _LOGGER.debug("Legacy fetch yielded no data: %s", result.reason)
            return 0.0

        return normalize_legacy(result.payload, kind)

    async def _poll_dashboard(self, kind: ReadingKind) -> float:
        if not self.config.has_credentials:
            _LOGGER.error("demoUserId or demoLoginUrl is required")
            return 0.0

        session = await acquire_session(
            self._client,
            login_url=self.config.login_url,
            user_id=self.config.user_id,
        )
        if session.is_empty:
            _LOGGER.error("Failed to get session cookies from demo login")
            return 0.0

        result = await self._client.dashboard.get_daily_energy(session)
        if not result.ok or not result.payload:
            _LOGGER.debug("Dashboard fetch yielded no data: %s", result.reason)
            return 0.0

        return normalize_dashboard(result.payload, kind)


async def get_accessory_value(
    reading_kind: ReadingKind | str,
    use_legacy_api: bool = False,
    ecu_id: str | None = None,
    login_url: str | None = None,
    user_id: str | None = None,
    *,
    client: ApsemaClient | None = None,
) -> float:
    """Poll one reading without keeping a poller around.

    Args:
        reading_kind: ``ReadingKind`` or its configured name (``Watts``/``Kwh``)
        use_legacy_api: Poll the legacy ECU API
        ecu_id: ECU identifier for legacy mode
        login_url: Full demo login URL for session mode
        user_id: Demo user id for session mode
        client: Optional client; a temporary one is created and closed
            when omitted

    Returns:
        float: The reading, or 0.0 on any degraded path
    """
    config = AccessoryConfig(
        reading_kind=ReadingKind.parse(reading_kind),
        use_legacy_api=use_legacy_api,
        ecu_id=ecu_id,
        login_url=login_url,
        user_id=user_id,
    )
    async with InverterPoller(config, client=client) as poller:
        return await poller.poll()
