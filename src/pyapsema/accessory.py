"""Host-facing accessory handler.

Hosts expose the reading as a light-level sensor (the sensor type with a free
numeric range). The host adapter builds an :class:`InverterAccessory` from
its stored configuration and awaits :meth:`InverterAccessory.read_current_value`
whenever the sensor is read.
"""

from __future__ import annotations

import logging
from typing import Any

from .client import ApsemaClient
from .config import AccessoryConfig
from .exceptions import ApsemaConfigError, ApsemaError
from .poller import InverterPoller

_LOGGER = logging.getLogger(__name__)


class InverterAccessory:
    """One configured inverter sensor."""

    def __init__(
        self,
        config: AccessoryConfig | dict[str, Any],
        client: ApsemaClient | None = None,
    ) -> None:
        """Initialize and validate the accessory.

        Args:
            config: Typed configuration or the host's raw config dictionary
            client: Optional client; each accessory gets its own by default

        Raises:
            ApsemaConfigError: If a required credential is missing
        """
        if not isinstance(config, AccessoryConfig):
            config = AccessoryConfig.from_dict(config)

        try:
            config.validate()
        except ApsemaConfigError as err:
            _LOGGER.error("%s", err)
            raise

        self.config = config
        self._poller = InverterPoller(config, client=client)

    @property
    def name(self) -> str:
        return self.config.name

    @property
    def information(self) -> dict[str, str]:
        """Accessory information characteristics."""
        return {
            "manufacturer": self.config.manufacturer,
            "model": self.config.model,
            "serial_number": self.config.serial,
        }

    @property
    def light_level_range(self) -> tuple[float, float]:
        """(min, max) of the host sensor range."""
        return self.config.min_lux, self.config.max_lux

    async def read_current_value(self) -> float:
        """Poll and return the current reading.

        Raises:
            ApsemaError: Only for unexpected internal failures; recoverable
                fetch problems return 0.0.
        """
        try:
            value = await self._poller.poll()
        except Exception as err:
            _LOGGER.error("Error getting inverter value: %s", err)
            raise ApsemaError(f"Error getting inverter value: {err}") from err

        _LOGGER.info("Current %s: %s", self.config.reading_kind.value, value)
        return value

    async def close(self) -> None:
        """Release the accessory's HTTP resources."""
        await self._poller.close()
