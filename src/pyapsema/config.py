"""Accessory configuration.

The host stores its accessory configuration as a flat dictionary with the
key names used by earlier releases of the integration (``ecuId``,
``useLegacyApi``, ``demoUserId``...). :class:`AccessoryConfig` maps those keys
onto typed fields and validates them.

Example:
    config = AccessoryConfig.from_dict(
        {"name": "Solar", "inverter_data": "Kwh", "demoUserId": "1234567"}
    )
    config.validate()
    url = config.resolved_login_url
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from .auth import build_demo_login_url
from .constants import (
    DEFAULT_MANUFACTURER,
    DEFAULT_MAX_LUX,
    DEFAULT_MIN_LUX,
    DEFAULT_MODEL,
    DEFAULT_SERIAL,
)
from .exceptions import ApsemaConfigError
from .models import ReadingKind

_LOGGER = logging.getLogger(__name__)


@dataclass
class AccessoryConfig:
    """Configuration for one polled inverter reading.

    Attributes:
        name: Accessory display name
        reading_kind: Reading reported by the accessory
        use_legacy_api: Poll the legacy ECU API instead of the dashboard
        ecu_id: ECU identifier (legacy mode only)
        login_url: Full demo login URL (session mode)
        user_id: Demo user id, used when ``login_url`` is not set
        manufacturer: Manufacturer shown by the host
        model: Model shown by the host
        serial: Serial number shown by the host
        min_lux: Lower bound of the host's light-level sensor range
        max_lux: Upper bound of the host's light-level sensor range
    """

    name: str = ""
    reading_kind: ReadingKind = ReadingKind.KWH
    use_legacy_api: bool = False
    ecu_id: str | None = None
    login_url: str | None = None
    user_id: str | None = None
    manufacturer: str = DEFAULT_MANUFACTURER
    model: str = DEFAULT_MODEL
    serial: str = DEFAULT_SERIAL
    min_lux: float = DEFAULT_MIN_LUX
    max_lux: float = DEFAULT_MAX_LUX

    @property
    def has_credentials(self) -> bool:
        """Whether a demo login URL or demo user id is configured."""
        return bool(self.login_url or self.user_id)

    @property
    def resolved_login_url(self) -> str | None:
        """Login URL, built from the user id when no URL is configured."""
        if self.login_url:
            return self.login_url
        if self.user_id:
            return build_demo_login_url(self.user_id)
        return None

    def validate(self) -> None:
        """Validate configuration completeness.

        Raises:
            ApsemaConfigError: If the selected mode is missing its credential
        """
        if self.use_legacy_api:
            if not self.ecu_id:
                raise ApsemaConfigError("ecuId must be provided when useLegacyApi is true")
            return

        if not self.has_credentials:
            raise ApsemaConfigError("demoUserId or demoLoginUrl must be provided")

        if self.ecu_id:
            _LOGGER.warning(
                "ecuId is provided but useLegacyApi is not set to true. "
                "Ignoring ecuId and using web dashboard API."
            )

    def to_dict(self) -> dict[str, Any]:
        """Convert configuration to the host's dictionary format."""
        return {
            "name": self.name,
            "inverter_data": self.reading_kind.value,
            "useLegacyApi": self.use_legacy_api,
            "ecuId": self.ecu_id,
            "demoLoginUrl": self.login_url,
            "demoUserId": self.user_id,
            "manufacturer": self.manufacturer,
            "model": self.model,
            "serial": self.serial,
            "min_lux": self.min_lux,
            "max_lux": self.max_lux,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> AccessoryConfig:
        """Create configuration from the host's dictionary format.

        Only a literal ``True`` for ``useLegacyApi`` enables legacy mode.
        Empty strings count as unset.
        """
        user_id = data.get("demoUserId")
        ecu_id = data.get("ecuId")

        return cls(
            name=data.get("name") or "",
            reading_kind=ReadingKind.parse(data.get("inverter_data")),
            use_legacy_api=data.get("useLegacyApi") is True,
            ecu_id=str(ecu_id) if ecu_id else None,
            login_url=data.get("demoLoginUrl") or None,
            user_id=str(user_id) if user_id else None,
            manufacturer=data.get("manufacturer") or DEFAULT_MANUFACTURER,
            model=data.get("model") or DEFAULT_MODEL,
            serial=data.get("serial") or DEFAULT_SERIAL,
            min_lux=data.get("min_lux") or DEFAULT_MIN_LUX,
            max_lux=data.get("max_lux") or DEFAULT_MAX_LUX,
        )


__all__ = [
    "AccessoryConfig",
]
