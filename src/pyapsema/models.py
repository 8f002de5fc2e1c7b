"""Data models for pyapsema.

Payload models are deliberately lenient: the EMA endpoints are only partly
documented, so unknown keys are kept and unexpected field types collapse to
``None`` instead of failing validation. The normalizer decides what an empty
field means for a reading.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ReadingKind(str, Enum):
    """Which scalar the accessory reports."""

    WATTS = "Watts"
    KWH = "Kwh"

    @classmethod
    def parse(cls, value: str | ReadingKind | None) -> ReadingKind:
        """Map a configured ``inverter_data`` value to a reading kind.

        Anything other than ``Watts`` selects the daily energy reading.
        """
        if isinstance(value, ReadingKind):
            return value
        if isinstance(value, str) and value.strip().lower() == cls.WATTS.value.lower():
            return cls.WATTS
        return cls.KWH


class SessionHandle(BaseModel):
    """Cookies of one authenticated demo session.

    Created per poll by :func:`pyapsema.auth.acquire_session` and discarded
    after the dashboard call. An empty handle means the login failed.
    """

    cookies: dict[str, str] = Field(default_factory=dict)

    @property
    def is_empty(self) -> bool:
        """Whether the login produced no cookies."""
        return not self.cookies

    def __bool__(self) -> bool:
        return not self.is_empty

    def __len__(self) -> int:
        return len(self.cookies)


class FetchOutcome(str, Enum):
    """Classification of a dashboard or legacy fetch."""

    OK = "ok"
    INVALID_SESSION = "invalid_session"
    INVALID_PAYLOAD = "invalid_payload"
    ENDPOINT_RETIRED = "endpoint_retired"
    TRANSPORT_ERROR = "transport_error"


@dataclass
class FetchResult:
    """Result of a client fetch; never carries an exception to the caller."""

    outcome: FetchOutcome
    payload: Any = None
    status: int | None = None
    reason: str | None = None

    @property
    def ok(self) -> bool:
        """Whether the fetch produced a usable payload."""
        return self.outcome is FetchOutcome.OK

    @classmethod
    def failed(
        cls, outcome: FetchOutcome, reason: str, status: int | None = None
    ) -> FetchResult:
        """Build a degraded result."""
        return cls(outcome=outcome, status=status, reason=reason)


class LegacyPowerData(BaseModel):
    """``data`` object of a legacy getPowerInfo response."""

    model_config = ConfigDict(extra="allow")

    power: list[Any] | None = None

    @field_validator("power", mode="before")
    @classmethod
    def _decode_power(cls, value: Any) -> Any:
        # The ECU API returns the samples either as a JSON-encoded string or
        # as an array.
        if isinstance(value, str):
            value = json.loads(value)
        if not isinstance(value, list):
            return None
        return value


class LegacyPowerInfo(BaseModel):
    """Legacy getPowerInfo response.

    Example:
        {"code": 1, "data": {"time": "[...]", "power": "[100,200,250]"}}
    """

    model_config = ConfigDict(extra="allow")

    code: Any = None
    data: LegacyPowerData | None = None

    @property
    def is_success(self) -> bool:
        """``code`` is absent or equal to 1 (string or number)."""
        if self.code is None:
            return True
        try:
            return float(self.code) == 1
        except (TypeError, ValueError):
            return False

    @property
    def power(self) -> list[Any]:
        """Power samples in Watts, oldest first."""
        if self.data is None or not self.data.power:
            return []
        return self.data.power


class DashboardEnergy(BaseModel):
    """Dashboard energy summary response.

    Daily endpoint: ``{"date": [...], "list": ["0.8", "1.2", ...]}``, the last
    entry of ``list`` being today's total in kWh. Some accounts return the
    values under ``data`` instead.
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    energy: list[Any] | None = Field(default=None, alias="list")
    date: list[Any] | None = None
    data: list[Any] | None = None

    @field_validator("energy", "date", "data", mode="before")
    @classmethod
    def _drop_non_list(cls, value: Any) -> Any:
        return value if isinstance(value, list) else None

    @classmethod
    def from_payload(cls, payload: Any) -> DashboardEnergy:
        """Classify a decoded dashboard payload.

        A bare JSON array is treated as the energy list itself.
        """
        if isinstance(payload, list):
            return cls(energy=payload)
        if isinstance(payload, dict):
            return cls.model_validate(payload)
        return cls()

    @property
    def values(self) -> list[Any]:
        """Energy list, preferring ``list`` over ``data``."""
        if self.energy is not None:
            return self.energy
        if self.data is not None:
            return self.data
        return []
