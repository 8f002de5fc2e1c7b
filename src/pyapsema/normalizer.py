"""Reduce EMA payloads to a single reading.

Both extraction paths are pure functions of the decoded payload and never
raise: anything that cannot be read yields ``0.0``.

Legacy payloads carry per-interval power samples (W). Dashboard payloads carry
daily energy totals (kWh); the dashboard has no instantaneous power figure, so
a Watts reading there is today's average power, ``today_kwh / 24 * 1000``.
This is a known accuracy limitation of the data source.
"""

from __future__ import annotations

import logging
import math
import re
from typing import Any

from pydantic import ValidationError

from .constants import HOURS_PER_DAY, LEGACY_SAMPLE_KWH_FACTOR
from .models import DashboardEnergy, LegacyPowerInfo, ReadingKind

_LOGGER = logging.getLogger(__name__)

# ASCII digits only
_LEADING_INT = re.compile(r"^\s*([+-]?\d+)", re.ASCII)
_LEADING_FLOAT = re.compile(r"^\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)", re.ASCII)


def parse_int(value: Any) -> int:
    """Integer value of a sample, or 0.

    Strings are read up to the first non-digit (``"250.7"`` -> 250,
    ``"12W"`` -> 12). Floats are truncated toward zero.
    """
    if isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if math.isnan(value) or math.isinf(value):
            return 0
        return int(value)
    if isinstance(value, str):
        match = _LEADING_INT.match(value)
        if not match:
            return 0
        try:
            return int(match.group(1))
        except ValueError:
            # Longer than the interpreter's int string conversion limit
            return 0
    return 0


def parse_float(value: Any) -> float:
    """Float value of an energy entry, or 0.0."""
    if isinstance(value, bool):
        return 0.0
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        match = _LEADING_FLOAT.match(value)
        if not match:
            return 0.0
        number = float(match.group(1))
    else:
        return 0.0
    if math.isnan(number) or math.isinf(number):
        return 0.0
    return number


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves toward positive infinity."""
    return math.floor(value + 0.5)


def legacy_watts(power: list[Any]) -> float:
    """Most recent power sample."""
    if not power:
        return 0.0
    return float(parse_int(power[-1]))


def legacy_kwh(power: list[Any]) -> float:
    """Energy produced so far today from the power samples."""
    total = 0.0
    for sample in power:
        total += parse_int(sample) * LEGACY_SAMPLE_KWH_FACTOR / 1000
    return round(total, 2)


def dashboard_today(values: list[Any]) -> float | None:
    """Today's energy total: the last non-empty entry, or None."""
    valid = [value for value in values if value is not None and value != ""]
    if not valid:
        return None
    return parse_float(valid[-1])


def normalize_legacy(payload: Any, kind: ReadingKind) -> float:
    """Reading from a legacy getPowerInfo response.

    Args:
        payload: Decoded response body
        kind: Reading to derive

    Returns:
        float: Watts (last sample) or kWh (sum of samples), 0.0 if unreadable
    """
    if not isinstance(payload, dict):
        return 0.0

    try:
        info = LegacyPowerInfo.model_validate(payload)
    except ValidationError as err:
        _LOGGER.error("Error parsing legacy inverter data: %s", err)
        return 0.0

    if not info.is_success:
        _LOGGER.debug("Legacy API returned code %s", info.code)
        return 0.0

    power = info.power
    if not power:
        return 0.0

    try:
        if kind is ReadingKind.WATTS:
            return legacy_watts(power)
        return legacy_kwh(power)
    except (ValueError, ArithmeticError) as err:
        _LOGGER.error("Error computing legacy reading: %s", err)
        return 0.0


def normalize_dashboard(payload: Any, kind: ReadingKind) -> float:
    """Reading from a dashboard daily energy response.

    Args:
        payload: Decoded response body
        kind: Reading to derive

    Returns:
        float: Today's kWh rounded to 2 decimals, or today's average power in
        Watts; 0.0 if unreadable
    """
    try:
        energy = DashboardEnergy.from_payload(payload)
    except ValidationError as err:
        _LOGGER.error("Error parsing dashboard data: %s", err)
        _LOGGER.error("Response data: %s", payload)
        return 0.0

    today = dashboard_today(energy.values)
    if today is None:
        return 0.0

    try:
        if kind is ReadingKind.WATTS:
            value = float(round_half_up(today / HOURS_PER_DAY * 1000))
        else:
            value = round(today, 2)
    except (ValueError, ArithmeticError) as err:
        _LOGGER.error("Error computing dashboard reading: %s", err)
        return 0.0
    return value or 0.0
