"""Unit tests for data models."""

from __future__ import annotations

from typing import Any

import pytest

from pyapsema.models import (
    DashboardEnergy,
    FetchOutcome,
    FetchResult,
    LegacyPowerInfo,
    ReadingKind,
    SessionHandle,
)


class TestReadingKind:
    """Test ReadingKind parsing."""

    def test_values(self) -> None:
        assert ReadingKind.WATTS == "Watts"
        assert ReadingKind.KWH == "Kwh"

    @pytest.mark.parametrize("value", ["Watts", "watts", " WATTS ", ReadingKind.WATTS])
    def test_parse_watts(self, value: Any) -> None:
        assert ReadingKind.parse(value) is ReadingKind.WATTS

    @pytest.mark.parametrize("value", ["Kwh", "kWh", None, "", "Lux"])
    def test_anything_else_is_kwh(self, value: Any) -> None:
        assert ReadingKind.parse(value) is ReadingKind.KWH


class TestSessionHandle:
    """Test SessionHandle."""

    def test_empty_handle(self) -> None:
        handle = SessionHandle()
        assert handle.is_empty
        assert not handle
        assert len(handle) == 0

    def test_populated_handle(self) -> None:
        handle = SessionHandle(cookies={"JSESSIONID": "abc", "route": "1"})
        assert not handle.is_empty
        assert handle
        assert len(handle) == 2


class TestFetchResult:
    """Test FetchResult."""

    def test_ok(self) -> None:
        result = FetchResult(outcome=FetchOutcome.OK, payload={"list": []}, status=200)
        assert result.ok

    def test_failed(self) -> None:
        result = FetchResult.failed(FetchOutcome.ENDPOINT_RETIRED, "gone", status=404)
        assert not result.ok
        assert result.payload is None
        assert result.status == 404
        assert result.reason == "gone"


class TestLegacyPowerInfo:
    """Test legacy payload model."""

    def test_parse_sample(self, legacy_response: dict[str, Any]) -> None:
        info = LegacyPowerInfo.model_validate(legacy_response)
        assert info.is_success
        assert info.power == [100, 200, 250]

    def test_extra_keys_kept(self) -> None:
        info = LegacyPowerInfo.model_validate(
            {"code": "1", "data": {"power": [1], "time": "[]"}, "msg": "ok"}
        )
        assert info.is_success
        assert info.model_dump()["msg"] == "ok"

    def test_missing_data(self) -> None:
        info = LegacyPowerInfo.model_validate({"code": 1})
        assert info.power == []


class TestDashboardEnergy:
    """Test dashboard payload classification."""

    def test_daily_sample(self, daily_response: dict[str, Any]) -> None:
        energy = DashboardEnergy.from_payload(daily_response)
        assert energy.values == daily_response["list"]
        assert len(energy.date or []) == 7

    def test_bare_list(self) -> None:
        assert DashboardEnergy.from_payload(["1", "2"]).values == ["1", "2"]

    def test_empty_list_is_not_replaced_by_data(self) -> None:
        energy = DashboardEnergy.from_payload({"list": [], "data": ["9"]})
        assert energy.values == []

    @pytest.mark.parametrize("payload", [None, "text", 3, {"list": {"a": 1}}])
    def test_unusable_shapes(self, payload: Any) -> None:
        assert DashboardEnergy.from_payload(payload).values == []
