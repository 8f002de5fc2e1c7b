"""Unit tests for the dashboard endpoints."""

from __future__ import annotations

from typing import Any

import aiohttp
import pytest
from aioresponses import aioresponses
from conftest import DAILY_URL, MONTHLY_URL, count_requests

from pyapsema import ApsemaClient
from pyapsema.endpoints.dashboard import classify_body
from pyapsema.models import FetchOutcome, SessionHandle

SESSION = SessionHandle(cookies={"JSESSIONID": "abc"})

HTML_ERROR_PAGE = "<!DOCTYPE html><html><body>Login</body></html>"
VENDOR_ERROR_PAGE = "<html><body>EMA has encountered an error</body></html>"


class TestClassifyBody:
    """Test response body classification."""

    def test_parsed_json(self) -> None:
        result = classify_body({"list": ["1"]}, 200)
        assert result.ok
        assert result.payload == {"list": ["1"]}

    def test_json_text(self) -> None:
        result = classify_body('{"list": ["1"]}', 200)
        assert result.ok
        assert result.payload == {"list": ["1"]}

    @pytest.mark.parametrize("body", [HTML_ERROR_PAGE, VENDOR_ERROR_PAGE])
    def test_html_error_page(self, body: str) -> None:
        result = classify_body(body, 200)
        assert result.outcome is FetchOutcome.INVALID_SESSION
        assert result.payload is None

    def test_plain_text(self) -> None:
        result = classify_body("session timeout", 200)
        assert result.outcome is FetchOutcome.INVALID_PAYLOAD


class TestDashboardEndpoints:
    """Test DashboardEndpoints against mocked HTTP."""

    @pytest.mark.asyncio
    async def test_daily_energy(
        self,
        client: ApsemaClient,
        mocked_api: aioresponses,
        daily_response: dict[str, Any],
    ) -> None:
        mocked_api.post(DAILY_URL, payload=daily_response)

        result = await client.dashboard.get_daily_energy(SESSION)

        assert result.ok
        assert result.status == 200
        assert result.payload == daily_response

    @pytest.mark.asyncio
    async def test_request_shape(
        self,
        client: ApsemaClient,
        mocked_api: aioresponses,
        daily_response: dict[str, Any],
    ) -> None:
        mocked_api.post(DAILY_URL, payload=daily_response)

        await client.dashboard.get_daily_energy(SESSION)

        (call,) = next(
            calls for (method, url), calls in mocked_api.requests.items() if str(url) == DAILY_URL
        )
        assert call.kwargs["data"] == ""
        headers = call.kwargs["headers"]
        assert headers["Content-Length"] == "0"
        assert headers["X-Requested-With"] == "XMLHttpRequest"
        assert headers["Accept"].startswith("application/json")

    @pytest.mark.asyncio
    async def test_session_cookies_installed(
        self,
        client: ApsemaClient,
        mocked_api: aioresponses,
        daily_response: dict[str, Any],
    ) -> None:
        client.set_cookies({"other": "x"})
        mocked_api.post(DAILY_URL, payload=daily_response)

        await client.dashboard.get_daily_energy(SESSION)

        assert client.cookies_for() == {"JSESSIONID": "abc"}

    @pytest.mark.asyncio
    async def test_monthly_energy(
        self,
        client: ApsemaClient,
        mocked_api: aioresponses,
        monthly_response: dict[str, Any],
    ) -> None:
        mocked_api.post(MONTHLY_URL, payload=monthly_response)

        result = await client.dashboard.get_monthly_energy(SESSION)

        assert result.ok
        assert count_requests(mocked_api, "POST", MONTHLY_URL) == 1

    @pytest.mark.asyncio
    async def test_html_page_is_invalid_session(
        self, client: ApsemaClient, mocked_api: aioresponses
    ) -> None:
        mocked_api.post(DAILY_URL, body=HTML_ERROR_PAGE, content_type="text/html")

        result = await client.dashboard.get_daily_energy(SESSION)

        assert result.outcome is FetchOutcome.INVALID_SESSION

    @pytest.mark.asyncio
    async def test_4xx_body_is_inspected(
        self, client: ApsemaClient, mocked_api: aioresponses
    ) -> None:
        mocked_api.post(DAILY_URL, status=403, body=VENDOR_ERROR_PAGE, content_type="text/html")

        result = await client.dashboard.get_daily_energy(SESSION)

        assert result.outcome is FetchOutcome.INVALID_SESSION
        assert result.status == 403

    @pytest.mark.asyncio
    async def test_5xx_is_transport_error(
        self, client: ApsemaClient, mocked_api: aioresponses
    ) -> None:
        mocked_api.post(DAILY_URL, status=502, body="Bad gateway")

        result = await client.dashboard.get_daily_energy(SESSION)

        assert result.outcome is FetchOutcome.TRANSPORT_ERROR
        assert result.status == 502

    @pytest.mark.asyncio
    async def test_connection_error(self, client: ApsemaClient, mocked_api: aioresponses) -> None:
        mocked_api.post(DAILY_URL, exception=aiohttp.ClientConnectionError("reset"))

        result = await client.dashboard.get_daily_energy(SESSION)

        assert result.outcome is FetchOutcome.TRANSPORT_ERROR
        assert not result.ok

    @pytest.mark.asyncio
    async def test_non_utf8_body_is_invalid_payload(
        self, client: ApsemaClient, mocked_api: aioresponses
    ) -> None:
        mocked_api.post(
            DAILY_URL, body=b"\xff\xfe<html>caf\xe9</html>", content_type="text/html"
        )

        result = await client.dashboard.get_daily_energy(SESSION)

        assert result.outcome is FetchOutcome.INVALID_PAYLOAD

    @pytest.mark.asyncio
    async def test_non_utf8_error_page_is_invalid_session(
        self, client: ApsemaClient, mocked_api: aioresponses
    ) -> None:
        mocked_api.post(
            DAILY_URL,
            body=b"<!DOCTYPE html><html>Fran\xe7ais</html>",
            content_type="text/html",
        )

        result = await client.dashboard.get_daily_energy(SESSION)

        assert result.outcome is FetchOutcome.INVALID_SESSION
