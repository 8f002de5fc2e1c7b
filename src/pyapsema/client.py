"""APsystems EMA HTTP client.

This module provides the async transport shared by the session acquirer and
the dashboard and legacy endpoint clients.

Key Features:
- Async/await support with aiohttp
- One cookie jar per client, so separate accessories never share a session
- Short-lived GET response cache with stale-on-error fallback
- Support for injected aiohttp.ClientSession
"""

from __future__ import annotations

import asyncio
import copy
import json
import logging
from dataclasses import dataclass, field, replace
from datetime import datetime, timedelta
from typing import Any

import aiohttp
from aiohttp import ClientTimeout
from aiohttp.abc import AbstractCookieJar
from yarl import URL

from .constants import (
    CACHE_MAX_AGE,
    DASHBOARD_BASE_URL,
    DATA_TIMEOUT,
    LEGACY_BASE_URL,
    LOGIN_MAX_REDIRECTS,
    STATUS_SUCCESS,
)
from .endpoints import DashboardEndpoints, LegacyEndpoints
from .exceptions import (
    ApsemaAPIError,
    ApsemaConnectionError,
    ApsemaError,
    ApsemaHTTPStatusError,
)

_LOGGER = logging.getLogger(__name__)

CacheKey = tuple[str, str, str, str]


@dataclass
class HttpResponse:
    """Decoded HTTP response.

    ``data`` holds the parsed JSON body when the body is valid JSON, otherwise
    the raw text.
    """

    status: int
    data: Any
    url: str
    headers: dict[str, str] = field(default_factory=dict)
    from_cache: bool = False


def _decode_body(text: str) -> Any:
    """Parse a body as JSON, falling back to the raw text."""
    if not text.strip():
        return text
    try:
        return json.loads(text)
    except ValueError:
        return text


def _encode_part(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    return json.dumps(value, sort_keys=True, default=str)


class ApsemaClient:
    """APsystems EMA API client.

    Each instance owns its cookie jar and response cache. Give every polled
    accessory its own client; a shared client lets one poll's login replace
    the cookies of another poll in flight.

    Example:
        ```python
        async with ApsemaClient() as client:
            session = await acquire_session(client, user_id="1234567")
            result = await client.dashboard.get_daily_energy(session)
        ```
    """

    def __init__(
        self,
        *,
        dashboard_url: str = DASHBOARD_BASE_URL,
        legacy_url: str = LEGACY_BASE_URL,
        verify_ssl: bool = True,
        timeout: int = DATA_TIMEOUT,
        cache_max_age: timedelta = CACHE_MAX_AGE,
        session: aiohttp.ClientSession | None = None,
    ) -> None:
        """Initialize the EMA client.

        Args:
            dashboard_url: Base URL of the session-based dashboard API
            legacy_url: Base URL (with port) of the legacy ECU API
            verify_ssl: Whether to verify SSL certificates
            timeout: Default request timeout in seconds
            cache_max_age: Freshness window of cached GET responses
            session: Optional aiohttp ClientSession for session injection
        """
        self.dashboard_url = dashboard_url.rstrip("/")
        self.legacy_url = legacy_url.rstrip("/")
        self.verify_ssl = verify_ssl
        self.timeout = ClientTimeout(total=timeout)
        self.cache_max_age = cache_max_age

        # Session management
        self._session: aiohttp.ClientSession | None = session
        self._owns_session: bool = session is None
        self._cookie_jar: aiohttp.CookieJar | None = None

        # Response cache: (method, url, params, body) -> entry
        self._response_cache: dict[CacheKey, dict[str, Any]] = {}

        # Endpoint modules (lazy-loaded)
        self._dashboard_endpoints: DashboardEndpoints | None = None
        self._legacy_endpoints: LegacyEndpoints | None = None

    async def __aenter__(self) -> ApsemaClient:
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
    def cookie_jar(self) -> AbstractCookieJar:
        """Cookie jar used for every request made by this client."""
        if self._session is not None and not self._owns_session:
            return self._session.cookie_jar
        if self._cookie_jar is None:
            self._cookie_jar = aiohttp.CookieJar()
        return self._cookie_jar

    async def _get_session(self) -> aiohttp.ClientSession:
        """Get or create aiohttp session.

        Returns:
            aiohttp.ClientSession: The session to use for requests.
        """
        if self._session is not None and not self._owns_session:
            return self._session

        if self._session is None or self._session.closed:
            connector = aiohttp.TCPConnector(ssl=self.verify_ssl)
            self._session = aiohttp.ClientSession(
                connector=connector,
                timeout=self.timeout,
                cookie_jar=self.cookie_jar,
            )
            self._owns_session = True

        return self._session

    async def close(self) -> None:
        """Close the session if we own it.

        Only closes the session if it was created by this client,
        not if it was injected.
        """
        if self._session and not self._session.closed and self._owns_session:
            await self._session.close()

    @property
    def dashboard(self) -> DashboardEndpoints:
        """Access the session-based dashboard endpoints."""
        if self._dashboard_endpoints is None:
            self._dashboard_endpoints = DashboardEndpoints(self)
        return self._dashboard_endpoints

    @property
    def legacy(self) -> LegacyEndpoints:
        """Access the legacy ECU endpoint."""
        if self._legacy_endpoints is None:
            self._legacy_endpoints = LegacyEndpoints(self)
        return self._legacy_endpoints

    # ============================================================================
    # Cookies
    # ============================================================================

    def clear_cookies(self) -> None:
        """Remove every cookie from the jar."""
        self.cookie_jar.clear()

    def set_cookies(self, cookies: dict[str, str], url: str | None = None) -> None:
        """Replace the jar contents with ``cookies`` scoped to ``url``'s host."""
        self.cookie_jar.clear()
        if cookies:
            self.cookie_jar.update_cookies(cookies, response_url=URL(url or self.dashboard_url))

    def cookies_for(self, url: str | None = None) -> dict[str, str]:
        """Return every cookie the jar holds for ``url``'s host, any path."""
        host = URL(url or self.dashboard_url).host or ""
        cookies: dict[str, str] = {}
        for morsel in self.cookie_jar:
            domain = morsel["domain"].lstrip(".")
            if host == domain or host.endswith(f".{domain}"):
                cookies[morsel.key] = morsel.value
        return cookies

    # ============================================================================
    # Response cache
    # ============================================================================

    def _get_cache_key(
        self, method: str, url: str, params: Any = None, data: Any = None
    ) -> CacheKey:
        """Generate a cache key from the request parts."""
        return (method.lower(), url, _encode_part(params or {}), _encode_part(data))

    def _is_cache_valid(self, cache_key: CacheKey) -> bool:
        """Check if a cached response is inside the freshness window."""
        entry = self._response_cache.get(cache_key)
        if entry is None:
            return False

        return datetime.now() - entry["timestamp"] < self.cache_max_age

    def _cache_response(self, cache_key: CacheKey, response: HttpResponse) -> None:
        """Cache a response with timestamp and purge expired entries."""
        self._response_cache[cache_key] = {
            "timestamp": datetime.now(),
            "response": replace(response, data=copy.deepcopy(response.data)),
        }
        self._purge_cache()

    def _purge_cache(self) -> None:
        """Drop entries older than twice the freshness window."""
        cutoff = datetime.now() - self.cache_max_age * 2
        expired = [
            key for key, entry in self._response_cache.items() if entry["timestamp"] < cutoff
        ]
        for key in expired:
            del self._response_cache[key]
        if expired:
            _LOGGER.debug("Purged %d expired cache entries", len(expired))

    def _cached_copy(self, cache_key: CacheKey) -> HttpResponse | None:
        entry = self._response_cache.get(cache_key)
        if entry is None:
            return None
        cached: HttpResponse = entry["response"]
        return HttpResponse(
            status=cached.status,
            data=copy.deepcopy(cached.data),
            url=cached.url,
            headers=dict(cached.headers),
            from_cache=True,
        )

    def clear_cache(self) -> None:
        """Clear all cached API responses."""
        removed = len(self._response_cache)
        self._response_cache.clear()
        _LOGGER.debug("Cache cleared (%d entries removed)", removed)

    def get_cache_stats(self) -> dict[str, int | dict[str, int]]:
        """Get cache statistics.

        Returns:
            dict with statistics:
                - total_entries: Number of cached responses
                - urls: Dict of cached URLs to entry counts
        """
        urls: dict[str, int] = {}
        for _method, url, _params, _data in self._response_cache:
            urls[url] = urls.get(url, 0) + 1

        return {
            "total_entries": len(self._response_cache),
            "urls": urls,
        }

    # ============================================================================
    # Requests
    # ============================================================================

    async def request(
        self,
        method: str,
        url: str,
        *,
        params: dict[str, Any] | None = None,
        data: Any = None,
        headers: dict[str, str] | None = None,
        timeout: float | None = None,
        accept: tuple[int, int] = STATUS_SUCCESS,
        max_redirects: int = LOGIN_MAX_REDIRECTS,
        use_cache: bool = True,
    ) -> HttpResponse:
        """Make an HTTP request.

        GET requests are answered from the cache while the cached entry is
        fresh. If a GET fails and any cached entry exists for the same
        request, the stale entry is returned instead of raising.

        Args:
            method: HTTP method (GET, POST, etc.)
            url: Absolute URL
            params: Query parameters
            data: Request body (string or form mapping)
            headers: Extra request headers
            timeout: Total timeout in seconds (default: client timeout)
            accept: Accepted status range as ``(low, high)``, high exclusive
            max_redirects: Redirects to follow
            use_cache: Whether a GET may be served from or stored in the cache

        Returns:
            HttpResponse: Decoded response

        Raises:
            ApsemaConnectionError: If the connection fails or times out
            ApsemaHTTPStatusError: If the status is outside ``accept``
        """
        is_get = method.upper() == "GET"
        cacheable = is_get and use_cache
        cache_key = self._get_cache_key(method, url, params, data) if cacheable else None

        if cache_key is not None and self._is_cache_valid(cache_key):
            cached = self._cached_copy(cache_key)
            if cached is not None:
                _LOGGER.debug("Using cached response for %s %s", method.upper(), url)
                return cached

        try:
            response = await self._send(
                method,
                url,
                params=params,
                data=data,
                headers=headers,
                timeout=timeout,
                accept=accept,
                max_redirects=max_redirects,
            )
        except ApsemaError as err:
            stale = self._cached_copy(cache_key) if cache_key is not None else None
            if stale is not None:
                _LOGGER.warning("Request to %s failed (%s), serving cached response", url, err)
                return stale
            raise

        if cache_key is not None and STATUS_SUCCESS[0] <= response.status < STATUS_SUCCESS[1]:
            self._cache_response(cache_key, response)

        return response

    async def _send(
        self,
        method: str,
        url: str,
        *,
        params: dict[str, Any] | None,
        data: Any,
        headers: dict[str, str] | None,
        timeout: float | None,
        accept: tuple[int, int],
        max_redirects: int,
    ) -> HttpResponse:
        session = await self._get_session()
        request_timeout = ClientTimeout(total=timeout) if timeout is not None else self.timeout

        try:
            async with session.request(
                method,
                url,
                params=params,
                data=data,
                headers=headers,
                timeout=request_timeout,
                allow_redirects=max_redirects > 0,
                max_redirects=max(max_redirects, 1),
            ) as response:
                # EMA error pages are not always UTF-8
                text = await response.text(errors="replace")
                status = response.status
                response_headers = dict(response.headers)
                final_url = str(response.url)
        except asyncio.TimeoutError as err:
            raise ApsemaConnectionError(f"Timeout requesting {url}") from err
        except aiohttp.ClientError as err:
            raise ApsemaConnectionError(f"Connection error: {err}") from err
        except Exception as err:
            raise ApsemaAPIError(f"Unexpected error: {err}") from err

        low, high = accept
        if not low <= status < high:
            raise ApsemaHTTPStatusError(status, url, text)

        _LOGGER.debug("%s %s -> HTTP %d", method.upper(), url, status)
        return HttpResponse(
            status=status,
            data=_decode_body(text),
            url=final_url,
            headers=response_headers,
        )
