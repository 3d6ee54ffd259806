"""HTTP transport using httpx for async requests.

Provides:
- Configurable timeouts
- Optional proxy and HTTP/2 support
- One connection pool per event loop
"""

from __future__ import annotations

import asyncio
import importlib.util
import os
import threading
from collections.abc import Mapping

import httpx

from claude_client.errors import TransportError
from claude_client.telemetry import get_logger
from claude_client.transport.base import TransportResponse

logger = get_logger(__name__)

_DEFAULT_TIMEOUT = 60.0
_DEFAULT_CONNECT_TIMEOUT = 10.0

_UA_VERSION: str | None = None


def _http2_enabled() -> bool:
    """Enable HTTP/2 only when optional dependency is present."""
    return importlib.util.find_spec("h2") is not None


def _trust_env_enabled() -> bool:
    """Use env proxy settings only when explicitly enabled."""
    return os.getenv("ANTHROPIC_HTTP_TRUST_ENV", "0") == "1"


def _get_ua_version() -> str:
    """Get package version for User-Agent (cached)."""
    global _UA_VERSION
    if _UA_VERSION is None:
        from importlib.metadata import PackageNotFoundError, version

        try:
            _UA_VERSION = version("claude-client-python")
        except PackageNotFoundError:
            _UA_VERSION = "0.0.0"
    return _UA_VERSION


async def _aclose_orphan(client: httpx.AsyncClient) -> None:
    """Close a client whose event loop is gone.

    Open connections of such a client belong to the dead loop and cannot be
    shut down cleanly; their sockets are released when collected.
    """
    try:
        await client.aclose()
    except RuntimeError as e:
        logger.debug("HTTP client of a finished event loop did not close cleanly", error=str(e))


class HttpTransport:
    """HTTP transport for the Messages API.

    httpx connection pools are bound to the event loop that created them,
    so a separate AsyncClient is kept for every loop the transport is used
    from (the caller's loop and the blocking bridge's loop).

    Example:
        >>> transport = HttpTransport("https://api.anthropic.com", timeout=30.0)
        >>> response = await transport.send("/v1/messages", payload, headers)
    """

    def __init__(
        self,
        base_url: str,
        *,
        timeout: float | None = None,
        proxy: str | None = None,
    ) -> None:
        """Initialize HTTP transport.

        Args:
            base_url: Base URL for API requests
            timeout: Request timeout in seconds
            proxy: Proxy URL
        """
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout if timeout is not None else _DEFAULT_TIMEOUT

        if proxy is not None:
            self._proxy: str | None = proxy
        elif _trust_env_enabled():
            self._proxy = os.getenv("ANTHROPIC_PROXY_URL")
        else:
            self._proxy = None

        self._clients: dict[asyncio.AbstractEventLoop, httpx.AsyncClient] = {}
        self._lock = threading.Lock()

    @property
    def base_url(self) -> str:
        return self._base_url

    @property
    def timeout(self) -> float:
        return self._timeout

    @property
    def proxy(self) -> str | None:
        return self._proxy

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client for the running event loop.

        Clients left behind by event loops that have since closed are closed
        and evicted first.
        """
        loop = asyncio.get_running_loop()
        with self._lock:
            stale = [
                self._clients.pop(other) for other in list(self._clients) if other.is_closed()
            ]
            client = self._clients.get(loop)
            if client is None:
                client = httpx.AsyncClient(
                    base_url=self._base_url,
                    timeout=httpx.Timeout(self._timeout, connect=_DEFAULT_CONNECT_TIMEOUT),
                    proxy=self._proxy,
                    http2=_http2_enabled(),
                    trust_env=_trust_env_enabled(),
                    headers={"User-Agent": f"claude-client-python/{_get_ua_version()}"},
                )
                self._clients[loop] = client
        for old in stale:
            await _aclose_orphan(old)
        return client

    async def send(
        self,
        endpoint: str,
        payload: bytes,
        headers: Mapping[str, str],
    ) -> TransportResponse:
        """POST a serialized payload.

        Args:
            endpoint: Request path (relative to base URL)
            payload: Serialized request body
            headers: Request headers

        Returns:
            Status, body and headers of the response

        Raises:
            TransportError: On network/connection errors
        """
        client = await self._get_client()
        url = f"{self._base_url}{endpoint}"

        try:
            response = await client.post(endpoint, content=payload, headers=dict(headers))
        except httpx.ConnectError as e:
            raise TransportError(f"Connection failed: {e}", url=url, cause=e) from e
        except httpx.TimeoutException as e:
            raise TransportError(f"Request timed out: {e}", url=url, cause=e) from e
        except httpx.HTTPError as e:
            raise TransportError(f"HTTP error: {e}", url=url, cause=e) from e

        logger.debug("HTTP response received", url=url, status=response.status_code)
        return TransportResponse(
            status=response.status_code,
            body=response.content,
            headers=dict(response.headers),
        )

    async def close(self) -> None:
        """Close the HTTP client of the running event loop.

        Clients of event loops that are no longer running are closed too.
        Clients of other running loops are closed by close() calls made on
        those loops.
        """
        loop = asyncio.get_running_loop()
        with self._lock:
            client = self._clients.pop(loop, None)
            orphans = [
                self._clients.pop(other)
                for other in list(self._clients)
                if not other.is_running()
            ]
        if client is not None:
            await client.aclose()
        for orphan in orphans:
            await _aclose_orphan(orphan)

    async def __aenter__(self) -> HttpTransport:
        return self

    async def __aexit__(self, exc_type: object, exc_val: object, exc_tb: object) -> None:
        await self.close()
