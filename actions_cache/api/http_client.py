"""
Async HTTP client for the artifact cache API.

Attaches the session credentials, classifies every response through the
response translator and maps network failures to TransportError.
"""

import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any, Protocol

import httpx
import structlog

from actions_cache.api.responses import check_response, read_limited
from actions_cache.config import ActionsCacheConfig
from actions_cache.exceptions import TransportError
from actions_cache.session import Session

logger = structlog.get_logger(__name__)


class Sink(Protocol):
    """Anything bytes can be written to (file, BytesIO, hasher wrapper)."""

    def write(self, data: bytes, /) -> Any: ...


class AsyncHttpClient:
    """Async HTTP client for the artifact cache API."""

    def __init__(
        self,
        session: Session,
        config: ActionsCacheConfig,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """
        Args:
            session: Authenticated session.
            config: Client configuration.
            transport: Optional transport for testing (mock transport).
        """
        self._session = session
        self._config = config
        self._transport = transport

        self._client: httpx.AsyncClient | None = None
        self._client_lock = asyncio.Lock()

    async def __aenter__(self) -> "AsyncHttpClient":
        await self._ensure_client()
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self._close()

    @property
    def session(self) -> Session:
        return self._session

    async def _ensure_client(self) -> httpx.AsyncClient:
        async with self._client_lock:
            if self._client is None:
                self._client = httpx.AsyncClient(
                    base_url=self._session.api_url,
                    timeout=self._config.timeout,
                    transport=self._transport,
                    headers={"User-Agent": self._config.user_agent},
                )
        return self._client

    async def _close(self) -> None:
        async with self._client_lock:
            if self._client is None:
                logger.debug("Client not open.")
                return
            await self._client.aclose()
            self._client = None

    def _require_client(self) -> httpx.AsyncClient:
        if self._client is None:
            msg = "HTTP client not initialized. Use 'async with' first."
            raise RuntimeError(msg)
        return self._client

    @asynccontextmanager
    async def _stream(self, method: str, url: str, **kwargs: Any) -> AsyncIterator[httpx.Response]:
        client = self._require_client()
        try:
            async with client.stream(method, url, **kwargs) as response:
                yield response
        except httpx.TransportError as e:
            msg = f"{method} {url} failed: {e}"
            raise TransportError(msg, error_type=type(e).__name__) from e

    async def request(
        self,
        method: str,
        path: str,
        *,
        json: dict[str, Any] | None = None,
        params: dict[str, Any] | None = None,
        content: bytes | None = None,
        headers: dict[str, str] | None = None,
    ) -> bytes:
        """
        Make an authenticated API request.

        Args:
            method: HTTP method (GET, POST, PATCH).
            path: Path relative to the API root (e.g. "caches/12").
            json: JSON body.
            params: Query parameters.
            content: Raw request body.
            headers: Extra headers.

        Returns:
            Response body, truncated to the configured body limit.

        Raises:
            RemoteAPIError: If the service returned a structured error.
            ProtocolError: If the response status was not 2xx.
            TransportError: If the request failed at the network level.
        """
        request_headers = {**self._session.headers, **(headers or {})}
        limit = self._config.response_body_limit
        async with self._stream(
            method,
            path,
            json=json,
            params=params,
            content=content,
            headers=request_headers,
        ) as response:
            await check_response(response, limit=limit)
            return await read_limited(response, limit)

    async def stream_to(self, url: str, sink: Sink) -> int:
        """
        Stream an unauthenticated GET into a sink.

        Security:
            This method accepts arbitrary URLs and attaches no credentials.
            Only pass archive URLs returned by the cache service.

        Args:
            url: Absolute, pre-authorized URL.
            sink: Destination for the body.

        Returns:
            Number of bytes written.

        Raises:
            RemoteAPIError: If the archive service returned a structured error.
            ProtocolError: If the response status was not 2xx.
            TransportError: If the transfer failed at the network level.
        """
        written = 0
        async with self._stream("GET", url) as response:
            await check_response(response, limit=self._config.response_body_limit)
            async for chunk in response.aiter_bytes(self._config.download_chunk_size):
                sink.write(chunk)
                written += len(chunk)
        return written
