"""
Actions cache client facade.

This is the main entry point for users of the library. It provides a clean,
high-level API over the session, HTTP client and cache service.
"""

import asyncio
from collections.abc import Mapping
from typing import Self

import httpx
import structlog

from actions_cache.api.http_client import AsyncHttpClient, Sink
from actions_cache.config import ActionsCacheConfig
from actions_cache.environment import session_from_env
from actions_cache.models.cache import CacheEntry
from actions_cache.models.scope import Scope
from actions_cache.services.cache_service import CacheService
from actions_cache.session import Session
from actions_cache.sources import ByteSource

logger = structlog.get_logger(__name__)


class ActionsCacheClient:
    """
    Async client for the artifact cache.

    Example:
        ```python
        session = Session.from_token(token, "https://artifactcache.example/abc/")
        async with ActionsCacheClient(session) as cache:
            entry = await cache.load("deps-linux-abc123", "deps-linux-")
            if entry is None:
                await cache.save("deps-linux-abc123", BytesSource(data), len(data))
            else:
                with open("deps.tar", "wb") as f:
                    await cache.download(entry, f)
        ```

    Args:
        session: Authenticated session.
        config: Client configuration. Uses defaults if not provided.
        transport: Optional httpx transport for testing (mock transport).
    """

    def __init__(
        self,
        session: Session,
        config: ActionsCacheConfig | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._session = session
        self._config = config or ActionsCacheConfig()
        self._transport = transport

        self._http: AsyncHttpClient | None = None
        self._cache_service: CacheService | None = None

        self._initialized = False
        self._init_lock = asyncio.Lock()

    @classmethod
    def from_env(
        cls,
        config: ActionsCacheConfig | None = None,
        *,
        environ: Mapping[str, str] | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> "ActionsCacheClient | None":
        """
        Build a client from the runner environment.

        Returns:
            Client, or None when no cache credentials are available.
        """
        session = session_from_env(environ)
        if session is None:
            return None
        return cls(session, config, transport=transport)

    async def __aenter__(self) -> Self:
        """Enter async context."""
        await self._ensure_initialized()
        return self

    async def __aexit__(
        self, exc_type: type | None, exc_val: BaseException | None, exc_tb: object
    ) -> None:
        """Exit async context."""
        await self.close()

    async def _ensure_initialized(self) -> None:
        async with self._init_lock:
            if self._initialized:
                return

            self._http = AsyncHttpClient(self._session, self._config, transport=self._transport)
            await self._http.__aenter__()
            self._cache_service = CacheService(self._http, self._config)

            self._initialized = True
            logger.debug("Client initialized", url=self._session.api_url)

    async def close(self) -> None:
        """Close the client and release resources."""
        async with self._init_lock:
            if self._http:
                await self._http.__aexit__(None, None, None)
                self._http = None

            self._cache_service = None
            self._initialized = False
            logger.debug("Client closed")

    @property
    def session(self) -> Session:
        return self._session

    @property
    def scopes(self) -> tuple[Scope, ...]:
        """Scopes granted by the runtime token."""
        return self._session.scopes

    async def load(self, *keys: str) -> CacheEntry | None:
        """
        Look up an entry by candidate keys.

        Args:
            keys: Candidate keys, most specific first. The service falls back
                through them in order.

        Returns:
            The matching entry or None.

        Raises:
            ValueError: If no key is given.
            RemoteAPIError: If the service rejected the lookup.
        """
        return await self._service().load(*keys)

    async def save(self, key: str, source: ByteSource, size: int) -> int:
        """
        Store an entry.

        Args:
            key: Cache key.
            source: Random-access source of the entry bytes.
            size: Number of bytes to store from the start of ``source``.

        Returns:
            Id of the committed transaction.

        Raises:
            InvalidResponseError: If the reservation came back without an id.
            RemoteAPIError: If the service rejected a stage (e.g. key already reserved).
            TransportError: If a request failed at the network level.
        """
        return await self._service().save(key, source, size)

    async def download(self, entry: CacheEntry, sink: Sink) -> int:
        """
        Stream an entry's archive into ``sink``.

        Returns:
            Number of bytes written.
        """
        return await self._service().download(entry, sink)

    def _service(self) -> CacheService:
        if self._cache_service is None:
            msg = "Client not initialized. Use 'async with' first."
            raise RuntimeError(msg)
        return self._cache_service
