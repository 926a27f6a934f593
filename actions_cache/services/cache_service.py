"""
Cache service.

Sequences the reserve/upload/commit protocol and exposes lookups and
archive downloads on top of the endpoint functions.
"""

import structlog

from actions_cache.api.endpoints.cache import commit, download, lookup, reserve
from actions_cache.api.http_client import AsyncHttpClient, Sink
from actions_cache.config import ActionsCacheConfig
from actions_cache.models.cache import CacheEntry
from actions_cache.services.upload_service import ChunkedUploader
from actions_cache.sources import ByteSource

logger = structlog.get_logger(__name__)


class CacheService:
    """
    Reads and writes cache entries.

    Holds no mutable state: lookups and saves for different keys can run
    concurrently on one instance.
    """

    def __init__(
        self,
        http: AsyncHttpClient,
        config: ActionsCacheConfig,
        uploader: ChunkedUploader | None = None,
    ) -> None:
        """
        Args:
            http: Async HTTP client.
            config: Client configuration.
            uploader: Chunk uploader; built from ``config`` if not provided.
        """
        self._http = http
        self._uploader = uploader or ChunkedUploader(http, config)

    async def load(self, *keys: str) -> CacheEntry | None:
        """
        Find an entry matching any of the keys.

        Args:
            keys: Candidate keys, most specific first.

        Returns:
            The entry, or None on a cache miss.
        """
        entry = await lookup(self._http, list(keys))
        if entry is None:
            logger.debug("Cache miss", keys=keys)
        else:
            logger.debug("Cache hit", key=entry.key, scope=entry.scope)
        return entry

    async def save(self, key: str, source: ByteSource, size: int) -> int:
        """
        Store ``size`` bytes of ``source`` under ``key``.

        Reserve, upload and commit run strictly in order; a failure skips the
        later stages. An abandoned reservation is left to the service.

        Returns:
            Id of the committed transaction.
        """
        cache_id = await reserve(self._http, key)
        await self._uploader.upload(cache_id, source, size)
        await commit(self._http, cache_id, size)
        logger.info("Cache saved", key=key, cache_id=cache_id, size=size)
        return cache_id

    async def download(self, entry: CacheEntry, sink: Sink) -> int:
        """
        Stream an entry's archive into a sink.

        Returns:
            Number of bytes written.
        """
        return await download(self._http, entry, sink)
