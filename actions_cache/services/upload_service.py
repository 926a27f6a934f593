"""
Chunked upload coordinator.

Streams a random-access source into a reserved cache entry using a fixed
number of worker tasks, each uploading one contiguous range at a time.
"""

import asyncio

import structlog

from actions_cache.api.endpoints.cache import upload_chunk
from actions_cache.api.http_client import AsyncHttpClient
from actions_cache.config import ActionsCacheConfig
from actions_cache.core.error_group import ErrorGroup
from actions_cache.sources import ByteSource

logger = structlog.get_logger(__name__)


class _RangeCursor:
    """
    Hands out consecutive ``[start, end)`` ranges of ``[0, size)``.

    The lock covers only the cursor update, never a read or a request.
    """

    def __init__(self, size: int, chunk_size: int) -> None:
        self._size = size
        self._chunk_size = chunk_size
        self._next_offset = 0
        self._lock = asyncio.Lock()

    async def claim(self) -> tuple[int, int] | None:
        async with self._lock:
            start = self._next_offset
            if start >= self._size:
                return None
            end = min(start + self._chunk_size, self._size)
            self._next_offset = end
            return start, end


class ChunkedUploader:
    """
    Uploads a source into a reserved transaction in parallel ranges.

    Ranges are assigned in increasing order but may complete in any order.
    The first failing chunk cancels every other worker and is re-raised;
    chunks are never retried.
    """

    def __init__(self, http: AsyncHttpClient, config: ActionsCacheConfig) -> None:
        """
        Args:
            http: Async HTTP client.
            config: Supplies chunk size and worker count.
        """
        self._http = http
        self._chunk_size = config.upload_chunk_size
        self._concurrency = config.upload_concurrency

    async def upload(self, cache_id: int, source: ByteSource, size: int) -> None:
        """
        Upload ``[0, size)`` of ``source``.

        Args:
            cache_id: Transaction id returned by reserve.
            source: Source supporting concurrent positional reads.
            size: Total number of bytes to upload.

        Raises:
            ValueError: If size is negative.
            ActionsCacheError: The first chunk failure.
        """
        if size < 0:
            msg = "size must be non-negative"
            raise ValueError(msg)

        cursor = _RangeCursor(size, self._chunk_size)
        group = ErrorGroup()
        for _ in range(self._concurrency):
            group.go(self._worker(cache_id, source, cursor, group))
        await group.wait()
        logger.debug("Uploaded cache", cache_id=cache_id, size=size)

    async def _worker(
        self, cache_id: int, source: ByteSource, cursor: _RangeCursor, group: ErrorGroup
    ) -> None:
        while not group.failed:
            if (claimed := await cursor.claim()) is None:
                return
            start, end = claimed
            data = await asyncio.to_thread(source.read_at, start, end - start)
            if len(data) != end - start:
                msg = f"Source returned {len(data)} bytes for range {start}-{end - 1}"
                raise ValueError(msg)
            await upload_chunk(self._http, cache_id, start, data)
