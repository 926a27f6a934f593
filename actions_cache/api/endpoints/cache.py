"""Artifact cache API endpoints (lookup, reserve, upload, commit, download)."""

import json

import structlog

from actions_cache.api.http_client import AsyncHttpClient, Sink
from actions_cache.exceptions import InvalidResponseError, ProtocolError
from actions_cache.models.cache import (
    CacheEntry,
    CommitCacheRequest,
    ReserveCacheRequest,
    ReserveCacheResponse,
    cache_version,
)

logger = structlog.get_logger(__name__)


async def lookup(http: AsyncHttpClient, keys: list[str]) -> CacheEntry | None:
    """
    Query for an existing entry.

    The service matches the keys in order, falling back to prefix matches.

    Args:
        http: Configured async HTTP client.
        keys: Candidate keys, most specific first.

    Returns:
        The matching entry, or None when nothing matched.
    """
    if not keys:
        msg = "At least one key is required"
        raise ValueError(msg)

    params = {"keys": ",".join(keys), "version": cache_version(keys[0])}
    logger.debug("Load cache", keys=keys, version=params["version"])
    body = await http.request("GET", "cache", params=params)
    if not body or (data := _decode_object(body)) is None:
        return None

    entry = CacheEntry.from_dict(data)
    if not entry.key:
        return None
    return entry


async def reserve(http: AsyncHttpClient, key: str) -> int:
    """
    Open a write transaction for a key.

    Returns:
        Non-zero cache id of the new transaction.

    Raises:
        InvalidResponseError: If the service answered without a cache id.
    """
    payload = ReserveCacheRequest(key=key, version=cache_version(key)).to_dict()
    logger.debug("Reserve cache", body=payload)
    body = await http.request("POST", "caches", json=payload)

    response = ReserveCacheResponse.from_dict(_decode_object(body, InvalidResponseError) or {})
    if response.cache_id == 0:
        msg = f"Invalid response {body.decode('utf-8', errors='replace')}"
        raise InvalidResponseError(msg, body=body)
    logger.debug("Reserved cache", cache_id=response.cache_id)
    return response.cache_id


async def upload_chunk(http: AsyncHttpClient, cache_id: int, offset: int, data: bytes) -> None:
    """Upload bytes ``[offset, offset + len(data))`` of a reserved entry."""
    end = offset + len(data) - 1
    logger.debug("Upload cache chunk", cache_id=cache_id, start=offset, end=end)
    body = await http.request(
        "PATCH",
        f"caches/{cache_id}",
        content=data,
        headers={
            "Content-Type": "application/octet-stream",
            "Content-Range": f"bytes {offset}-{end}/*",
        },
    )
    if body:
        logger.debug("Upload chunk response", cache_id=cache_id, body=body)


async def commit(http: AsyncHttpClient, cache_id: int, size: int) -> None:
    """Finalize a transaction with the total uploaded size."""
    logger.debug("Commit cache", cache_id=cache_id, size=size)
    body = await http.request(
        "POST", f"caches/{cache_id}", json=CommitCacheRequest(size=size).to_dict()
    )
    if body:
        logger.debug("Commit response", cache_id=cache_id, body=body)


async def download(http: AsyncHttpClient, entry: CacheEntry, sink: Sink) -> int:
    """Stream an entry's archive into a sink."""
    written = await http.stream_to(entry.archive_url, sink)
    logger.debug("Downloaded cache entry", key=entry.key, size=written)
    return written


def _decode_object(
    body: bytes, error_type: type[ProtocolError] = ProtocolError
) -> dict | None:
    """Decode a JSON object body; a JSON `null` decodes to None."""
    try:
        data = json.loads(body)
    except ValueError as e:
        msg = f"Failed to unmarshal {body.decode('utf-8', errors='replace')}"
        raise error_type(msg, body=body) from e
    if data is None:
        return None
    if not isinstance(data, dict):
        msg = f"Expected a JSON object, got {body.decode('utf-8', errors='replace')}"
        raise error_type(msg, body=body)
    return data
