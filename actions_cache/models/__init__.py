"""
Domain models for the artifact cache.

These are immutable (frozen) dataclasses representing the core domain concepts.
"""

from actions_cache.models.cache import (
    CacheEntry,
    CommitCacheRequest,
    RemoteError,
    ReserveCacheRequest,
    ReserveCacheResponse,
    cache_version,
)
from actions_cache.models.scope import Permission, Scope, parse_scopes

__all__ = [
    # Scopes
    "Permission",
    "Scope",
    "parse_scopes",
    # Cache
    "CacheEntry",
    "CommitCacheRequest",
    "RemoteError",
    "ReserveCacheRequest",
    "ReserveCacheResponse",
    "cache_version",
]
