"""
Artifact cache domain models and wire bodies.

These are immutable (frozen) dataclasses mirroring the JSON objects
exchanged with the cache service.
"""

import hashlib
from dataclasses import dataclass
from typing import Any

from actions_cache.constants import VERSION_CLIENT_NAME, VERSION_CLIENT_VERSION


def cache_version(key: str) -> str:
    """
    Derive the version tag sent alongside a cache key.

    The tag depends only on the client identity, never on ``key``: every key
    resolves to the same version namespace.

    Args:
        key: Cache key (unused).

    Returns:
        Lowercase hex SHA-256 digest.
    """
    del key
    salt = f"|{VERSION_CLIENT_NAME}-{VERSION_CLIENT_VERSION}"
    return hashlib.sha256(salt.encode()).hexdigest()


def _get_field(data: dict[str, Any], name: str, default: Any = None) -> Any:
    """Case-insensitive lookup of a JSON field."""
    if name in data:
        return data[name]
    lowered = name.lower()
    for key, value in data.items():
        if key.lower() == lowered:
            return value
    return default


@dataclass(frozen=True, kw_only=True)
class CacheEntry:
    """
    An existing cache entry returned by a lookup.

    Attributes:
        key: The key that matched (may be any of the requested keys).
        scope: Scope (git ref) the entry was saved under.
        archive_url: Pre-authorized URL of the archive.
    """

    key: str
    scope: str = ""
    archive_url: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "CacheEntry":
        return cls(
            key=_get_field(data, "cacheKey") or "",
            scope=_get_field(data, "scope") or "",
            archive_url=_get_field(data, "archiveLocation") or "",
        )


@dataclass(frozen=True, kw_only=True)
class ReserveCacheRequest:
    key: str
    version: str

    def to_dict(self) -> dict[str, Any]:
        return {"key": self.key, "version": self.version}


@dataclass(frozen=True, kw_only=True)
class ReserveCacheResponse:
    cache_id: int

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ReserveCacheResponse":
        cache_id = _get_field(data, "cacheId", 0)
        if not isinstance(cache_id, int) or isinstance(cache_id, bool):
            cache_id = 0
        return cls(cache_id=cache_id)


@dataclass(frozen=True, kw_only=True)
class CommitCacheRequest:
    size: int

    def to_dict(self) -> dict[str, Any]:
        return {"size": self.size}


@dataclass(frozen=True, kw_only=True)
class RemoteError:
    """Structured error object returned by the service on failure."""

    message: str = ""
    type_name: str = ""
    type_key: str = ""
    error_code: int = 0

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RemoteError":
        error_code = _get_field(data, "errorCode", 0)
        return cls(
            message=str(_get_field(data, "message") or ""),
            type_name=str(_get_field(data, "typeName") or ""),
            type_key=str(_get_field(data, "typeKey") or ""),
            error_code=error_code if isinstance(error_code, int) else 0,
        )
