"""
Actions cache Python client.

An async client for the CI artifact cache: look up entries by key, download
their archives, and store new entries through reserve/upload/commit.

Example:
    ```python
    from actions_cache import ActionsCacheClient, BytesSource

    client = ActionsCacheClient.from_env()
    if client is not None:
        async with client as cache:
            entry = await cache.load("build-abc123", "build-")
            if entry is None:
                await cache.save("build-abc123", BytesSource(data), len(data))
    ```
"""

from actions_cache.client import ActionsCacheClient
from actions_cache.config import ActionsCacheConfig
from actions_cache.environment import decrypt_token, session_from_env
from actions_cache.exceptions import (
    ActionsCacheError,
    ConfigurationError,
    InvalidResponseError,
    ProtocolError,
    RemoteAPIError,
    TransportError,
)
from actions_cache.models.cache import CacheEntry, cache_version
from actions_cache.models.scope import Permission, Scope
from actions_cache.session import Session
from actions_cache.sources import ByteSource, BytesSource, FileSource

__version__ = "0.1.0"

__all__ = [
    # Main client
    "ActionsCacheClient",
    "ActionsCacheConfig",
    "Session",
    "session_from_env",
    "decrypt_token",
    # Models
    "CacheEntry",
    "Permission",
    "Scope",
    "cache_version",
    # Sources
    "ByteSource",
    "BytesSource",
    "FileSource",
    # Exceptions
    "ActionsCacheError",
    "ConfigurationError",
    "ProtocolError",
    "InvalidResponseError",
    "RemoteAPIError",
    "TransportError",
]
