"""
Business logic services for the artifact cache.
"""

from actions_cache.services.cache_service import CacheService
from actions_cache.services.upload_service import ChunkedUploader

__all__ = [
    "CacheService",
    "ChunkedUploader",
]
