"""
Artifact cache API layer.

Provides async HTTP communication with the artifact cache service.
"""

from actions_cache.api.http_client import AsyncHttpClient, Sink
from actions_cache.api.responses import check_response, read_limited, translate_error

__all__ = ["AsyncHttpClient", "Sink", "check_response", "read_limited", "translate_error"]
