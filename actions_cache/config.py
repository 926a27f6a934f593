"""
Actions cache client configuration.
"""

from dataclasses import dataclass

from actions_cache.constants import USER_AGENT


@dataclass(frozen=True, kw_only=True)
class ActionsCacheConfig:
    """
    Attributes:
        upload_chunk_size: Size in bytes of each uploaded range.
        upload_concurrency: Number of workers uploading ranges in parallel.
        response_body_limit: Maximum number of body bytes read for control decisions.
        download_chunk_size: Size of chunks streamed into the download sink.
        timeout: Request timeout in seconds. None leaves timeouts to the caller.
        user_agent: User-Agent header value.
    """

    upload_chunk_size: int = 32 * 1024 * 1024
    upload_concurrency: int = 4
    response_body_limit: int = 32 * 1024
    download_chunk_size: int = 64 * 1024
    timeout: float | None = None
    user_agent: str = USER_AGENT

    def __post_init__(self) -> None:
        if self.upload_chunk_size <= 0:
            msg = "upload_chunk_size must be positive"
            raise ValueError(msg)
        if self.upload_concurrency <= 0:
            msg = "upload_concurrency must be positive"
            raise ValueError(msg)
        if self.response_body_limit <= 0:
            msg = "response_body_limit must be positive"
            raise ValueError(msg)
        if self.download_chunk_size <= 0:
            msg = "download_chunk_size must be positive"
            raise ValueError(msg)
        if self.timeout is not None and self.timeout <= 0:
            msg = "timeout must be positive"
            raise ValueError(msg)
