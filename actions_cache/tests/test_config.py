import pytest

from actions_cache.config import ActionsCacheConfig


def test_defaults() -> None:
    config = ActionsCacheConfig()

    assert config.upload_chunk_size == 32 * 1024 * 1024
    assert config.upload_concurrency == 4
    assert config.response_body_limit == 32 * 1024
    assert config.timeout is None


@pytest.mark.parametrize(
    "field",
    ["upload_chunk_size", "upload_concurrency", "response_body_limit", "download_chunk_size"],
)
def test_non_positive_sizes_rejected(field: str) -> None:
    with pytest.raises(ValueError, match=field):
        ActionsCacheConfig(**{field: 0})


def test_non_positive_timeout_rejected() -> None:
    with pytest.raises(ValueError, match="timeout"):
        ActionsCacheConfig(timeout=0)


def test_config_is_frozen() -> None:
    config = ActionsCacheConfig()

    with pytest.raises(AttributeError):
        config.upload_concurrency = 8  # type: ignore[misc]
