import io
import json
from unittest.mock import AsyncMock, Mock, patch

import pytest

from actions_cache.api.http_client import AsyncHttpClient
from actions_cache.config import ActionsCacheConfig
from actions_cache.exceptions import InvalidResponseError, ProtocolError, RemoteAPIError
from actions_cache.models.cache import CacheEntry
from actions_cache.services.cache_service import CacheService
from actions_cache.services.upload_service import ChunkedUploader
from actions_cache.sources import BytesSource
from actions_cache.tests.utils.fake_service import FakeCacheService


@pytest.fixture
def cache_service(http: AsyncHttpClient, config: ActionsCacheConfig) -> CacheService:
    return CacheService(http, config)


@pytest.mark.asyncio
async def test_save_reserves_uploads_and_commits_once(
    cache_service: CacheService, fake_service: FakeCacheService
) -> None:
    data = bytes(range(100))

    cache_id = await cache_service.save("deps-abc", BytesSource(data), len(data))

    assert [r.method for r in fake_service.requests_for("POST", "caches")] == ["POST", "POST"]
    assert len(fake_service.chunk_requests) == 3
    commits = fake_service.commit_requests
    assert len(commits) == 1
    assert commits[0].url.path.endswith(f"/caches/{cache_id}")
    assert json.loads(commits[0].content) == {"size": 100}
    assert fake_service.reservations[cache_id].committed


@pytest.mark.asyncio
async def test_save_commits_after_every_chunk(
    cache_service: CacheService, fake_service: FakeCacheService
) -> None:
    await cache_service.save("deps-abc", BytesSource(b"z" * 100), 100)

    methods = [r.method for r in fake_service.requests]
    assert methods[0] == "POST"
    assert methods[-1] == "POST"
    assert methods[1:-1] == ["PATCH"] * 3


@pytest.mark.asyncio
async def test_save_empty_entry_still_commits(
    cache_service: CacheService, fake_service: FakeCacheService
) -> None:
    cache_id = await cache_service.save("empty", BytesSource(b""), 0)

    assert fake_service.chunk_requests == []
    assert len(fake_service.commit_requests) == 1
    assert fake_service.reservations[cache_id].committed


@pytest.mark.asyncio
async def test_save_chunk_failure_skips_commit(
    cache_service: CacheService, fake_service: FakeCacheService
) -> None:
    fake_service.fail_chunk_offsets = {80}

    with pytest.raises(RemoteAPIError, match="Chunk at 80 rejected"):
        await cache_service.save("deps-abc", BytesSource(b"z" * 100), 100)

    assert fake_service.commit_requests == []


@pytest.mark.asyncio
async def test_save_reserve_conflict_skips_upload(
    cache_service: CacheService, fake_service: FakeCacheService
) -> None:
    await cache_service.save("deps-abc", BytesSource(b"z" * 10), 10)
    fake_service.requests.clear()

    with pytest.raises(RemoteAPIError, match="Cache already exists"):
        await cache_service.save("deps-abc", BytesSource(b"z" * 10), 10)

    assert [r.method for r in fake_service.requests] == ["POST"]


@pytest.mark.asyncio
async def test_save_invalid_reservation_skips_upload(config: ActionsCacheConfig) -> None:
    http = Mock()
    uploader = Mock(spec=ChunkedUploader)
    uploader.upload = AsyncMock()
    service = CacheService(http, config, uploader=uploader)

    with patch(
        "actions_cache.services.cache_service.reserve",
        new_callable=AsyncMock,
        side_effect=InvalidResponseError("Invalid response {}"),
    ), patch("actions_cache.services.cache_service.commit", new_callable=AsyncMock) as commit:
        with pytest.raises(InvalidResponseError):
            await service.save("deps", BytesSource(b"x"), 1)

    uploader.upload.assert_not_awaited()
    commit.assert_not_awaited()


@pytest.mark.asyncio
async def test_save_then_load_round_trip(
    cache_service: CacheService, fake_service: FakeCacheService
) -> None:
    data = b"artifact" * 20

    await cache_service.save("deps-linux-abc", BytesSource(data), len(data))
    entry = await cache_service.load("deps-linux-abc", "deps-linux-")

    assert entry is not None
    assert entry.key == "deps-linux-abc"

    sink = io.BytesIO()
    written = await cache_service.download(entry, sink)
    assert written == len(data)
    assert sink.getvalue() == data


@pytest.mark.asyncio
async def test_load_falls_back_to_prefix_key(
    cache_service: CacheService, fake_service: FakeCacheService
) -> None:
    await cache_service.save("deps-linux-old", BytesSource(b"old"), 3)

    entry = await cache_service.load("deps-linux-new", "deps-linux-")

    assert entry is not None
    assert entry.key == "deps-linux-old"


@pytest.mark.asyncio
async def test_load_miss_returns_none(cache_service: CacheService) -> None:
    assert await cache_service.load("nothing-here") is None


@pytest.mark.asyncio
async def test_download_missing_archive_raises(cache_service: CacheService) -> None:
    entry = CacheEntry(key="gone", archive_url="https://archive.test/archives/999")

    with pytest.raises(ProtocolError, match="404"):
        await cache_service.download(entry, io.BytesIO())
