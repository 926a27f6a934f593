import json
from collections.abc import AsyncIterator, Callable
from typing import Any

import jwt
import pytest
import pytest_asyncio

from actions_cache.api.http_client import AsyncHttpClient
from actions_cache.config import ActionsCacheConfig
from actions_cache.session import Session
from actions_cache.tests.utils.fake_service import FakeCacheService

BASE_URL = "https://artifactcache.test/abc123/"
DEFAULT_ACCESS_CONTROLS = [
    {"Scope": "refs/heads/main", "Permission": 3},
    {"Scope": "refs/heads/feature", "Permission": 1},
]


@pytest.fixture
def make_token() -> Callable[..., str]:
    def _make(claims: dict[str, Any] | None = None, **extra: Any) -> str:
        payload = {"ac": json.dumps(DEFAULT_ACCESS_CONTROLS)} if claims is None else claims
        return jwt.encode({**payload, **extra}, "not-verified", algorithm="HS256")

    return _make


@pytest.fixture
def session(make_token: Callable[..., str]) -> Session:
    return Session.from_token(make_token(), BASE_URL)


@pytest.fixture
def config() -> ActionsCacheConfig:
    return ActionsCacheConfig(upload_chunk_size=40, upload_concurrency=2)


@pytest.fixture
def fake_service() -> FakeCacheService:
    return FakeCacheService()


@pytest_asyncio.fixture
async def http(
    session: Session, config: ActionsCacheConfig, fake_service: FakeCacheService
) -> AsyncIterator[AsyncHttpClient]:
    async with AsyncHttpClient(session, config, transport=fake_service) as client:
        yield client
