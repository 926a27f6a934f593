import pytest
import structlog

from actions_cache.environment import session_from_env
from actions_cache.exceptions import ConfigurationError
from actions_cache.session import Session

logger = structlog.get_logger(__name__)


def live_session_or_none() -> Session | None:
    """Session from the environment, or None when credentials are absent or unusable."""
    try:
        return session_from_env()
    except ConfigurationError as e:
        logger.warning("Ignoring unusable cache credentials", error=str(e))
        return None


def pytest_collection_modifyitems(config: pytest.Config, items: list) -> None:
    if live_session_or_none() is not None:
        return
    mark_expr = getattr(config.option, "markexpr", "")
    if "integration" in mark_expr:
        return
    skip = pytest.mark.skip(reason="ACTIONS_RUNTIME_TOKEN / ACTIONS_CACHE_URL not set or invalid")
    for item in items:
        if item.get_closest_marker("integration"):
            item.add_marker(skip)


@pytest.fixture(scope="session")
def live_session() -> Session:
    session = live_session_or_none()
    if session is None:
        pytest.fail("ACTIONS_RUNTIME_TOKEN and ACTIONS_CACHE_URL must be set to run integration tests.")
    return session
