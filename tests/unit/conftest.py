"""Shared fixtures and fakes for unit tests."""

from __future__ import annotations

import uuid
from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock, MagicMock, Mock

import pytest

from postboard.cache.base import InMemoryCacheStore
from postboard.core.cache_aside import CacheAside
from postboard.core.errors import CacheError
from postboard.core.models import City, Post
from postboard.ratelimit.base import InMemoryCounterStore
from postboard.ratelimit.limiter import FixedWindowRateLimiter
from postboard.storage.base import InMemoryPostRepository
from postboard.utils.resilience import CircuitBreaker, CircuitBreakerConfig

BEIJING = City(code="beijing", name="北京")
SHANGHAI = City(code="shanghai", name="上海")
HANGZHOU = City(code="hangzhou", name="杭州")


class FakeClock:
    """Monotonic clock the tests advance by hand."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def make_post(
    city: City = BEIJING,
    company: str = "Acme Corp",
    content: str = "Unpaid overtime every weekend",
    created_at: datetime | None = None,
) -> Post:
    return Post(
        id=str(uuid.uuid4()),
        company=company,
        city=city,
        content=content,
        created_at=created_at or datetime(2026, 1, 6, 14, 0, tzinfo=timezone.utc),
    )


def make_posts(count: int, city: City = BEIJING) -> list[Post]:
    """`count` posts, one minute apart, oldest first."""
    base = datetime(2026, 1, 6, 14, 0, tzinfo=timezone.utc)
    return [make_post(city=city, created_at=base + timedelta(minutes=i)) for i in range(count)]


@pytest.fixture
def post_factory():
    return make_post


@pytest.fixture
def posts_factory():
    return make_posts


@pytest.fixture
def cities():
    return {"beijing": BEIJING, "shanghai": SHANGHAI, "hangzhou": HANGZHOU}


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def memory_cache(clock):
    return InMemoryCacheStore(clock=clock)


@pytest.fixture
def counters(clock):
    return InMemoryCounterStore(clock=clock)


@pytest.fixture
def limiter(counters):
    return FixedWindowRateLimiter(counters)


@pytest.fixture
def repo():
    return InMemoryPostRepository()


@pytest.fixture
def spy_repo(repo):
    """In-memory repository wrapped so tests can count calls."""
    spy = Mock(wraps=repo)
    spy.save = AsyncMock(side_effect=repo.save)
    spy.find_by_id = AsyncMock(side_effect=repo.find_by_id)
    spy.find_by_city = AsyncMock(side_effect=repo.find_by_city)
    spy.find_all = AsyncMock(side_effect=repo.find_all)
    spy.search = AsyncMock(side_effect=repo.search)
    spy.is_healthy = AsyncMock(return_value=True)
    return spy


@pytest.fixture
def cache_aside(memory_cache):
    return CacheAside(memory_cache, retry_attempts=1)


@pytest.fixture
def failing_cache():
    """Cache whose every operation fails at the transport level."""
    cache = AsyncMock()
    cache.get = AsyncMock(side_effect=CacheError("connection refused"))
    cache.set = AsyncMock(side_effect=CacheError("connection refused"))
    cache.delete = AsyncMock(side_effect=CacheError("connection refused"))
    cache.delete_by_pattern = AsyncMock(side_effect=CacheError("connection refused"))
    cache.ping = AsyncMock(return_value=False)
    return cache


@pytest.fixture
def breaker(clock):
    return CircuitBreaker(
        CircuitBreakerConfig(failure_threshold=2, reset_timeout_seconds=30),
        failure_types=(CacheError,),
        clock=clock,
    )


@pytest.fixture
def mock_redis_client():
    """Mock redis.asyncio client."""
    client = AsyncMock()
    client.ping = AsyncMock(return_value=True)
    client.get = AsyncMock(return_value=None)
    client.set = AsyncMock(return_value=True)
    client.delete = AsyncMock(return_value=1)
    client.scan = AsyncMock(return_value=(0, []))
    return client


@pytest.fixture
def mock_pipeline():
    """Mock MULTI/EXEC pipeline usable as `async with client.pipeline() as pipe`."""
    pipe = MagicMock()
    pipe.incr = Mock()
    pipe.pexpire = Mock()
    pipe.execute = AsyncMock(return_value=[1, True])
    pipe.__aenter__ = AsyncMock(return_value=pipe)
    pipe.__aexit__ = AsyncMock(return_value=None)
    return pipe
