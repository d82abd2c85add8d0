"""Entry point that wires the orchestrators to concrete stores."""

from __future__ import annotations

import asyncio
import logging
import typing as t
from datetime import datetime

import redis.asyncio as redis_asyncio

from .cache.base import CacheStore
from .cache.redis_cache import RedisCacheStore
from .core.cache_aside import CacheAside
from .core.create_post import CreatedPost, CreatePost, CreatePostCommand
from .core.errors import CacheError
from .core.get_post import GetPost
from .core.keys import CityDirectory, TTLPolicy
from .core.list_posts import ListPosts, ListPostsQuery
from .core.models import DEFAULT_PAGE, DEFAULT_PAGE_SIZE, Page, Post
from .core.search_posts import SearchPosts, SearchPostsQuery
from .ratelimit.base import RateLimiter
from .ratelimit.limiter import FixedWindowRateLimiter
from .ratelimit.redis_counter import RedisCounterStore
from .storage.base import PostRepository
from .storage.sql import SQLPostRepository
from .utils.config import PostboardConfig
from .utils.logging import setup_logging
from .utils.resilience import CircuitBreaker, CircuitBreakerConfig

_logger = logging.getLogger(__name__)

T = t.TypeVar("T")


class PostService:
    """Async facade over the four orchestrators.

    Each call is one unit of work; the service itself keeps no per-request
    state. `timeout` bounds every call, and cancelling the calling task
    cancels whichever store round trip is in flight.
    """

    def __init__(
        self,
        repo: PostRepository,
        cache: t.Optional[CacheStore],
        limiter: RateLimiter,
        *,
        config: t.Optional[PostboardConfig] = None,
        cities: t.Optional[CityDirectory] = None,
        ttl: t.Optional[TTLPolicy] = None,
    ) -> None:
        self.config = config or PostboardConfig()
        resilience = self.config.resilience
        breaker = CircuitBreaker(
            CircuitBreakerConfig(
                failure_threshold=resilience.cache_failure_threshold,
                reset_timeout_seconds=resilience.cache_reset_timeout_seconds,
            ),
            failure_types=(CacheError,),
        )
        cache_aside = CacheAside(
            cache if self.config.cache.enabled else None,
            breaker=breaker,
            retry_attempts=resilience.retry_max_attempts,
            retry_backoff_ms=resilience.retry_backoff_ms,
        )
        cities = cities or self.config.city_directory()
        ttl = ttl or self.config.cache.ttl_policy()
        self._timeout = resilience.request_timeout_seconds
        self._repo = repo
        self._cache = cache
        self.create_post = CreatePost(
            repo,
            cache_aside,
            limiter,
            limit=self.config.rate_limit.post_limit,
            window_seconds=self.config.rate_limit.post_window_seconds,
        )
        self.get_post = GetPost(repo, cache_aside, ttl)
        self.list_posts = ListPosts(repo, cache_aside, cities, ttl)
        self.search_posts = SearchPosts(repo, cache_aside, cities, ttl)

    async def _run(self, coro: t.Awaitable[T]) -> T:
        if self._timeout is None:
            return await coro
        return await asyncio.wait_for(coro, timeout=self._timeout)

    async def create(
        self,
        *,
        company: str,
        city_code: str,
        city_name: str,
        content: str,
        client_id: str,
        occurred_at: t.Optional[datetime] = None,
    ) -> CreatedPost:
        cmd = CreatePostCommand(
            company=company,
            city_code=city_code,
            city_name=city_name,
            content=content,
            client_id=client_id,
            occurred_at=occurred_at,
        )
        return await self._run(self.create_post.execute(cmd))

    async def get(self, post_id: str) -> Post:
        return await self._run(self.get_post.execute(post_id))

    async def list(
        self, city_code: t.Optional[str] = None, page: int = DEFAULT_PAGE, page_size: int = DEFAULT_PAGE_SIZE
    ) -> Page:
        return await self._run(self.list_posts.execute(ListPostsQuery(city_code, page, page_size)))

    async def search(
        self,
        keyword: str,
        city_code: t.Optional[str] = None,
        page: int = DEFAULT_PAGE,
        page_size: int = DEFAULT_PAGE_SIZE,
    ) -> Page:
        return await self._run(self.search_posts.execute(SearchPostsQuery(keyword, city_code, page, page_size)))

    async def health(self) -> t.Dict[str, bool]:
        cache_ok = await self._cache.ping() if self._cache is not None else False
        return {"database": await self._repo.is_healthy(), "cache": cache_ok}


def build_service(config: t.Optional[PostboardConfig] = None) -> PostService:
    """Build a PostService backed by Redis and SQLAlchemy from `config`."""
    config = config or PostboardConfig.from_env()
    setup_logging(config.logging.level, config.logging.format)
    client = redis_asyncio.from_url(
        config.redis.url,
        decode_responses=True,
        max_connections=config.redis.max_connections,
        socket_timeout=config.redis.socket_timeout_seconds,
    )
    repo = SQLPostRepository.from_url(
        config.database.url,
        pool_size=config.database.pool_size,
        max_overflow=config.database.max_overflow,
    )
    _logger.info("Building post service (cache enabled: %s)", config.cache.enabled)
    return PostService(
        repo,
        RedisCacheStore(client, scan_count=config.cache.scan_count),
        FixedWindowRateLimiter(RedisCounterStore(client)),
        config=config,
    )
