"""postboard

Query and write orchestration for city-tagged company posts: cache-aside
reads over a relational store, write-path cache invalidation, and per-client
write throttling.
"""

from .core import (
    CacheAside,
    City,
    CityDirectory,
    CreatedPost,
    CreatePost,
    CreatePostCommand,
    GetPost,
    ListPosts,
    ListPostsQuery,
    NotFoundError,
    Page,
    Post,
    PostboardError,
    RateLimitedError,
    SearchPosts,
    SearchPostsQuery,
    StoreFailureError,
    TTLPolicy,
    ValidationError,
    to_public,
)
from .cache import CacheStore, InMemoryCacheStore, RedisCacheStore
from .ratelimit import (
    CounterStore,
    FixedWindowRateLimiter,
    InMemoryCounterStore,
    RateLimiter,
    RedisCounterStore,
)
from .storage import InMemoryPostRepository, PostRepository, SQLPostRepository
from .service import PostService, build_service
from .utils.config import PostboardConfig

__all__ = [
    "PostService",
    "build_service",
    "PostboardConfig",
    "CreatePost",
    "GetPost",
    "ListPosts",
    "SearchPosts",
    "CacheAside",
    "CreatePostCommand",
    "CreatedPost",
    "ListPostsQuery",
    "SearchPostsQuery",
    "City",
    "Post",
    "Page",
    "CityDirectory",
    "TTLPolicy",
    "CacheStore",
    "InMemoryCacheStore",
    "RedisCacheStore",
    "CounterStore",
    "InMemoryCounterStore",
    "RedisCounterStore",
    "RateLimiter",
    "FixedWindowRateLimiter",
    "PostRepository",
    "InMemoryPostRepository",
    "SQLPostRepository",
    "PostboardError",
    "ValidationError",
    "NotFoundError",
    "RateLimitedError",
    "StoreFailureError",
    "to_public",
]

__version__ = "0.1.0"
