from .base import CacheStore, InMemoryCacheStore
from .redis_cache import RedisCacheStore

__all__ = ["CacheStore", "InMemoryCacheStore", "RedisCacheStore"]
