from .base import CounterStore, InMemoryCounterStore, RateLimiter
from .limiter import FixedWindowRateLimiter
from .redis_counter import RedisCounterStore

__all__ = [
    "CounterStore",
    "InMemoryCounterStore",
    "RedisCounterStore",
    "RateLimiter",
    "FixedWindowRateLimiter",
]
