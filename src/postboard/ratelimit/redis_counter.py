from __future__ import annotations

import typing as t

import redis.asyncio as redis_asyncio
from redis.exceptions import RedisError

from ..core.errors import StoreFailureError
from .base import CounterStore


class RedisCounterStore(CounterStore):
    """Redis-backed counters.

    `INCR` and `EXPIRE` are sent in one `MULTI/EXEC` transaction so a counter
    can never be left behind without an expiry.
    """

    def __init__(self, client: t.Optional[t.Any] = None, *, url: str = "redis://localhost:6379/0") -> None:
        self._redis = client if client is not None else redis_asyncio.from_url(url, decode_responses=True)

    async def incr_with_expiry(self, key: str, ttl_seconds: float) -> int:
        ttl_ms = max(1, int(ttl_seconds * 1000))
        try:
            async with self._redis.pipeline(transaction=True) as pipe:
                pipe.incr(key)
                pipe.pexpire(key, ttl_ms)
                count, _ = await pipe.execute()
        except RedisError as exc:
            raise StoreFailureError("failed to check rate limit") from exc
        return int(count)

    async def get(self, key: str) -> t.Optional[int]:
        try:
            raw = await self._redis.get(key)
        except RedisError as exc:
            raise StoreFailureError("failed to get rate limit count") from exc
        if raw is None:
            return None
        return int(raw)

    async def delete(self, key: str) -> None:
        try:
            await self._redis.delete(key)
        except RedisError as exc:
            raise StoreFailureError("failed to reset rate limit") from exc
