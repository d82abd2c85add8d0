from __future__ import annotations

import logging
import typing as t

import redis.asyncio as redis_asyncio
from redis.exceptions import RedisError

from ..core.errors import CacheError, CacheMissError, ValidationError
from .base import CacheStore, check_key, check_ttl

_logger = logging.getLogger(__name__)

DEFAULT_SCAN_COUNT = 100


class RedisCacheStore(CacheStore):
    """Redis-backed cache store.

    - Values are stored as plain strings with `SET key value [EX ttl]`
    - Pattern deletes walk the keyspace with `SCAN MATCH COUNT` rather than
      `KEYS`, then remove every match with a single `DEL`
    """

    def __init__(
        self,
        client: t.Optional[t.Any] = None,
        *,
        url: str = "redis://localhost:6379/0",
        scan_count: int = DEFAULT_SCAN_COUNT,
    ) -> None:
        if scan_count <= 0:
            raise ValueError("scan_count must be positive")
        # decode_responses so GET and SCAN hand back str rather than bytes
        self._redis = client if client is not None else redis_asyncio.from_url(url, decode_responses=True)
        self._scan_count = scan_count

    async def get(self, key: str) -> str:
        check_key(key)
        try:
            raw = await self._redis.get(key)
        except RedisError as exc:
            raise CacheError(f"failed to get cache key {key}") from exc
        if raw is None:
            raise CacheMissError(key)
        if isinstance(raw, (bytes, bytearray)):
            return raw.decode()
        return raw

    async def set(self, key: str, value: str, ttl_seconds: float) -> None:
        check_key(key)
        check_ttl(ttl_seconds)
        # Redis EX takes whole seconds; round sub-second TTLs up so they still expire
        ex = max(1, int(round(ttl_seconds))) if ttl_seconds > 0 else None
        try:
            await self._redis.set(key, value, ex=ex)
        except RedisError as exc:
            raise CacheError(f"failed to set cache key {key}") from exc

    async def delete(self, key: str) -> None:
        check_key(key)
        try:
            await self._redis.delete(key)
        except RedisError as exc:
            raise CacheError(f"failed to delete cache key {key}") from exc

    async def delete_by_pattern(self, pattern: str) -> None:
        if not pattern:
            raise ValidationError("pattern cannot be empty")
        keys: t.List[str] = []
        cursor = 0
        try:
            while True:
                cursor, batch = await self._redis.scan(cursor=cursor, match=pattern, count=self._scan_count)
                keys.extend(batch)
                if int(cursor) == 0:
                    break
            if not keys:
                return
            await self._redis.delete(*keys)
        except RedisError as exc:
            raise CacheError(f"failed to delete cache keys matching {pattern}") from exc
        _logger.debug("Deleted %d cache keys matching %s", len(keys), pattern)

    async def ping(self) -> bool:
        try:
            return bool(await self._redis.ping())
        except RedisError:
            return False

    async def close(self) -> None:  # pragma: no cover - convenience
        await self._redis.aclose()
