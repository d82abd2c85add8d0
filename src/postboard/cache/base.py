from __future__ import annotations

import fnmatch
import time
import typing as t
from abc import ABC, abstractmethod

from ..core.errors import CacheMissError, ValidationError


def check_key(key: str) -> None:
    if not key:
        raise ValidationError("cache key cannot be empty")


def check_ttl(ttl_seconds: float) -> None:
    if ttl_seconds < 0:
        raise ValidationError("TTL cannot be negative")


class CacheStore(ABC):
    """String-keyed cache with per-entry TTL and glob invalidation.

    `get` raises CacheMissError for an absent key and CacheError for a
    transport failure. A TTL of zero means the entry never expires.
    """

    @abstractmethod
    async def get(self, key: str) -> str:  # pragma: no cover - interface
        raise NotImplementedError

    @abstractmethod
    async def set(self, key: str, value: str, ttl_seconds: float) -> None:  # pragma: no cover - interface
        raise NotImplementedError

    @abstractmethod
    async def delete(self, key: str) -> None:  # pragma: no cover - interface
        raise NotImplementedError

    @abstractmethod
    async def delete_by_pattern(self, pattern: str) -> None:  # pragma: no cover - interface
        raise NotImplementedError

    @abstractmethod
    async def ping(self) -> bool:  # pragma: no cover - interface
        raise NotImplementedError


class InMemoryCacheStore(CacheStore):
    """A process-local cache for dev/test.

    Same async interface and glob semantics as the Redis store; no eviction
    beyond TTL expiry.
    """

    def __init__(self, clock: t.Callable[[], float] = time.monotonic) -> None:
        self._store: t.Dict[str, t.Tuple[t.Optional[float], str]] = {}
        self._clock = clock

    def _live(self, key: str) -> t.Optional[str]:
        item = self._store.get(key)
        if item is None:
            return None
        expires_at, value = item
        if expires_at is not None and expires_at <= self._clock():
            self._store.pop(key, None)
            return None
        return value

    async def get(self, key: str) -> str:
        check_key(key)
        value = self._live(key)
        if value is None:
            raise CacheMissError(key)
        return value

    async def set(self, key: str, value: str, ttl_seconds: float) -> None:
        check_key(key)
        check_ttl(ttl_seconds)
        expires_at = self._clock() + ttl_seconds if ttl_seconds > 0 else None
        self._store[key] = (expires_at, value)

    async def delete(self, key: str) -> None:
        check_key(key)
        self._store.pop(key, None)

    async def delete_by_pattern(self, pattern: str) -> None:
        if not pattern:
            raise ValidationError("pattern cannot be empty")
        matches = [key for key in list(self._store) if fnmatch.fnmatchcase(key, pattern)]
        for key in matches:
            self._store.pop(key, None)

    async def ping(self) -> bool:
        return True

    def keys(self) -> t.List[str]:
        return [key for key in list(self._store) if self._live(key) is not None]

    def clear(self) -> None:
        self._store.clear()
