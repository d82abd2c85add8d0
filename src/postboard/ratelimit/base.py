from __future__ import annotations

import time
import typing as t
from abc import ABC, abstractmethod


class CounterStore(ABC):
    """Integer counters with expiry.

    Implementations raise StoreFailureError when the backing store cannot be
    reached.
    """

    @abstractmethod
    async def incr_with_expiry(self, key: str, ttl_seconds: float) -> int:  # pragma: no cover - interface
        """Increment `key` and (re)set its expiry as one atomic step; return the new count."""
        raise NotImplementedError

    @abstractmethod
    async def get(self, key: str) -> t.Optional[int]:  # pragma: no cover - interface
        raise NotImplementedError

    @abstractmethod
    async def delete(self, key: str) -> None:  # pragma: no cover - interface
        raise NotImplementedError


class RateLimiter(ABC):
    @abstractmethod
    async def allow(self, key: str, limit: int, window_seconds: float) -> bool:  # pragma: no cover - interface
        raise NotImplementedError

    @abstractmethod
    async def get_remaining(self, key: str, limit: int) -> int:  # pragma: no cover - interface
        raise NotImplementedError

    @abstractmethod
    async def reset(self, key: str) -> None:  # pragma: no cover - interface
        raise NotImplementedError


class InMemoryCounterStore(CounterStore):
    """Process-local counters for dev/test.

    Single event loop, no awaits between read and write, so increments are
    atomic without a lock.
    """

    def __init__(self, clock: t.Callable[[], float] = time.monotonic) -> None:
        self._counters: t.Dict[str, t.Tuple[int, float]] = {}
        self._clock = clock

    def _current(self, key: str) -> t.Optional[int]:
        item = self._counters.get(key)
        if item is None:
            return None
        count, expires_at = item
        if expires_at <= self._clock():
            self._counters.pop(key, None)
            return None
        return count

    async def incr_with_expiry(self, key: str, ttl_seconds: float) -> int:
        count = (self._current(key) or 0) + 1
        self._counters[key] = (count, self._clock() + ttl_seconds)
        return count

    async def get(self, key: str) -> t.Optional[int]:
        return self._current(key)

    async def delete(self, key: str) -> None:
        self._counters.pop(key, None)
