from __future__ import annotations

import logging

from ..core.errors import StoreFailureError, ValidationError
from .base import CounterStore, RateLimiter

_logger = logging.getLogger(__name__)


def _check_key(key: str) -> None:
    if not key:
        raise ValidationError("rate limit key cannot be empty")


def _check_limit(limit: int) -> None:
    if limit <= 0:
        raise ValidationError("rate limit must be greater than 0")


class FixedWindowRateLimiter(RateLimiter):
    """Counts calls per key inside a window that starts at the first call.

    Every call pushes the expiry out to `window_seconds` again, so a key that
    keeps being hit before it expires stays in the same window. A denied
    caller only recovers after `window_seconds` of silence, or when the key
    itself changes (the post-write key rolls over every hour).
    """

    def __init__(self, counters: CounterStore) -> None:
        self._counters = counters

    async def allow(self, key: str, limit: int, window_seconds: float) -> bool:
        _check_key(key)
        _check_limit(limit)
        if window_seconds <= 0:
            raise ValidationError("rate limit window must be greater than 0")
        try:
            count = await self._counters.incr_with_expiry(key, window_seconds)
        except StoreFailureError:
            raise
        except Exception as exc:
            raise StoreFailureError("failed to check rate limit") from exc
        allowed = count <= limit
        if not allowed:
            _logger.info("Rate limit exceeded for %s (%d > %d)", key, count, limit)
        return allowed

    async def get_remaining(self, key: str, limit: int) -> int:
        _check_key(key)
        _check_limit(limit)
        count = await self._counters.get(key)
        if count is None:
            return limit
        return max(0, limit - count)

    async def reset(self, key: str) -> None:
        _check_key(key)
        await self._counters.delete(key)
