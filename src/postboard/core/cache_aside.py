"""Cache-aside plumbing shared by the read and write orchestrators.

The cache is disposable: every failure talking to it is logged and absorbed
here, and only relational-store failures leave this module (as
StoreFailureError). Cancellation is never absorbed.
"""

from __future__ import annotations

import json
import logging
import time
import typing as t

from ..cache.base import CacheStore
from ..monitoring.metrics import (
    postboard_cache_requests_total,
    postboard_cache_write_failures_total,
    postboard_store_latency_seconds,
)
from ..utils.resilience import CircuitBreaker, CircuitBreakerConfig, CircuitOpenError, with_retries
from .errors import CacheError, CacheMissError, PayloadError, PostboardError, StoreFailureError

_logger = logging.getLogger(__name__)

T = t.TypeVar("T")

RETRYABLE = (StoreFailureError, ConnectionError, TimeoutError)


class CacheAside:
    def __init__(
        self,
        cache: t.Optional[CacheStore],
        *,
        breaker: t.Optional[CircuitBreaker] = None,
        retry_attempts: int = 3,
        retry_backoff_ms: t.Optional[t.List[int]] = None,
    ) -> None:
        self._cache = cache
        self._breaker = breaker or CircuitBreaker(CircuitBreakerConfig(), failure_types=(CacheError,))
        self._retry_attempts = retry_attempts
        self._retry_backoff_ms = retry_backoff_ms or [100, 500, 2000]

    async def probe(self, use_case: str, key: str, decode: t.Callable[[t.Any], T]) -> t.Optional[T]:
        """Return the decoded cached value, or None when the caller must go to the store."""
        if self._cache is None:
            return None

        async def _get() -> t.Optional[str]:
            try:
                return await self._cache.get(key)
            except CacheMissError:
                return None

        try:
            raw = await self._breaker.run(_get)
        except CircuitOpenError:
            postboard_cache_requests_total.inc(use_case=use_case, result="skipped")
            return None
        except Exception:
            postboard_cache_requests_total.inc(use_case=use_case, result="error")
            _logger.warning("Cache read failed for %s", key, exc_info=True, extra={"cache_key": key})
            return None

        if not raw:
            postboard_cache_requests_total.inc(use_case=use_case, result="miss")
            return None
        try:
            value = decode(json.loads(raw))
        except (ValueError, PayloadError) as exc:
            # json.JSONDecodeError is a ValueError
            postboard_cache_requests_total.inc(use_case=use_case, result="corrupt")
            _logger.warning("Discarding unreadable cache entry %s: %s", key, exc, extra={"cache_key": key})
            return None
        postboard_cache_requests_total.inc(use_case=use_case, result="hit")
        return value

    async def load(self, operation: str, fn: t.Callable[[], t.Awaitable[T]]) -> T:
        """Run a relational-store read with retries; failures become StoreFailureError."""
        started = time.perf_counter()
        try:
            return await with_retries(fn, self._retry_attempts, self._retry_backoff_ms, retry_on=RETRYABLE)
        except StoreFailureError as exc:
            _logger.error("Store failure during %s", operation, exc_info=True, extra={"operation": operation})
            raise StoreFailureError(f"failed to {operation}") from exc
        except PostboardError:
            raise
        except Exception as exc:
            _logger.error("Store failure during %s", operation, exc_info=True, extra={"operation": operation})
            raise StoreFailureError(f"failed to {operation}") from exc
        finally:
            postboard_store_latency_seconds.observe(time.perf_counter() - started, operation=operation)

    async def store(self, key: str, payload: t.Dict[str, t.Any], ttl_seconds: int) -> None:
        """Best-effort repopulation; a failure is logged and dropped."""
        if self._cache is None:
            return
        try:
            data = json.dumps(payload, ensure_ascii=False)
            await self._breaker.run(lambda: self._cache.set(key, data, ttl_seconds))
        except CircuitOpenError:
            return
        except Exception:
            postboard_cache_write_failures_total.inc(operation="set")
            _logger.warning("Cache write failed for %s", key, exc_info=True, extra={"cache_key": key})

    async def invalidate(self, pattern: str) -> None:
        """Best-effort pattern delete; a failure is logged and dropped."""
        if self._cache is None:
            return
        try:
            # Invalidation always reaches the cache, even while the breaker is open
            await self._cache.delete_by_pattern(pattern)
        except Exception:
            postboard_cache_write_failures_total.inc(operation="invalidate")
            _logger.warning("Cache invalidation failed for %s", pattern, exc_info=True, extra={"cache_key": pattern})
