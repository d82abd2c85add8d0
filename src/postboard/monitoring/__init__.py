from .metrics import (
    Counter,
    Histogram,
    postboard_cache_requests_total,
    postboard_cache_write_failures_total,
    postboard_rate_limited_total,
    postboard_store_latency_seconds,
)

__all__ = [
    "Counter",
    "Histogram",
    "postboard_cache_requests_total",
    "postboard_cache_write_failures_total",
    "postboard_rate_limited_total",
    "postboard_store_latency_seconds",
]
