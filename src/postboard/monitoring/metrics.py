from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Tuple


@dataclass
class Counter:
    name: str
    help: str
    values: Dict[Tuple, float] = field(default_factory=dict)

    def inc(self, value: float = 1.0, **labels: Any) -> None:
        key = tuple(sorted(labels.items()))
        self.values[key] = self.values.get(key, 0.0) + value

    def get(self, **labels: Any) -> float:
        return self.values.get(tuple(sorted(labels.items())), 0.0)

    def reset(self) -> None:
        self.values.clear()


@dataclass
class Histogram:
    name: str
    help: str
    buckets: List[float]
    counts: Dict[Tuple, List[int]] = field(default_factory=dict)

    def observe(self, val: float, **labels: Any) -> None:
        key = tuple(sorted(labels.items()))
        if key not in self.counts:
            # last slot holds observations above the largest bucket
            self.counts[key] = [0 for _ in range(len(self.buckets) + 1)]
        for i, b in enumerate(self.buckets):
            if val <= b:
                self.counts[key][i] += 1
                break
        else:
            self.counts[key][-1] += 1

    def total(self, **labels: Any) -> int:
        return sum(self.counts.get(tuple(sorted(labels.items())), []))

    def reset(self) -> None:
        self.counts.clear()


# Predefined metrics
postboard_cache_requests_total = Counter(
    "postboard_cache_requests_total", "Cache lookups by use case and result (hit, miss, error, corrupt, skipped)"
)
postboard_cache_write_failures_total = Counter(
    "postboard_cache_write_failures_total", "Best-effort cache writes and invalidations that failed"
)
postboard_store_latency_seconds = Histogram(
    "postboard_store_latency_seconds",
    "Relational store operation latency",
    buckets=[0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0],
)
postboard_rate_limited_total = Counter("postboard_rate_limited_total", "Writes rejected by the rate limiter")
