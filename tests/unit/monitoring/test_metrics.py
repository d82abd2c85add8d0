"""Unit tests for in-process metrics."""

from postboard.monitoring.metrics import Counter, Histogram


def test_counter_by_labels():
    c = Counter("requests_total", "help")
    c.inc(use_case="get_post", result="hit")
    c.inc(result="hit", use_case="get_post")
    c.inc(2, use_case="get_post", result="miss")

    assert c.get(use_case="get_post", result="hit") == 2
    assert c.get(use_case="get_post", result="miss") == 2
    assert c.get(use_case="list_posts", result="hit") == 0

    c.reset()
    assert c.get(use_case="get_post", result="hit") == 0


def test_histogram_buckets_and_overflow():
    h = Histogram("latency", "help", buckets=[0.01, 0.1])
    h.observe(0.005, operation="find")
    h.observe(0.05, operation="find")
    h.observe(3.0, operation="find")

    assert h.counts[(("operation", "find"),)] == [1, 1, 1]
    assert h.total(operation="find") == 3
    assert h.total(operation="save") == 0
