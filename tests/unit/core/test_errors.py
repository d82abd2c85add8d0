"""Unit tests for the caller-facing error mapping."""

from postboard.core.errors import (
    CacheError,
    NotFoundError,
    RateLimitedError,
    StoreFailureError,
    ValidationError,
    to_public,
)


def test_validation_passes_through():
    exc = ValidationError("keyword is required", {"field": "keyword"})
    assert to_public(exc) == ("VALIDATION_ERROR", "keyword is required", {"field": "keyword"})


def test_not_found_passes_through():
    assert to_public(NotFoundError("post")) == ("NOT_FOUND", "post not found", {})


def test_rate_limit_carries_retry_after():
    code, _, details = to_public(RateLimitedError("slow down", retry_after=120))
    assert code == "RATE_LIMIT_EXCEEDED"
    assert details == {"retry_after": 120}


def test_store_failure_is_opaque():
    try:
        try:
            raise ConnectionError("db at 10.0.0.5:5432 refused")
        except ConnectionError as inner:
            raise StoreFailureError("failed to save post") from inner
    except StoreFailureError as exc:
        assert "10.0.0.5" in str(exc)
        assert to_public(exc) == ("INTERNAL_ERROR", "internal error", {})


def test_unexpected_exceptions_are_opaque():
    assert to_public(CacheError("boom"))[0] == "INTERNAL_ERROR"
    assert to_public(KeyError("x"))[0] == "INTERNAL_ERROR"
