from __future__ import annotations

import typing as t


class PostboardError(Exception):
    """Base class for conditions reported to callers of the orchestrators."""

    code = "INTERNAL_ERROR"

    def __init__(self, message: str, details: t.Optional[t.Dict[str, t.Any]] = None) -> None:
        super().__init__(message)
        self.message = message
        self.details: t.Dict[str, t.Any] = details or {}

    def __str__(self) -> str:
        if self.__cause__ is not None:
            return f"{self.code}: {self.message}: {self.__cause__}"
        return f"{self.code}: {self.message}"


class ValidationError(PostboardError):
    code = "VALIDATION_ERROR"


class NotFoundError(PostboardError):
    code = "NOT_FOUND"

    def __init__(self, resource: str) -> None:
        super().__init__(f"{resource} not found")
        self.resource = resource


class RateLimitedError(PostboardError):
    code = "RATE_LIMIT_EXCEEDED"

    def __init__(self, message: str, retry_after: t.Optional[int] = None) -> None:
        details = {"retry_after": retry_after} if retry_after is not None else None
        super().__init__(message, details)
        self.retry_after = retry_after


class StoreFailureError(PostboardError):
    """Relational or counter store unreachable or erroring."""

    code = "STORE_FAILURE"


# Cache-local conditions. Orchestrators absorb these; they never reach callers.
class CacheError(Exception):
    pass


class CacheMissError(CacheError):
    def __init__(self, key: str) -> None:
        super().__init__(f"cache key not found: {key}")
        self.key = key


class PayloadError(ValueError):
    """A cached payload could not be turned back into a Post or Page."""


_PUBLIC = (ValidationError, NotFoundError, RateLimitedError)


def to_public(exc: BaseException) -> t.Tuple[str, str, t.Dict[str, t.Any]]:
    """Translate an exception into the (code, message, details) shown to clients.

    Validation, not-found and rate-limit conditions pass through unchanged.
    Everything else is reported as an opaque internal error.
    """
    if isinstance(exc, _PUBLIC):
        return exc.code, exc.message, dict(exc.details)
    return "INTERNAL_ERROR", "internal error", {}
