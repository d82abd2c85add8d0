from __future__ import annotations

import typing as t
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone

from .errors import PayloadError, ValidationError

MIN_COMPANY_LENGTH = 1
MAX_COMPANY_LENGTH = 100
MIN_CONTENT_LENGTH = 10
MAX_CONTENT_LENGTH = 5000
SUMMARY_LENGTH = 200

DEFAULT_PAGE = 1
DEFAULT_PAGE_SIZE = 20

# Codes end up inside cache keys and glob patterns
CITY_CODE_FORBIDDEN = frozenset("*?[]\\:")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class City:
    code: str
    name: str

    @classmethod
    def new(cls, code: str, name: str) -> "City":
        code = (code or "").strip()
        name = (name or "").strip()
        if not code:
            raise ValidationError("city code cannot be empty")
        if any(ch in CITY_CODE_FORBIDDEN for ch in code):
            raise ValidationError("city code contains reserved characters", {"city_code": code})
        if not name:
            raise ValidationError("city name cannot be empty")
        return cls(code=code, name=name)


def validate_post_id(value: str) -> str:
    value = (value or "").strip()
    if not value:
        raise ValidationError("post ID is required")
    try:
        uuid.UUID(value)
    except ValueError:
        raise ValidationError("invalid post ID", {"post_id": value}) from None
    return value


def normalize_company(value: str) -> str:
    trimmed = (value or "").strip()
    if not trimmed:
        raise ValidationError("company name cannot be empty")
    # len() counts code points, which is the unit the bounds are defined in
    if len(trimmed) < MIN_COMPANY_LENGTH or len(trimmed) > MAX_COMPANY_LENGTH:
        raise ValidationError(
            f"company name must be between {MIN_COMPANY_LENGTH} and {MAX_COMPANY_LENGTH} characters",
            {"length": len(trimmed)},
        )
    return trimmed


def normalize_content(value: str) -> str:
    trimmed = (value or "").strip()
    if not trimmed:
        raise ValidationError("content cannot be empty")
    if len(trimmed) < MIN_CONTENT_LENGTH:
        raise ValidationError(
            f"content must be at least {MIN_CONTENT_LENGTH} characters", {"length": len(trimmed)}
        )
    if len(trimmed) > MAX_CONTENT_LENGTH:
        raise ValidationError(
            f"content must be at most {MAX_CONTENT_LENGTH} characters", {"length": len(trimmed)}
        )
    return trimmed


def summarize(content: str, length: int = SUMMARY_LENGTH) -> str:
    if len(content) <= length:
        return content
    return content[:length] + "..."


@dataclass(frozen=True)
class Post:
    id: str
    company: str
    city: City
    content: str
    created_at: datetime = field(default_factory=_utcnow)

    @classmethod
    def new(cls, company: str, city: City, content: str) -> "Post":
        """Build a fresh post, validating every field and assigning id and timestamp."""
        return cls(
            id=str(uuid.uuid4()),
            company=normalize_company(company),
            city=city,
            content=normalize_content(content),
            created_at=_utcnow(),
        )

    @property
    def summary(self) -> str:
        return summarize(self.content)

    def to_dict(self) -> t.Dict[str, t.Any]:
        return {
            "id": self.id,
            "company": self.company,
            "city_code": self.city.code,
            "city_name": self.city.name,
            "content": self.content,
            "created_at": self.created_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: t.Any) -> "Post":
        if not isinstance(data, dict):
            raise PayloadError(f"post payload must be an object, got {type(data).__name__}")
        return cls(
            id=_require_str(data, "id"),
            company=_require_str(data, "company"),
            city=City(code=_require_str(data, "city_code"), name=_require_str(data, "city_name")),
            content=_require_str(data, "content"),
            created_at=_require_datetime(data, "created_at"),
        )


@dataclass
class Page:
    items: t.List[Post]
    total: int
    page: int
    page_size: int

    def to_dict(self) -> t.Dict[str, t.Any]:
        return {
            "items": [post.to_dict() for post in self.items],
            "total": self.total,
            "page": self.page,
            "page_size": self.page_size,
        }

    @classmethod
    def from_dict(cls, data: t.Any) -> "Page":
        if not isinstance(data, dict):
            raise PayloadError(f"page payload must be an object, got {type(data).__name__}")
        raw_items = data.get("items")
        if not isinstance(raw_items, list):
            raise PayloadError("field 'items' must be a list")
        total = _require_int(data, "total", minimum=0)
        page = _require_int(data, "page", minimum=1)
        page_size = _require_int(data, "page_size", minimum=1)
        return cls(
            items=[Post.from_dict(item) for item in raw_items],
            total=total,
            page=page,
            page_size=page_size,
        )


def normalize_paging(page: int, page_size: int) -> t.Tuple[int, int]:
    if page is None or page < 1:
        page = DEFAULT_PAGE
    if page_size is None or page_size < 1:
        page_size = DEFAULT_PAGE_SIZE
    return page, page_size


def _require_str(data: t.Dict[str, t.Any], name: str) -> str:
    value = data.get(name)
    if not isinstance(value, str) or not value:
        raise PayloadError(f"field {name!r} must be a non-empty string")
    return value


def _require_int(data: t.Dict[str, t.Any], name: str, minimum: int) -> int:
    value = data.get(name)
    # bool is an int subclass; a cached true/false is never a valid count
    if isinstance(value, bool) or not isinstance(value, int) or value < minimum:
        raise PayloadError(f"field {name!r} must be an integer >= {minimum}")
    return value


def _require_datetime(data: t.Dict[str, t.Any], name: str) -> datetime:
    raw = _require_str(data, name)
    try:
        value = datetime.fromisoformat(raw)
    except ValueError:
        raise PayloadError(f"field {name!r} is not an ISO-8601 timestamp") from None
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value
