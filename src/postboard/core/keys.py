"""Cache key derivation, TTL policy and the city directory.

Key formats are shared with whatever else reads or invalidates the cache, so
they must stay byte-for-byte stable.
"""

from __future__ import annotations

import typing as t
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone

from .models import City

ALL_CITIES = "all"

POST_TTL_SECONDS = 600
POPULAR_LIST_TTL_SECONDS = 300
LIST_TTL_SECONDS = 600
SEARCH_TTL_SECONDS = 300

DEFAULT_POPULAR_CITIES: t.FrozenSet[str] = frozenset({"beijing", "shanghai", "guangzhou", "shenzhen"})

DEFAULT_CITY_NAMES: t.Dict[str, str] = {
    "beijing": "北京",
    "shanghai": "上海",
    "guangzhou": "广州",
    "shenzhen": "深圳",
    "hangzhou": "杭州",
    "nanjing": "南京",
    "chengdu": "成都",
    "wuhan": "武汉",
    "xian": "西安",
    "tianjin": "天津",
}

RATE_LIMIT_PREFIX = "rate_limit:post"
HOUR_BUCKET_FORMAT = "%Y-%m-%d-%H"


def normalize_keyword(keyword: str) -> str:
    return (keyword or "").strip().lower()


def post_key(post_id: str) -> str:
    return f"post:{post_id}"


def list_key(city_code: t.Optional[str], page: int) -> str:
    return f"posts:city:{city_code or ALL_CITIES}:page:{page}"


def city_list_pattern(city_code: str) -> str:
    """Glob matching every cached list page for one city."""
    return f"posts:city:{city_code}:*"


def search_key(keyword: str, city_code: t.Optional[str], page: int) -> str:
    normalized = normalize_keyword(keyword)
    if city_code:
        return f"search:{normalized}:city:{city_code}:page:{page}"
    return f"search:{normalized}:page:{page}"


def hour_bucket(now: t.Optional[datetime] = None) -> str:
    now = now or datetime.now(timezone.utc)
    return now.strftime(HOUR_BUCKET_FORMAT)


def rate_limit_key(client_id: str, now: t.Optional[datetime] = None) -> str:
    return f"{RATE_LIMIT_PREFIX}:{client_id}:{hour_bucket(now)}"


def seconds_until_next_hour(now: t.Optional[datetime] = None) -> int:
    now = now or datetime.now(timezone.utc)
    top = now.replace(minute=0, second=0, microsecond=0) + timedelta(hours=1)
    return max(1, int((top - now).total_seconds()))


@dataclass(frozen=True)
class TTLPolicy:
    post_seconds: int = POST_TTL_SECONDS
    popular_list_seconds: int = POPULAR_LIST_TTL_SECONDS
    list_seconds: int = LIST_TTL_SECONDS
    search_seconds: int = SEARCH_TTL_SECONDS
    popular_cities: t.FrozenSet[str] = DEFAULT_POPULAR_CITIES

    def for_list(self, city_code: t.Optional[str]) -> int:
        if city_code and city_code in self.popular_cities:
            return self.popular_list_seconds
        return self.list_seconds


@dataclass(frozen=True)
class CityDirectory:
    """Static city code to display name mapping, loaded once at startup."""

    names: t.Mapping[str, str] = field(default_factory=lambda: dict(DEFAULT_CITY_NAMES))

    def name_for(self, code: str) -> str:
        # Unknown codes fall back to the code itself
        return self.names.get(code, code)

    def resolve(self, code: str) -> City:
        code = (code or "").strip()
        return City.new(code, self.name_for(code))
