from __future__ import annotations

import typing as t
from dataclasses import dataclass

from .cache_aside import CacheAside
from .errors import ValidationError
from .keys import CityDirectory, TTLPolicy, normalize_keyword, search_key
from .models import DEFAULT_PAGE, DEFAULT_PAGE_SIZE, Page, normalize_paging

if t.TYPE_CHECKING:
    from ..storage.base import PostRepository

MIN_KEYWORD_LENGTH = 2


@dataclass
class SearchPostsQuery:
    keyword: str
    city_code: t.Optional[str] = None
    page: int = DEFAULT_PAGE
    page_size: int = DEFAULT_PAGE_SIZE


class SearchPosts:
    def __init__(
        self,
        repo: PostRepository,
        cache: CacheAside,
        cities: CityDirectory | None = None,
        ttl: TTLPolicy | None = None,
    ) -> None:
        self._repo = repo
        self._cache = cache
        self._cities = cities or CityDirectory()
        self._ttl = ttl or TTLPolicy()

    async def execute(self, query: SearchPostsQuery) -> Page:
        keyword = normalize_keyword(query.keyword)
        if not keyword:
            raise ValidationError("keyword is required")
        if len(keyword) < MIN_KEYWORD_LENGTH:
            raise ValidationError(f"keyword must be at least {MIN_KEYWORD_LENGTH} characters")
        if ":" in keyword:
            # ":" separates the segments of a search cache key
            raise ValidationError("keyword must not contain ':'")

        page, page_size = normalize_paging(query.page, query.page_size)
        city = self._cities.resolve(query.city_code) if (query.city_code or "").strip() else None
        key = search_key(keyword, city.code if city is not None else None, page)

        cached = await self._cache.probe("search_posts", key, Page.from_dict)
        if cached is not None:
            return cached

        # Ranking and tokenization belong to the store; it gets the normalized keyword as-is
        items, total = await self._cache.load(
            "search posts", lambda: self._repo.search(keyword, city, page, page_size)
        )

        result = Page(items=list(items), total=total, page=page, page_size=page_size)
        await self._cache.store(key, result.to_dict(), self._ttl.search_seconds)
        return result
