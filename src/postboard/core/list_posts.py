from __future__ import annotations

import typing as t
from dataclasses import dataclass

from .cache_aside import CacheAside
from .keys import CityDirectory, TTLPolicy, list_key
from .models import DEFAULT_PAGE, DEFAULT_PAGE_SIZE, Page, normalize_paging

if t.TYPE_CHECKING:
    from ..storage.base import PostRepository


@dataclass
class ListPostsQuery:
    city_code: t.Optional[str] = None
    page: int = DEFAULT_PAGE
    page_size: int = DEFAULT_PAGE_SIZE


class ListPosts:
    """List posts newest-first, for one city or for all cities.

    Page size is not part of the cache key, so every caller of a given page
    must use the same page size.
    """

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

    async def execute(self, query: ListPostsQuery) -> Page:
        page, page_size = normalize_paging(query.page, query.page_size)
        city = self._cities.resolve(query.city_code) if (query.city_code or "").strip() else None
        city_code = city.code if city is not None else None
        key = list_key(city_code, page)

        cached = await self._cache.probe("list_posts", key, Page.from_dict)
        if cached is not None:
            return cached

        if city is not None:
            items, total = await self._cache.load(
                "find posts by city", lambda: self._repo.find_by_city(city, page, page_size)
            )
        else:
            items, total = await self._cache.load("find all posts", lambda: self._repo.find_all(page, page_size))

        result = Page(items=list(items), total=total, page=page, page_size=page_size)
        await self._cache.store(key, result.to_dict(), self._ttl.for_list(city_code))
        return result
