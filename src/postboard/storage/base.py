from __future__ import annotations

import typing as t
from abc import ABC, abstractmethod

from ..core.models import City, Post

PostSlice = t.Tuple[t.List[Post], int]


class PostRepository(ABC):
    """Durable post persistence; the source of truth for every Post.

    Listing methods take a 1-based page and return `(items, total)` ordered
    newest first. Implementations raise StoreFailureError on backend errors.
    """

    @abstractmethod
    async def save(self, post: Post) -> None:  # pragma: no cover - interface
        """Insert or update by id."""
        raise NotImplementedError

    @abstractmethod
    async def find_by_id(self, post_id: str) -> t.Optional[Post]:  # pragma: no cover - interface
        raise NotImplementedError

    @abstractmethod
    async def find_by_city(self, city: City, page: int, page_size: int) -> PostSlice:  # pragma: no cover - interface
        raise NotImplementedError

    @abstractmethod
    async def find_all(self, page: int, page_size: int) -> PostSlice:  # pragma: no cover - interface
        raise NotImplementedError

    @abstractmethod
    async def search(
        self, keyword: str, city: t.Optional[City], page: int, page_size: int
    ) -> PostSlice:  # pragma: no cover - interface
        raise NotImplementedError

    @abstractmethod
    async def is_healthy(self) -> bool:  # pragma: no cover - interface
        raise NotImplementedError


def _paginate(posts: t.List[Post], page: int, page_size: int) -> PostSlice:
    ordered = sorted(posts, key=lambda p: p.created_at, reverse=True)
    offset = (page - 1) * page_size
    return ordered[offset : offset + page_size], len(ordered)


class InMemoryPostRepository(PostRepository):
    """A simple in-memory repository for dev/test.

    Search is a case-insensitive substring match over company and content.
    """

    def __init__(self) -> None:
        self._posts: t.Dict[str, Post] = {}

    async def save(self, post: Post) -> None:
        self._posts[post.id] = post

    async def find_by_id(self, post_id: str) -> t.Optional[Post]:
        return self._posts.get(post_id)

    async def find_by_city(self, city: City, page: int, page_size: int) -> PostSlice:
        return _paginate([p for p in self._posts.values() if p.city.code == city.code], page, page_size)

    async def find_all(self, page: int, page_size: int) -> PostSlice:
        return _paginate(list(self._posts.values()), page, page_size)

    async def search(self, keyword: str, city: t.Optional[City], page: int, page_size: int) -> PostSlice:
        needle = keyword.lower()
        matches = [
            p
            for p in self._posts.values()
            if (city is None or p.city.code == city.code)
            and (needle in p.company.lower() or needle in p.content.lower())
        ]
        return _paginate(matches, page, page_size)

    async def is_healthy(self) -> bool:
        return True
