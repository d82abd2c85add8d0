from __future__ import annotations

import logging
import typing as t

from .cache_aside import CacheAside
from .errors import NotFoundError
from .keys import TTLPolicy, post_key
from .models import Post, validate_post_id

if t.TYPE_CHECKING:
    from ..storage.base import PostRepository

_logger = logging.getLogger(__name__)


class GetPost:
    """Fetch a single post by id, cached under `post:{id}`."""

    def __init__(self, repo: PostRepository, cache: CacheAside, ttl: TTLPolicy | None = None) -> None:
        self._repo = repo
        self._cache = cache
        self._ttl = ttl or TTLPolicy()

    async def execute(self, post_id: str) -> Post:
        post_id = validate_post_id(post_id)
        key = post_key(post_id)

        cached = await self._cache.probe("get_post", key, Post.from_dict)
        if cached is not None:
            return cached

        post = await self._cache.load("find post by id", lambda: self._repo.find_by_id(post_id))
        if post is None:
            _logger.debug("Post %s not found", post_id, extra={"post_id": post_id})
            raise NotFoundError("post")

        await self._cache.store(key, post.to_dict(), self._ttl.post_seconds)
        return post
