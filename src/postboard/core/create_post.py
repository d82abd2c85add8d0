from __future__ import annotations

import logging
import typing as t
from dataclasses import dataclass
from datetime import datetime, timezone

from ..monitoring.metrics import postboard_rate_limited_total
from .cache_aside import CacheAside
from .errors import PostboardError, RateLimitedError, StoreFailureError, ValidationError
from .keys import city_list_pattern, rate_limit_key, seconds_until_next_hour
from .models import City, Post

if t.TYPE_CHECKING:
    from ..ratelimit.base import RateLimiter
    from ..storage.base import PostRepository

_logger = logging.getLogger(__name__)

DEFAULT_POST_LIMIT = 3
DEFAULT_POST_WINDOW_SECONDS = 3600


@dataclass
class CreatePostCommand:
    company: str
    city_code: str
    city_name: str
    content: str
    client_id: str
    occurred_at: t.Optional[datetime] = None


@dataclass
class CreatedPost:
    post: Post
    occurred_at: t.Optional[datetime] = None

    @property
    def id(self) -> str:
        return self.post.id

    @property
    def created_at(self) -> datetime:
        return self.post.created_at


class CreatePost:
    """Rate-limit, persist, then drop the cached list pages for the post's city.

    Only `posts:city:{code}:*` is invalidated. The all-cities list and search
    results keep serving their cached pages until their TTL runs out.
    """

    def __init__(
        self,
        repo: PostRepository,
        cache: CacheAside,
        limiter: RateLimiter,
        *,
        limit: int = DEFAULT_POST_LIMIT,
        window_seconds: int = DEFAULT_POST_WINDOW_SECONDS,
        clock: t.Callable[[], datetime] = lambda: datetime.now(timezone.utc),
    ) -> None:
        self._repo = repo
        self._cache = cache
        self._limiter = limiter
        self._limit = limit
        self._window_seconds = window_seconds
        self._clock = clock

    async def execute(self, cmd: CreatePostCommand) -> CreatedPost:
        self._validate(cmd)

        now = self._clock()
        key = rate_limit_key(cmd.client_id.strip(), now)
        try:
            allowed = await self._limiter.allow(key, self._limit, self._window_seconds)
        except ValidationError:
            raise
        except Exception as exc:
            # Fail closed: no write goes through without a limiter decision
            _logger.error("Rate limit check failed", exc_info=True, extra={"client_id": cmd.client_id})
            raise StoreFailureError("rate limit check failed") from exc
        if not allowed:
            postboard_rate_limited_total.inc(operation="create_post")
            raise RateLimitedError(
                f"rate limit exceeded: maximum {self._limit} posts per hour",
                retry_after=seconds_until_next_hour(now),
            )

        city = City.new(cmd.city_code, cmd.city_name)
        post = Post.new(cmd.company, city, cmd.content)

        try:
            await self._repo.save(post)
        except PostboardError:
            raise
        except Exception as exc:
            _logger.error("Failed to save post", exc_info=True, extra={"post_id": post.id})
            raise StoreFailureError("failed to save post") from exc

        await self._cache.invalidate(city_list_pattern(city.code))
        _logger.info("Created post %s", post.id, extra={"post_id": post.id, "city_code": city.code})
        return CreatedPost(post=post, occurred_at=cmd.occurred_at)

    @staticmethod
    def _validate(cmd: CreatePostCommand) -> None:
        required = (
            ("company", "company name is required"),
            ("city_code", "city code is required"),
            ("city_name", "city name is required"),
            ("content", "content is required"),
            ("client_id", "client identifier is required for rate limiting"),
        )
        for attr, message in required:
            if not (getattr(cmd, attr) or "").strip():
                raise ValidationError(message, {"field": attr})
