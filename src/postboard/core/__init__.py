"""Query and write orchestration over the post, cache and counter stores."""

from .cache_aside import CacheAside
from .create_post import CreatedPost, CreatePost, CreatePostCommand
from .errors import (
    CacheError,
    CacheMissError,
    NotFoundError,
    PayloadError,
    PostboardError,
    RateLimitedError,
    StoreFailureError,
    ValidationError,
    to_public,
)
from .get_post import GetPost
from .keys import CityDirectory, TTLPolicy
from .list_posts import ListPosts, ListPostsQuery
from .models import City, Page, Post
from .search_posts import SearchPosts, SearchPostsQuery

__all__ = [
    # Orchestrators
    "CreatePost",
    "GetPost",
    "ListPosts",
    "SearchPosts",
    "CacheAside",
    # Commands and queries
    "CreatePostCommand",
    "CreatedPost",
    "ListPostsQuery",
    "SearchPostsQuery",
    # Models
    "City",
    "Post",
    "Page",
    "CityDirectory",
    "TTLPolicy",
    # Errors
    "PostboardError",
    "ValidationError",
    "NotFoundError",
    "RateLimitedError",
    "StoreFailureError",
    "CacheError",
    "CacheMissError",
    "PayloadError",
    "to_public",
]
