from .base import InMemoryPostRepository, PostRepository
from .sql import SQLPostRepository

__all__ = ["PostRepository", "InMemoryPostRepository", "SQLPostRepository"]
