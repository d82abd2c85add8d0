"""SQLAlchemy-backed post repository.

Invariants:
    - Every session rolls back on exception; SQLAlchemy errors surface as StoreFailureError
    - Timestamps are stored and returned as UTC

Full-text search uses PostgreSQL's `simple` text-search configuration. Other
dialects (SQLite in tests) fall back to a case-insensitive LIKE.
"""

from __future__ import annotations

import logging
import typing as t
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from sqlalchemy import DateTime, String, Text, func, or_, select, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from ..core.errors import StoreFailureError
from ..core.models import City, Post
from .base import PostRepository, PostSlice

_logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    pass


class PostRecord(Base):
    __tablename__ = "posts"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    company_name: Mapped[str] = mapped_column(String(100), nullable=False)
    city_code: Mapped[str] = mapped_column(String(50), nullable=False, index=True)
    city_name: Mapped[str] = mapped_column(String(100), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, index=True)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    def to_post(self) -> Post:
        created_at = self.created_at
        if created_at.tzinfo is None:
            created_at = created_at.replace(tzinfo=timezone.utc)
        return Post(
            id=self.id,
            company=self.company_name,
            city=City(code=self.city_code, name=self.city_name),
            content=self.content,
            created_at=created_at,
        )


def _escape_like(value: str) -> str:
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class SQLPostRepository(PostRepository):
    def __init__(self, engine: AsyncEngine) -> None:
        self.engine = engine
        self._session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    @classmethod
    def from_url(cls, database_url: str, pool_size: int = 20, max_overflow: int = 10) -> "SQLPostRepository":
        kwargs: t.Dict[str, t.Any] = {"pool_pre_ping": True}
        if not database_url.startswith("sqlite"):
            kwargs.update(pool_size=pool_size, max_overflow=max_overflow, pool_recycle=3600)
        return cls(create_async_engine(database_url, **kwargs))

    @asynccontextmanager
    async def session(self, operation: str) -> t.AsyncIterator[AsyncSession]:
        session = self._session_factory()
        try:
            yield session
        except SQLAlchemyError as exc:
            await session.rollback()
            _logger.error("Database error during %s: %s", operation, exc)
            raise StoreFailureError(f"failed to {operation}") from exc
        finally:
            await session.close()

    async def create_schema(self) -> None:
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def dispose(self) -> None:  # pragma: no cover - convenience
        await self.engine.dispose()

    async def save(self, post: Post) -> None:
        record = PostRecord(
            id=post.id,
            company_name=post.company,
            city_code=post.city.code,
            city_name=post.city.name,
            content=post.content,
            created_at=post.created_at,
            updated_at=datetime.now(timezone.utc),
        )
        async with self.session("save post") as db:
            # merge() loads by primary key first, so a repeated save updates in place
            await db.merge(record)
            await db.commit()

    async def find_by_id(self, post_id: str) -> t.Optional[Post]:
        async with self.session("find post by id") as db:
            record = await db.get(PostRecord, post_id)
            return record.to_post() if record is not None else None

    async def find_by_city(self, city: City, page: int, page_size: int) -> PostSlice:
        return await self._page("find posts by city", [PostRecord.city_code == city.code], page, page_size)

    async def find_all(self, page: int, page_size: int) -> PostSlice:
        return await self._page("find all posts", [], page, page_size)

    async def search(self, keyword: str, city: t.Optional[City], page: int, page_size: int) -> PostSlice:
        conditions = [self._match(keyword)]
        if city is not None:
            conditions.append(PostRecord.city_code == city.code)
        return await self._page("search posts", conditions, page, page_size)

    async def is_healthy(self) -> bool:
        try:
            async with self.session("health check") as db:
                await db.execute(text("SELECT 1"))
            return True
        except (StoreFailureError, OSError):
            return False

    def _match(self, keyword: str) -> t.Any:
        if self.engine.dialect.name == "postgresql":
            document = func.to_tsvector("simple", PostRecord.company_name + " " + PostRecord.content)
            return document.op("@@")(func.plainto_tsquery("simple", keyword))
        pattern = f"%{_escape_like(keyword)}%"
        return or_(
            PostRecord.company_name.ilike(pattern, escape="\\"),
            PostRecord.content.ilike(pattern, escape="\\"),
        )

    async def _page(self, operation: str, conditions: t.List[t.Any], page: int, page_size: int) -> PostSlice:
        offset = (page - 1) * page_size
        query = (
            select(PostRecord)
            .where(*conditions)
            .order_by(PostRecord.created_at.desc())
            .limit(page_size)
            .offset(offset)
        )
        count_query = select(func.count()).select_from(PostRecord).where(*conditions)
        async with self.session(operation) as db:
            total = (await db.execute(count_query)).scalar_one()
            records = (await db.execute(query)).scalars().all()
        return [record.to_post() for record in records], int(total)
