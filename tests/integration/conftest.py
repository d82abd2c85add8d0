"""Fixtures for tests that run against a real SQL engine (SQLite via aiosqlite)."""

import pytest_asyncio

from postboard.storage.sql import SQLPostRepository


@pytest_asyncio.fixture
async def sql_repo():
    repo = SQLPostRepository.from_url("sqlite+aiosqlite:///:memory:")
    await repo.create_schema()
    try:
        yield repo
    finally:
        await repo.dispose()
