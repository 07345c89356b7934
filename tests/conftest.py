"""Shared fixtures for unit and feature tests."""

from __future__ import annotations

import typing as typ

import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from tests.helpers.database import create_sqlite_engine

if typ.TYPE_CHECKING:
    from pathlib import Path


@pytest_asyncio.fixture
async def session_factory(
    tmp_path: Path,
) -> typ.AsyncIterator[async_sessionmaker[AsyncSession]]:
    """Yield a fresh async session factory backed by sqlite."""
    engine = await create_sqlite_engine(tmp_path / "crawlreport_test.db")
    factory = async_sessionmaker(engine, expire_on_commit=False)
    try:
        yield factory
    finally:
        await engine.dispose()
