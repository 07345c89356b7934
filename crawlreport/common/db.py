"""Session helpers shared by the SQLAlchemy-backed stores."""

from __future__ import annotations

import contextlib
import typing as typ

from sqlalchemy.exc import SQLAlchemyError

from crawlreport.errors import UpstreamUnavailableError

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

type SessionFactory = async_sessionmaker[AsyncSession]


@contextlib.asynccontextmanager
async def read_session(
    session_factory: SessionFactory, operation: str
) -> cabc.AsyncIterator[AsyncSession]:
    """Open a read session, reporting database failures as upstream errors."""
    try:
        async with session_factory() as session:
            yield session
    except SQLAlchemyError as exc:
        raise UpstreamUnavailableError.store(operation, str(exc)) from exc
