"""Persistence models for crawl jobs and batch jobs."""

from __future__ import annotations

import datetime as dt
import typing as typ

from sqlalchemy import (
    Boolean,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship
from sqlalchemy.types import TypeDecorator

from crawlreport.common.time import ensure_utc, utcnow

if typ.TYPE_CHECKING:
    from sqlalchemy.engine import Dialect
    from sqlalchemy.ext.asyncio import AsyncEngine


class Base(DeclarativeBase):
    """Declarative base shared by registry and document tables."""


class UTCDateTime(TypeDecorator[dt.datetime]):
    """DateTime wrapper that round-trips UTC tzinfo even on SQLite."""

    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(
        self, value: dt.datetime | None, dialect: Dialect
    ) -> dt.datetime | None:
        """Store datetimes in UTC; naive values are assumed to be UTC."""
        if value is None:
            return None
        return ensure_utc(value)

    def process_result_value(
        self, value: dt.datetime | None, dialect: Dialect
    ) -> dt.datetime | None:
        """Return aware UTC datetimes."""
        if value is None:
            return None
        return ensure_utc(value)


class CrawlJob(Base):
    """One execution of the crawl engine against a site.

    ``job_url`` is empty while the job is running and holds the URL of the
    saved engine configuration once the job has been archived.
    """

    __tablename__ = "crawl_jobs"

    id: Mapped[str] = mapped_column(String(255), primary_key=True)
    crawl_url: Mapped[str] = mapped_column(Text(), nullable=False)
    job_url: Mapped[str] = mapped_column(Text(), default="", nullable=False)
    status: Mapped[str | None] = mapped_column(String(64), default=None)
    start_time: Mapped[dt.datetime] = mapped_column(
        UTCDateTime(), default=utcnow, nullable=False
    )
    finish_time: Mapped[dt.datetime | None] = mapped_column(
        UTCDateTime(), default=None
    )


class BatchJobRow(Base):
    """A named group of crawl jobs sharing a reporting cutoff."""

    __tablename__ = "batch_jobs"

    id: Mapped[str] = mapped_column(String(255), primary_key=True)
    crawl_since: Mapped[dt.datetime | None] = mapped_column(
        UTCDateTime(), default=None
    )
    is_finished: Mapped[bool] = mapped_column(Boolean(), default=False)

    members: Mapped[list[BatchJobMember]] = relationship(
        back_populates="batch",
        order_by="BatchJobMember.position",
        cascade="all, delete-orphan",
    )


class BatchJobMember(Base):
    """Membership of a crawl job in a batch, ordered by ``position``."""

    __tablename__ = "batch_job_members"
    __table_args__ = (
        UniqueConstraint("batch_id", "position", name="uq_batch_member_position"),
        Index("ix_batch_job_members_batch", "batch_id"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    batch_id: Mapped[str] = mapped_column(
        ForeignKey("batch_jobs.id", ondelete="CASCADE"), nullable=False
    )
    crawl_job_id: Mapped[str] = mapped_column(String(255), nullable=False)
    position: Mapped[int] = mapped_column(Integer(), nullable=False)

    batch: Mapped[BatchJobRow] = relationship(back_populates="members")


async def init_registry_storage(engine: AsyncEngine) -> None:
    """Create registry tables if they are absent."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
