"""Persistence model for classified documents."""

from __future__ import annotations

import datetime as dt  # noqa: TC003

from sqlalchemy import Boolean, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from crawlreport.common.time import utcnow
from crawlreport.registry.storage import Base, UTCDateTime


class DocumentRecord(Base):
    """A document discovered by a crawl job and its classification.

    ``is_valid`` is only meaningful for PDFs and stays ``None`` until the
    validator has produced a verdict.
    """

    __tablename__ = "documents"
    __table_args__ = (
        Index("ix_documents_job_category_time", "job_id", "category", "discovered_at"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    job_id: Mapped[str] = mapped_column(String(255), nullable=False)
    url: Mapped[str] = mapped_column(Text(), nullable=False)
    category: Mapped[str] = mapped_column(String(16), nullable=False)
    is_valid: Mapped[bool | None] = mapped_column(Boolean(), default=None)
    discovered_at: Mapped[dt.datetime] = mapped_column(
        UTCDateTime(), default=utcnow, nullable=False
    )
