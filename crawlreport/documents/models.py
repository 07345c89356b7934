"""Value types for document classification queries."""

from __future__ import annotations

import datetime as dt
import enum

import msgspec

from crawlreport.common.time import ensure_utc, utcnow


class DocumentCategory(enum.StrEnum):
    """Classification assigned to a discovered document."""

    PDF = "pdf"
    ODF = "odf"
    OFFICE = "office"
    OOXML = "ooxml"


class ListCategory(enum.StrEnum):
    """Document categories that can be listed per batch."""

    OFFICE = "office"
    INVALID_PDF = "invalid_pdf"
    OOXML = "ooxml"


class ReportQuery(msgspec.Struct, kw_only=True, frozen=True):
    """Time bounds shared by every classification query of one request.

    Attributes
    ----------
    cutoff
        Lower bound (inclusive) on the discovery time, or ``None`` to count
        everything the job ever discovered.
    as_of
        Upper bound (exclusive) pinned when the request starts, so documents
        discovered while the report is assembled do not leak into some
        categories but not others.

    """

    cutoff: dt.datetime | None
    as_of: dt.datetime

    @classmethod
    def create(
        cls, cutoff: dt.datetime | None, *, as_of: dt.datetime | None = None
    ) -> ReportQuery:
        """Build a query for ``cutoff``, pinning ``as_of`` to now by default."""
        return cls(
            cutoff=ensure_utc(cutoff) if cutoff is not None else None,
            as_of=ensure_utc(as_of) if as_of is not None else utcnow(),
        )


class ValidationStatistics(msgspec.Struct, kw_only=True, frozen=True):
    """PDF validity counts for one job under one query.

    Attributes
    ----------
    valid_count
        PDFs that passed validation.
    invalid_count
        PDFs that failed validation.
    invalid_report_url
        Link to a fuller listing of the invalid PDFs, when one is published.

    """

    valid_count: int
    invalid_count: int
    invalid_report_url: str | None = None


class DocumentList(msgspec.Struct, kw_only=True, frozen=True):
    """Documents of one category found while crawling ``source_url``."""

    source_url: str
    document_urls: list[str] = msgspec.field(default_factory=list)
