"""SQLAlchemy-backed classification store.

Usage
-----
>>> store = SqlClassificationStore(session_factory)
>>> query = ReportQuery.create(cutoff=None)
>>> stats = await store.get_validation_statistics("job-1", query)
>>> stats.valid_count + stats.invalid_count == await store.get_count_pdf(
...     "job-1", query
... )
True

"""

from __future__ import annotations

import typing as typ

from sqlalchemy import case, func, select

from crawlreport.common.db import read_session
from crawlreport.documents.models import (
    DocumentCategory,
    ReportQuery,
    ValidationStatistics,
)
from crawlreport.documents.storage import DocumentRecord

if typ.TYPE_CHECKING:
    from sqlalchemy import ColumnElement

    from crawlreport.common.db import SessionFactory


def _window_filters(
    job_id: str, category: DocumentCategory, query: ReportQuery
) -> list[ColumnElement[bool]]:
    """Return the WHERE clauses selecting a job's documents in the query window."""
    filters: list[ColumnElement[bool]] = [
        DocumentRecord.job_id == job_id,
        DocumentRecord.category == category.value,
        DocumentRecord.discovered_at < query.as_of,
    ]
    if query.cutoff is not None:
        filters.append(DocumentRecord.discovered_at >= query.cutoff)
    return filters


class SqlClassificationStore:
    """Classification store reading the ``documents`` table.

    Parameters
    ----------
    session_factory
        Async session factory for the document database.
    invalid_report_url_template
        Optional URL template (``{job_id}`` is substituted) pointing at a
        published invalid-PDF listing. Only used when a job has invalid PDFs.

    """

    def __init__(
        self,
        session_factory: SessionFactory,
        *,
        invalid_report_url_template: str | None = None,
    ) -> None:
        """Configure the store with a session factory."""
        self._session_factory = session_factory
        self._invalid_report_url_template = invalid_report_url_template

    async def get_validation_statistics(
        self, job_id: str, query: ReportQuery
    ) -> ValidationStatistics:
        """Return valid and invalid PDF counts from a single aggregate query."""
        stmt = select(
            func.coalesce(
                func.sum(case((DocumentRecord.is_valid.is_(True), 1), else_=0)), 0
            ),
            func.coalesce(
                func.sum(case((DocumentRecord.is_valid.is_(False), 1), else_=0)), 0
            ),
        ).where(*_window_filters(job_id, DocumentCategory.PDF, query))
        async with read_session(
            self._session_factory, "get_validation_statistics"
        ) as session:
            row = (await session.execute(stmt)).one()
        valid_count, invalid_count = int(row[0]), int(row[1])
        return ValidationStatistics(
            valid_count=valid_count,
            invalid_count=invalid_count,
            invalid_report_url=self._invalid_report_url(job_id, invalid_count),
        )

    def _invalid_report_url(self, job_id: str, invalid_count: int) -> str | None:
        if self._invalid_report_url_template is None or invalid_count == 0:
            return None
        return self._invalid_report_url_template.format(job_id=job_id)

    async def get_count_pdf(self, job_id: str, query: ReportQuery) -> int:
        """Return the number of PDFs with a recorded validation verdict."""
        stmt = (
            select(func.count())
            .select_from(DocumentRecord)
            .where(
                *_window_filters(job_id, DocumentCategory.PDF, query),
                DocumentRecord.is_valid.is_not(None),
            )
        )
        async with read_session(self._session_factory, "get_count_pdf") as session:
            return int(await session.scalar(stmt) or 0)

    async def _count(
        self, job_id: str, category: DocumentCategory, query: ReportQuery
    ) -> int:
        stmt = (
            select(func.count())
            .select_from(DocumentRecord)
            .where(*_window_filters(job_id, category, query))
        )
        async with read_session(
            self._session_factory, f"count_{category.value}"
        ) as session:
            return int(await session.scalar(stmt) or 0)

    async def get_count_odf(self, job_id: str, query: ReportQuery) -> int:
        """Return the number of ODF documents."""
        return await self._count(job_id, DocumentCategory.ODF, query)

    async def get_count_office(self, job_id: str, query: ReportQuery) -> int:
        """Return the number of legacy Microsoft Office documents."""
        return await self._count(job_id, DocumentCategory.OFFICE, query)

    async def get_count_ooxml(self, job_id: str, query: ReportQuery) -> int:
        """Return the number of OOXML documents."""
        return await self._count(job_id, DocumentCategory.OOXML, query)

    async def _list_urls(
        self,
        job_id: str,
        category: DocumentCategory,
        query: ReportQuery,
        *extra: ColumnElement[bool],
    ) -> list[str]:
        stmt = (
            select(DocumentRecord.url)
            .where(*_window_filters(job_id, category, query), *extra)
            .order_by(DocumentRecord.discovered_at, DocumentRecord.id)
        )
        async with read_session(
            self._session_factory, f"list_{category.value}"
        ) as session:
            return list(await session.scalars(stmt))

    async def get_office_files(self, job_id: str, query: ReportQuery) -> list[str]:
        """Return URLs of legacy Microsoft Office documents."""
        return await self._list_urls(job_id, DocumentCategory.OFFICE, query)

    async def get_ooxml_files(self, job_id: str, query: ReportQuery) -> list[str]:
        """Return URLs of OOXML documents."""
        return await self._list_urls(job_id, DocumentCategory.OOXML, query)

    async def get_invalid_pdf_files(
        self, job_id: str, query: ReportQuery
    ) -> list[str]:
        """Return URLs of PDFs that failed validation."""
        return await self._list_urls(
            job_id,
            DocumentCategory.PDF,
            query,
            DocumentRecord.is_valid.is_(False),
        )
