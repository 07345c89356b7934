"""ClassificationStore protocol consumed by the reporting core."""

from __future__ import annotations

import typing as typ

if typ.TYPE_CHECKING:
    from crawlreport.documents.models import ReportQuery, ValidationStatistics


@typ.runtime_checkable
class ClassificationStore(typ.Protocol):
    """Counts and listings of classified documents per crawl job.

    Every method takes the request's :class:`ReportQuery` so all figures of
    one report share the same time bounds.
    """

    async def get_validation_statistics(
        self, job_id: str, query: ReportQuery
    ) -> ValidationStatistics:
        """Return valid and invalid PDF counts."""
        ...

    async def get_count_odf(self, job_id: str, query: ReportQuery) -> int:
        """Return the number of ODF documents."""
        ...

    async def get_count_office(self, job_id: str, query: ReportQuery) -> int:
        """Return the number of legacy Microsoft Office documents."""
        ...

    async def get_count_ooxml(self, job_id: str, query: ReportQuery) -> int:
        """Return the number of OOXML documents."""
        ...

    async def get_office_files(self, job_id: str, query: ReportQuery) -> list[str]:
        """Return URLs of legacy Microsoft Office documents."""
        ...

    async def get_ooxml_files(self, job_id: str, query: ReportQuery) -> list[str]:
        """Return URLs of OOXML documents."""
        ...

    async def get_invalid_pdf_files(
        self, job_id: str, query: ReportQuery
    ) -> list[str]:
        """Return URLs of PDFs that failed validation."""
        ...
