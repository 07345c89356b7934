"""Report value types and per-member batch outcomes."""

from __future__ import annotations

import dataclasses as dc
import typing as typ

import msgspec

from crawlreport.documents.models import DocumentList, ValidationStatistics

if typ.TYPE_CHECKING:
    from crawlreport.errors import ReportingError

FINISHED_STATUS = "finished"


class JobReport(msgspec.Struct, kw_only=True, frozen=True):
    """Crawl progress and document statistics for one crawl job.

    Attributes
    ----------
    id
        Crawl job identifier.
    url
        Entry (seed) URL of the crawl.
    status
        Live engine status with whitespace removed, or ``"finished"``.
    downloaded_count
        URIs downloaded so far; always 0 for archived jobs.
    pdf_statistics
        Valid and invalid PDF counts.
    odf_count, office_count, ooxml_count
        Documents per remaining category.
    start_time, finish_time
        ``dd MMM yyyy HH:mm:ss`` timestamps; ``finish_time`` is ``None``
        while the job runs.

    """

    id: str
    url: str
    status: str
    downloaded_count: int
    pdf_statistics: ValidationStatistics
    odf_count: int
    office_count: int
    ooxml_count: int
    start_time: str
    finish_time: str | None = None

    @property
    def compliant_total(self) -> int:
        """Return valid PDFs plus ODF documents."""
        return self.pdf_statistics.valid_count + self.odf_count

    @property
    def non_compliant_total(self) -> int:
        """Return Office, invalid PDF and OOXML documents combined."""
        return (
            self.office_count + self.pdf_statistics.invalid_count + self.ooxml_count
        )


class ReportDocuments(msgspec.Struct, kw_only=True, frozen=True):
    """URL listings rendered on the spreadsheet's category sheets."""

    office: list[str] = msgspec.field(default_factory=list)
    invalid_pdf: list[str] = msgspec.field(default_factory=list)
    ooxml: list[str] = msgspec.field(default_factory=list)


@dc.dataclass(frozen=True, slots=True)
class MemberReport:
    """Outcome of building one member's report inside a batch.

    Exactly one of ``report`` and ``error`` is set.
    """

    job_id: str
    report: JobReport | None = None
    error: ReportingError | None = None

    @property
    def ok(self) -> bool:
        """Return True when the report was built."""
        return self.error is None


@dc.dataclass(frozen=True, slots=True)
class MemberDocumentList:
    """Outcome of listing one member's documents inside a batch."""

    job_id: str
    documents: DocumentList | None = None
    error: ReportingError | None = None

    @property
    def ok(self) -> bool:
        """Return True when the listing was built."""
        return self.error is None
