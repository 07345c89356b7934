"""Report resources: batch reports, document lists and spreadsheet downloads.

Routes
------
``GET /report/{batch_id}``
    One element per batch member, in member order.
``GET /report/{office|invalid_pdf|ooxml}_list/{batch_id}``
    One document list per batch member.
``GET /report/ods_report/{batch_id}/{crawl_job_id}``
    Spreadsheet download for one member.

Members that fail are returned in place as ``{"id", "error"}`` elements so
callers can tell a failed member from one with zero matching documents.
Failures of the batch lookup itself are raised and mapped by
:mod:`crawlreport.api.errors`.
"""

from __future__ import annotations

import asyncio
import contextlib
import typing as typ

import falcon
import msgspec

from crawlreport.api.errors import error_media
from crawlreport.logging import get_logger, log_info

if typ.TYPE_CHECKING:
    from pathlib import Path

    from falcon.asgi import Request, Response

    from crawlreport.documents.models import ListCategory
    from crawlreport.errors import ReportingError
    from crawlreport.reporting.batch import BatchReportService
    from crawlreport.reporting.models import MemberDocumentList, MemberReport

__all__ = [
    "BatchReportResource",
    "DocumentListResource",
    "SpreadsheetReportResource",
    "XLSX_CONTENT_TYPE",
]

logger = get_logger(__name__)

XLSX_CONTENT_TYPE = (
    "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
)


def _serialize_failure(job_id: str, error: ReportingError) -> dict[str, typ.Any]:
    return {"id": job_id, "error": error_media(error)}


def serialize_member_report(outcome: MemberReport) -> dict[str, typ.Any]:
    """Serialize one batch member's report or failure."""
    if outcome.report is not None:
        return msgspec.to_builtins(outcome.report)
    return _serialize_failure(outcome.job_id, typ.cast("ReportingError", outcome.error))


def serialize_member_documents(outcome: MemberDocumentList) -> dict[str, typ.Any]:
    """Serialize one batch member's document list or failure."""
    if outcome.documents is not None:
        return msgspec.to_builtins(outcome.documents)
    return _serialize_failure(outcome.job_id, typ.cast("ReportingError", outcome.error))


class BatchReportResource:
    """``GET /report/{batch_id}``: JSON reports for every batch member."""

    def __init__(self, batch_service: BatchReportService) -> None:
        """Configure the resource with the batch service."""
        self._batch_service = batch_service

    async def on_get(self, _req: Request, resp: Response, *, batch_id: str) -> None:
        """Return the member reports of ``batch_id``."""
        log_info(logger, "Job report requested for batch job %s", batch_id)
        outcomes = await self._batch_service.build_batch_report(batch_id)
        resp.media = [serialize_member_report(outcome) for outcome in outcomes]
        resp.status = falcon.HTTP_200


class DocumentListResource:
    """``GET /report/<category>_list/{batch_id}``: per-member document URLs."""

    def __init__(
        self, batch_service: BatchReportService, category: ListCategory
    ) -> None:
        """Configure the resource for one document category."""
        self._batch_service = batch_service
        self._category = category

    async def on_get(self, _req: Request, resp: Response, *, batch_id: str) -> None:
        """Return the member document lists of ``batch_id``."""
        log_info(
            logger,
            "List of %s documents requested for batch job %s",
            self._category.value,
            batch_id,
        )
        outcomes = await self._batch_service.build_document_lists(
            batch_id, self._category
        )
        resp.media = [serialize_member_documents(outcome) for outcome in outcomes]
        resp.status = falcon.HTTP_200


class SpreadsheetReportResource:
    """``GET /report/ods_report/{batch_id}/{crawl_job_id}``: spreadsheet file.

    The rendered artifact is unique to the request; it is read into the
    response and removed afterwards.
    """

    def __init__(self, batch_service: BatchReportService) -> None:
        """Configure the resource with the batch service."""
        self._batch_service = batch_service

    async def on_get(
        self,
        _req: Request,
        resp: Response,
        *,
        batch_id: str,
        crawl_job_id: str,
    ) -> None:
        """Render and return the spreadsheet of one batch member."""
        path = await self._batch_service.render_spreadsheet(batch_id, crawl_job_id)
        log_info(logger, "Spreadsheet report requested for job %s", crawl_job_id)
        try:
            resp.data = await asyncio.to_thread(path.read_bytes)
        finally:
            await asyncio.to_thread(_discard, path)
        resp.content_type = XLSX_CONTENT_TYPE
        resp.downloadable_as = path.name
        resp.status = falcon.HTTP_200


def _discard(path: Path) -> None:
    with contextlib.suppress(FileNotFoundError):
        path.unlink()
