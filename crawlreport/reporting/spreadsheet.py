"""Render a JobReport onto the fixed-layout report spreadsheet.

Each render loads the template afresh, fills the summary sheet and the three
listing sheets, and publishes the workbook under a per-request unique name:
the workbook is saved to a temporary file in the output directory and then
moved into place with ``os.replace``, so readers never see a partial file and
concurrent renders never share a path.

Usage
-----
>>> renderer = SpreadsheetRenderer(
...     template_path=Path("templates/sample_report.xlsx"),
...     output_dir=Path("reports"),
... )
>>> path = await renderer.render(report, documents, cutoff=None)

"""

from __future__ import annotations

import asyncio
import contextlib
import os
import re
import tempfile
import typing as typ
import uuid
import zipfile
from pathlib import Path

from openpyxl import load_workbook
from openpyxl.utils.exceptions import IllegalCharacterError, InvalidFileException

from crawlreport.common.time import format_report_time
from crawlreport.documents.models import ListCategory
from crawlreport.errors import RenderFailedError, TemplateUnavailableError
from crawlreport.reporting.layout import (
    CUTOFF_SUFFIX,
    EMPTY_CUTOFF,
    LISTING_SHEETS,
    REQUIRED_SHEET_COUNT,
    SUMMARY_LAYOUT,
    SUMMARY_SHEET_INDEX,
    SummaryField,
    listing_address,
)

if typ.TYPE_CHECKING:
    import datetime as dt

    from openpyxl.workbook.workbook import Workbook
    from openpyxl.worksheet.worksheet import Worksheet

    from crawlreport.reporting.models import JobReport, ReportDocuments
    from crawlreport.reporting.observability import ReportingEventLogger

_UNSAFE_FILENAME_CHARS = re.compile(r"[^A-Za-z0-9_.-]+")


def format_cutoff(cutoff: dt.datetime | None) -> str:
    """Return the summary-sheet text for ``cutoff``."""
    if cutoff is None:
        return EMPTY_CUTOFF
    return format_report_time(cutoff) + CUTOFF_SUFFIX


def summary_values(
    report: JobReport, cutoff: dt.datetime | None
) -> dict[SummaryField, str | int]:
    """Return the values written to the summary sheet, keyed by field."""
    stats = report.pdf_statistics
    return {
        SummaryField.CUTOFF: format_cutoff(cutoff),
        SummaryField.VALID_PDF: stats.valid_count,
        SummaryField.ODF: report.odf_count,
        SummaryField.COMPLIANT_TOTAL: report.compliant_total,
        SummaryField.INVALID_PDF: stats.invalid_count,
        SummaryField.OFFICE: report.office_count,
        SummaryField.OOXML: report.ooxml_count,
        SummaryField.NON_COMPLIANT_TOTAL: report.non_compliant_total,
    }


def _listing(documents: ReportDocuments, category: ListCategory) -> list[str]:
    match category:
        case ListCategory.OFFICE:
            return documents.office
        case ListCategory.INVALID_PDF:
            return documents.invalid_pdf
        case ListCategory.OOXML:
            return documents.ooxml


def artifact_name(job_id: str) -> str:
    """Return a unique spreadsheet file name for ``job_id``."""
    safe_id = _UNSAFE_FILENAME_CHARS.sub("_", job_id).strip("._") or "job"
    return f"report-{safe_id}-{uuid.uuid4().hex}.xlsx"


def _write_listing(sheet: Worksheet, urls: list[str]) -> None:
    # Worksheet.cell grows the sheet as needed; existing rows are never removed.
    for index, url in enumerate(urls):
        sheet.cell(**listing_address(index).openpyxl()).value = url


class SpreadsheetRenderer:
    """Project a :class:`JobReport` onto the report spreadsheet template.

    Parameters
    ----------
    template_path
        Template workbook with the summary sheet followed by the Office,
        invalid-PDF and OOXML listing sheets. It is only ever read.
    output_dir
        Directory for rendered workbooks; created on first use.
    event_logger
        Optional structured event logger.

    """

    def __init__(
        self,
        template_path: Path,
        output_dir: Path,
        *,
        event_logger: ReportingEventLogger | None = None,
    ) -> None:
        """Configure the renderer with its template and output locations."""
        self._template_path = template_path
        self._output_dir = output_dir
        self._event_logger = event_logger

    @property
    def template_path(self) -> Path:
        """Return the template location."""
        return self._template_path

    async def render(
        self,
        report: JobReport,
        documents: ReportDocuments,
        *,
        cutoff: dt.datetime | None,
    ) -> Path:
        """Render ``report`` and ``documents`` and return the published path.

        Parameters
        ----------
        report
            Report built under the same cutoff as ``documents``.
        documents
            Office, invalid-PDF and OOXML URL listings.
        cutoff
            Cutoff used to build the report, shown on the summary sheet.

        Raises
        ------
        TemplateUnavailableError
            If the template is missing, unreadable or has too few sheets.
        RenderFailedError
            If a value cannot be stored in a cell or the workbook cannot be
            written.

        """
        path = await asyncio.to_thread(self._render, report, documents, cutoff)
        if self._event_logger is not None:
            self._event_logger.log_spreadsheet_rendered(job_id=report.id, path=path)
        return path

    def _load_template(self) -> Workbook:
        try:
            workbook = load_workbook(self._template_path)
        except (OSError, InvalidFileException, zipfile.BadZipFile, KeyError) as exc:
            raise TemplateUnavailableError(self._template_path, str(exc)) from exc
        if len(workbook.worksheets) < REQUIRED_SHEET_COUNT:
            msg = (
                f"expected at least {REQUIRED_SHEET_COUNT} sheets, "
                f"found {len(workbook.worksheets)}"
            )
            raise TemplateUnavailableError(self._template_path, msg)
        return workbook

    def _fill(
        self,
        workbook: Workbook,
        report: JobReport,
        documents: ReportDocuments,
        cutoff: dt.datetime | None,
    ) -> None:
        summary = workbook.worksheets[SUMMARY_SHEET_INDEX]
        for field, value in summary_values(report, cutoff).items():
            summary.cell(**SUMMARY_LAYOUT[field].openpyxl()).value = value
        for category, sheet_index in LISTING_SHEETS.items():
            _write_listing(
                workbook.worksheets[sheet_index], _listing(documents, category)
            )

    def _render(
        self,
        report: JobReport,
        documents: ReportDocuments,
        cutoff: dt.datetime | None,
    ) -> Path:
        workbook = self._load_template()
        try:
            try:
                self._fill(workbook, report, documents, cutoff)
            except (IllegalCharacterError, ValueError) as exc:
                raise RenderFailedError(report.id, str(exc)) from exc
            return self._publish(workbook, report.id)
        finally:
            workbook.close()

    def _publish(self, workbook: Workbook, job_id: str) -> Path:
        """Save ``workbook`` to a temporary file and move it into place."""
        try:
            self._output_dir.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=self._output_dir, prefix=".render-", suffix=".xlsx.tmp"
            )
        except OSError as exc:
            raise RenderFailedError(job_id, str(exc)) from exc

        os.close(fd)
        tmp_path = Path(tmp_name)
        destination = self._output_dir / artifact_name(job_id)
        try:
            workbook.save(tmp_path)
            os.replace(tmp_path, destination)
        except Exception as exc:
            with contextlib.suppress(OSError):
                tmp_path.unlink()
            raise RenderFailedError(job_id, str(exc)) from exc
        return destination
