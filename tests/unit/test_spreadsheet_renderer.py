"""Unit tests for SpreadsheetRenderer."""

from __future__ import annotations

import asyncio
import datetime as dt
import typing as typ

import pytest
from openpyxl import Workbook, load_workbook

from crawlreport.documents import ValidationStatistics
from crawlreport.errors import RenderFailedError, TemplateUnavailableError
from crawlreport.reporting import (
    JobReport,
    ReportDocuments,
    SpreadsheetRenderer,
    write_default_template,
)
from crawlreport.reporting.layout import SUMMARY_LABELS, SUMMARY_LAYOUT
from crawlreport.reporting.spreadsheet import artifact_name, format_cutoff
from crawlreport.reporting.template import build_default_template

if typ.TYPE_CHECKING:
    from pathlib import Path

    from openpyxl.worksheet.worksheet import Worksheet

CUTOFF = dt.datetime(2023, 1, 5, 7, 8, 9, tzinfo=dt.UTC)


def _report(job_id: str = "J1") -> JobReport:
    return JobReport(
        id=job_id,
        url="http://site.example.org/",
        status="RUNNING",
        downloaded_count=42,
        pdf_statistics=ValidationStatistics(valid_count=3, invalid_count=2),
        odf_count=4,
        office_count=5,
        ooxml_count=6,
        start_time="05 Jan 2023 07:08:09",
    )


DOCUMENTS = ReportDocuments(
    office=["http://site/a.doc", "http://site/b.xls"],
    invalid_pdf=["http://site/bad.pdf"],
    ooxml=["http://site/c.docx", "http://site/d.pptx", "http://site/e.xlsx"],
)


@pytest.fixture
def template_path(tmp_path: Path) -> Path:
    """Write the default template into a temporary directory."""
    return write_default_template(tmp_path / "templates" / "sample_report.xlsx")


@pytest.fixture
def renderer(template_path: Path, tmp_path: Path) -> SpreadsheetRenderer:
    """Return a renderer writing into a temporary output directory."""
    return SpreadsheetRenderer(template_path, tmp_path / "reports")


def _column_a(sheet: Worksheet) -> list[object]:
    return [row[0] for row in sheet.iter_rows(min_row=2, max_col=1, values_only=True)]


def _summary_values(path: Path) -> list[object]:
    workbook = load_workbook(path)
    try:
        return [
            row[0]
            for row in workbook.worksheets[0].iter_rows(
                min_row=1, max_row=8, min_col=2, max_col=2, values_only=True
            )
        ]
    finally:
        workbook.close()


@pytest.mark.asyncio
async def test_summary_cells_without_cutoff(renderer: SpreadsheetRenderer) -> None:
    """Summary values land in column B, rows 1-8; no cutoff leaves B1 empty."""
    path = await renderer.render(_report(), DOCUMENTS, cutoff=None)

    cutoff, *counts = _summary_values(path)
    assert cutoff in {None, ""}
    assert counts == [3, 4, 7, 2, 5, 6, 13]


@pytest.mark.asyncio
async def test_summary_cutoff_is_formatted_with_gmt_suffix(
    renderer: SpreadsheetRenderer,
) -> None:
    """A cutoff is written as ``dd MMM yyyy HH:mm:ss GMT``."""
    path = await renderer.render(_report(), DOCUMENTS, cutoff=CUTOFF)

    assert _summary_values(path)[0] == "05 Jan 2023 07:08:09 GMT"


def test_format_cutoff() -> None:
    """Empty cutoffs render as an empty string."""
    assert format_cutoff(None) == ""
    assert format_cutoff(CUTOFF) == "05 Jan 2023 07:08:09 GMT"


@pytest.mark.asyncio
async def test_listing_sheets_hold_urls_from_row_two(
    renderer: SpreadsheetRenderer,
) -> None:
    """Office, invalid PDF and OOXML URLs fill column A of sheets 2-4."""
    path = await renderer.render(_report(), DOCUMENTS, cutoff=None)

    workbook = load_workbook(path)
    try:
        office, invalid_pdf, ooxml = workbook.worksheets[1:4]
        assert _column_a(office) == DOCUMENTS.office
        assert _column_a(invalid_pdf) == DOCUMENTS.invalid_pdf
        assert _column_a(ooxml) == DOCUMENTS.ooxml
        assert office["A1"].value == "Microsoft Office documents"
    finally:
        workbook.close()


@pytest.mark.asyncio
async def test_each_render_starts_from_the_template(
    renderer: SpreadsheetRenderer, template_path: Path
) -> None:
    """A smaller second render carries no rows from the first."""
    template_bytes = template_path.read_bytes()
    first = await renderer.render(_report(), DOCUMENTS, cutoff=None)
    second = await renderer.render(_report(), ReportDocuments(), cutoff=None)

    assert first != second
    workbook = load_workbook(second)
    try:
        assert [_column_a(sheet) for sheet in workbook.worksheets[1:4]] == [[], [], []]
    finally:
        workbook.close()
    assert template_path.read_bytes() == template_bytes


@pytest.mark.asyncio
async def test_concurrent_renders_publish_distinct_files(
    renderer: SpreadsheetRenderer, tmp_path: Path
) -> None:
    """Concurrent renders never share an output path or leave temp files."""
    paths = await asyncio.gather(
        *(renderer.render(_report(f"J{i}"), DOCUMENTS, cutoff=None) for i in range(4))
    )

    assert len(set(paths)) == 4
    assert all(path.exists() for path in paths)
    assert list((tmp_path / "reports").glob("*.tmp")) == []


@pytest.mark.asyncio
async def test_missing_template_is_unavailable(tmp_path: Path) -> None:
    """A missing template raises TemplateUnavailableError."""
    renderer = SpreadsheetRenderer(tmp_path / "absent.xlsx", tmp_path / "out")

    with pytest.raises(TemplateUnavailableError):
        await renderer.render(_report(), DOCUMENTS, cutoff=None)


@pytest.mark.asyncio
async def test_corrupt_template_is_unavailable(tmp_path: Path) -> None:
    """A file that is not a workbook raises TemplateUnavailableError."""
    template = tmp_path / "broken.xlsx"
    template.write_text("not a spreadsheet")
    renderer = SpreadsheetRenderer(template, tmp_path / "out")

    with pytest.raises(TemplateUnavailableError):
        await renderer.render(_report(), DOCUMENTS, cutoff=None)


@pytest.mark.asyncio
async def test_template_with_too_few_sheets_is_unavailable(tmp_path: Path) -> None:
    """Templates must provide the summary and three listing sheets."""
    template = tmp_path / "single.xlsx"
    Workbook().save(template)
    renderer = SpreadsheetRenderer(template, tmp_path / "out")

    with pytest.raises(TemplateUnavailableError, match="at least 4 sheets"):
        await renderer.render(_report(), DOCUMENTS, cutoff=None)


@pytest.mark.asyncio
async def test_unwritable_output_raises_render_failed(
    template_path: Path, tmp_path: Path
) -> None:
    """An output directory that cannot be created raises RenderFailedError."""
    blocker = tmp_path / "blocker"
    blocker.write_text("a file, not a directory")
    renderer = SpreadsheetRenderer(template_path, blocker / "reports")

    with pytest.raises(RenderFailedError):
        await renderer.render(_report(), DOCUMENTS, cutoff=None)


def test_artifact_name_is_unique_and_filesystem_safe() -> None:
    """Artifact names embed a sanitized job id and a random suffix."""
    first = artifact_name("../weekly job")
    second = artifact_name("../weekly job")

    assert first != second
    assert first.startswith("report-weekly_job-")
    assert first.endswith(".xlsx")
    assert "/" not in first


@pytest.mark.asyncio
async def test_control_character_in_url_raises_render_failed(
    renderer: SpreadsheetRenderer, tmp_path: Path
) -> None:
    """A URL that cannot be stored in a cell raises RenderFailedError."""
    documents = ReportDocuments(invalid_pdf=["http://site/a\x0bb.pdf"])

    with pytest.raises(RenderFailedError, match="J1"):
        await renderer.render(_report(), documents, cutoff=None)

    assert not list((tmp_path / "reports").glob("*")), "no artifact is published"


@pytest.mark.asyncio
async def test_cells_outside_the_report_layout_are_preserved(tmp_path: Path) -> None:
    """Extra sheets, columns and labels in a custom template survive rendering."""
    template = build_default_template()
    template.worksheets[0]["C3"] = "reviewed by audit"
    template.worksheets[1]["B2"] = "checked"
    notes = template.create_sheet("Notes")
    notes["A1"] = "keep this sheet"
    notes["D7"] = 99
    template_path = tmp_path / "custom.xlsx"
    template.save(template_path)
    renderer = SpreadsheetRenderer(template_path, tmp_path / "reports")

    path = await renderer.render(_report(), DOCUMENTS, cutoff=CUTOFF)

    workbook = load_workbook(path)
    try:
        summary, office = workbook.worksheets[0], workbook.worksheets[1]
        labels = {
            field: summary.cell(row=address.row + 1, column=1).value
            for field, address in SUMMARY_LAYOUT.items()
        }
        assert labels == SUMMARY_LABELS
        assert summary["C3"].value == "reviewed by audit"
        assert office["B2"].value == "checked"
        assert office["A2"].value == DOCUMENTS.office[0]
        assert workbook.sheetnames[4] == "Notes"
        assert workbook["Notes"]["A1"].value == "keep this sheet"
        assert workbook["Notes"]["D7"].value == 99
    finally:
        workbook.close()
