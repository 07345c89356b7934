"""Cell layout of the report spreadsheet.

Consumers parse rendered spreadsheets by coordinate, so every position the
renderer and the template builder use is declared here and nowhere else.
Coordinates are 0-based ``(column, row)`` pairs; openpyxl's 1-based indices
are derived in :meth:`CellAddress.openpyxl`.
"""

from __future__ import annotations

import dataclasses as dc
import enum

from crawlreport.documents.models import ListCategory


@dc.dataclass(frozen=True, slots=True)
class CellAddress:
    """0-based column and row of a spreadsheet cell."""

    column: int
    row: int

    def openpyxl(self) -> dict[str, int]:
        """Return keyword arguments for ``Worksheet.cell``."""
        return {"row": self.row + 1, "column": self.column + 1}


class SummaryField(enum.StrEnum):
    """Values written to the summary sheet."""

    CUTOFF = "cutoff"
    VALID_PDF = "valid_pdf"
    ODF = "odf"
    COMPLIANT_TOTAL = "compliant_total"
    INVALID_PDF = "invalid_pdf"
    OFFICE = "office"
    OOXML = "ooxml"
    NON_COMPLIANT_TOTAL = "non_compliant_total"


SUMMARY_SHEET_INDEX = 0

SUMMARY_VALUE_COLUMN = 1
SUMMARY_LABEL_COLUMN = 0

SUMMARY_LAYOUT: dict[SummaryField, CellAddress] = {
    SummaryField.CUTOFF: CellAddress(SUMMARY_VALUE_COLUMN, 0),
    SummaryField.VALID_PDF: CellAddress(SUMMARY_VALUE_COLUMN, 1),
    SummaryField.ODF: CellAddress(SUMMARY_VALUE_COLUMN, 2),
    SummaryField.COMPLIANT_TOTAL: CellAddress(SUMMARY_VALUE_COLUMN, 3),
    SummaryField.INVALID_PDF: CellAddress(SUMMARY_VALUE_COLUMN, 4),
    SummaryField.OFFICE: CellAddress(SUMMARY_VALUE_COLUMN, 5),
    SummaryField.OOXML: CellAddress(SUMMARY_VALUE_COLUMN, 6),
    SummaryField.NON_COMPLIANT_TOTAL: CellAddress(SUMMARY_VALUE_COLUMN, 7),
}

SUMMARY_LABELS: dict[SummaryField, str] = {
    SummaryField.CUTOFF: "Documents discovered since",
    SummaryField.VALID_PDF: "Valid PDF documents",
    SummaryField.ODF: "ODF documents",
    SummaryField.COMPLIANT_TOTAL: "Total open documents",
    SummaryField.INVALID_PDF: "Invalid PDF documents",
    SummaryField.OFFICE: "Microsoft Office documents",
    SummaryField.OOXML: "OOXML documents",
    SummaryField.NON_COMPLIANT_TOTAL: "Total non-open documents",
}

# Listing sheets follow the summary sheet in this order.
LISTING_SHEETS: dict[ListCategory, int] = {
    ListCategory.OFFICE: 1,
    ListCategory.INVALID_PDF: 2,
    ListCategory.OOXML: 3,
}

LISTING_TITLES: dict[ListCategory, str] = {
    ListCategory.OFFICE: "Microsoft Office",
    ListCategory.INVALID_PDF: "Invalid PDF",
    ListCategory.OOXML: "OOXML",
}

SUMMARY_TITLE = "Summary"
LISTING_HEADER = CellAddress(0, 0)
LISTING_FIRST_ROW = 1
LISTING_COLUMN = 0

REQUIRED_SHEET_COUNT = 1 + len(LISTING_SHEETS)

CUTOFF_SUFFIX = " GMT"
EMPTY_CUTOFF = ""


def listing_address(index: int) -> CellAddress:
    """Return the cell holding the ``index``-th URL of a listing sheet."""
    return CellAddress(LISTING_COLUMN, LISTING_FIRST_ROW + index)
