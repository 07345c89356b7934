"""Build the default report spreadsheet template.

The template carries the sheet order, sheet titles, summary labels and
listing headers; the renderer fills in the values. Deployments may ship
their own styled template as long as it keeps the layout declared in
:mod:`crawlreport.reporting.layout`.
"""

from __future__ import annotations

import typing as typ

from openpyxl import Workbook
from openpyxl.styles import Font

from crawlreport.reporting.layout import (
    LISTING_HEADER,
    LISTING_SHEETS,
    LISTING_TITLES,
    SUMMARY_LABEL_COLUMN,
    SUMMARY_LABELS,
    SUMMARY_LAYOUT,
    SUMMARY_TITLE,
)

if typ.TYPE_CHECKING:
    from pathlib import Path

_HEADER_FONT = Font(bold=True)
_LABEL_COLUMN_WIDTH = 32
_URL_COLUMN_WIDTH = 100


def build_default_template() -> Workbook:
    """Return a workbook laid out as the renderer expects."""
    workbook = Workbook()
    summary = workbook.active
    summary.title = SUMMARY_TITLE
    for field, address in SUMMARY_LAYOUT.items():
        label = summary.cell(row=address.row + 1, column=SUMMARY_LABEL_COLUMN + 1)
        label.value = SUMMARY_LABELS[field]
        label.font = _HEADER_FONT
    summary.column_dimensions["A"].width = _LABEL_COLUMN_WIDTH

    for category, _index in sorted(LISTING_SHEETS.items(), key=lambda item: item[1]):
        sheet = workbook.create_sheet(LISTING_TITLES[category])
        header = sheet.cell(**LISTING_HEADER.openpyxl())
        header.value = f"{LISTING_TITLES[category]} documents"
        header.font = _HEADER_FONT
        sheet.column_dimensions["A"].width = _URL_COLUMN_WIDTH
    return workbook


def write_default_template(path: Path) -> Path:
    """Write the default template to ``path``, creating parent directories."""
    path.parent.mkdir(parents=True, exist_ok=True)
    build_default_template().save(path)
    return path
