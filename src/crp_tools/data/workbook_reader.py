"""Spreadsheet loader producing header-keyed rows from uploaded workbooks."""

from __future__ import annotations

import logging
from datetime import date, datetime, time
from io import BytesIO
from typing import Iterable, Sequence

from openpyxl import load_workbook

from ..models.domain import CellValue, Row

EMPTY_HEADER = "__EMPTY"

logger = logging.getLogger(__name__)


class WorkbookReadError(ValueError):
    """Raised when an uploaded payload cannot be read as an .xlsx workbook."""


def cell_to_text(value: CellValue) -> str:
    """Render a cell value the way it reads on the sheet."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (datetime, date, time)):
        return value.isoformat()
    return str(value)


def read_first_sheet_rows(payload: bytes) -> list[Row]:
    """Load the first worksheet of an .xlsx payload as a list of rows."""
    if not payload:
        raise WorkbookReadError("Uploaded workbook is empty.")
    try:
        workbook = load_workbook(filename=BytesIO(payload), data_only=True)
    except Exception as exc:
        raise WorkbookReadError(f"Unable to read workbook: {exc}") from exc

    try:
        if not workbook.worksheets:
            raise WorkbookReadError("Workbook has no worksheets.")
        worksheet = workbook.worksheets[0]
        grid = [
            list(values)
            for values in worksheet.iter_rows(
                min_row=worksheet.min_row,
                max_row=worksheet.max_row,
                min_col=worksheet.min_column,
                max_col=worksheet.max_column,
                values_only=True,
            )
        ]
        logger.debug(f"Read {len(grid)} rows from worksheet '{worksheet.title}'")
    finally:
        workbook.close()

    return rows_from_grid(grid)


def rows_from_grid(grid: Sequence[Sequence[CellValue]]) -> list[Row]:
    """Convert a cell grid into rows keyed by the first row's headers.

    Blank headers become ``__EMPTY`` and repeated headers gain ``_1``, ``_2``
    suffixes, so the second unlabeled column is ``__EMPTY_1``. Empty cells are
    left out of each row and rows without any value are skipped.
    """
    if not grid:
        return []

    width = max(len(values) for values in grid)
    headers = _header_names(list(grid[0]) + [None] * (width - len(grid[0])))

    rows: list[Row] = []
    for values in grid[1:]:
        row = {headers[index]: value for index, value in enumerate(values) if value is not None}
        if row:
            rows.append(row)
    return rows


def _header_names(cells: Iterable[CellValue]) -> list[str]:
    headers: list[str] = []
    for cell in cells:
        base = EMPTY_HEADER if cell is None else cell_to_text(cell)
        name = base
        counter = 0
        for existing in headers:
            if existing == name:
                counter += 1
                name = f"{base}_{counter}"
        headers.append(name)
    return headers
