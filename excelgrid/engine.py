"""openpyxl-backed spreadsheet engine."""

# Module responsibilities:
# - Own the openpyxl Workbook: sheets, cells, merged regions and physical styles.
# - Translate 0-based grid coordinates to openpyxl's 1-based rows/columns.
# - Track display widths while cells are written so columns can be auto-sized.

from __future__ import annotations

import unicodedata
from pathlib import Path
from typing import IO, Any, Dict, Optional, Union

from openpyxl import Workbook
from openpyxl.styles import Border, Side
from openpyxl.utils import get_column_letter
from openpyxl.worksheet.worksheet import Worksheet

from .styles import StyleHandle

EXCEL_MAX_ROWS = 1_048_576
EXCEL_MAX_COLUMNS = 16_384
MAX_SHEET_TITLE_LENGTH = 31
INVALID_TITLE_CHARACTERS = frozenset("[]:*?/\\")

_THIN = Side(style="thin", color="FF000000")


def display_width(value: Any) -> int:
    """Approximate rendered width in characters; East Asian wide glyphs count twice."""

    text = "" if value is None else str(value)
    widest = 0
    for line in text.splitlines() or [""]:
        width = sum(2 if unicodedata.east_asian_width(ch) in ("W", "F") else 1 for ch in line)
        widest = max(widest, width)
    return widest


class WorkbookEngine:
    """Thin command surface over an openpyxl workbook."""

    def __init__(self) -> None:
        self.workbook = Workbook()
        self.workbook.remove(self.workbook.active)
        self._widths: Dict[str, Dict[int, int]] = {}

    @property
    def sheet_names(self) -> list[str]:
        return list(self.workbook.sheetnames)

    def create_sheet(self, title: str) -> Worksheet:
        sheet = self.workbook.create_sheet(title=title)
        self._widths[sheet.title] = {}
        return sheet

    def write_cell(
        self,
        sheet: Worksheet,
        row: int,
        column: int,
        value: Any,
        style: Optional[StyleHandle] = None,
        *,
        measure: bool = True,
    ) -> None:
        cell = sheet.cell(row=row + 1, column=column + 1, value=value)
        if isinstance(value, str) and value.startswith("="):
            # Keep text that looks like a formula as plain text.
            cell.data_type = "s"
        if style is not None:
            cell.number_format = style.number_format
            if style.font is not None:
                cell.font = style.font
            if style.fill is not None:
                cell.fill = style.fill
            if style.border is not None:
                cell.border = style.border
            if style.alignment is not None:
                cell.alignment = style.alignment
        if measure:
            widths = self._widths.setdefault(sheet.title, {})
            widths[column] = max(widths.get(column, 0), display_width(value))

    def merge(self, sheet: Worksheet, first_row: int, last_row: int, first_column: int, last_column: int) -> None:
        sheet.merge_cells(
            start_row=first_row + 1,
            end_row=last_row + 1,
            start_column=first_column + 1,
            end_column=last_column + 1,
        )

    def outline_merged_regions(self, sheet: Worksheet) -> None:
        """Draw thin borders around the edges of every merged region."""

        for merged in sheet.merged_cells.ranges:
            for row in range(merged.min_row, merged.max_row + 1):
                for column in range(merged.min_col, merged.max_col + 1):
                    top = row == merged.min_row
                    bottom = row == merged.max_row
                    left = column == merged.min_col
                    right = column == merged.max_col
                    if not (top or bottom or left or right):
                        continue
                    cell = sheet.cell(row=row, column=column)
                    current = cell.border
                    cell.border = Border(
                        left=_THIN if left else current.left,
                        right=_THIN if right else current.right,
                        top=_THIN if top else current.top,
                        bottom=_THIN if bottom else current.bottom,
                    )

    def auto_size_column(self, sheet: Worksheet, column: int, padding: int) -> None:
        width = self._widths.get(sheet.title, {}).get(column)
        if width is None:
            return
        sheet.column_dimensions[get_column_letter(column + 1)].width = width + padding

    def auto_size_columns(self, sheet: Worksheet, padding: int) -> None:
        for column in sorted(self._widths.get(sheet.title, {})):
            self.auto_size_column(sheet, column, padding)

    def save(self, target: Union[str, Path, IO[bytes]]) -> None:
        if isinstance(target, (str, Path)):
            Path(target).parent.mkdir(parents=True, exist_ok=True)
        self.workbook.save(target)
