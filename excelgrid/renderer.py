"""Paginated document rendering."""

# Module responsibilities:
# - Replay the compiled header and stream body rows into one or more sheets.
# - Roll over to a fresh sheet (with header) when the row ceiling is reached,
#   or refuse oversized input up front in strict single-sheet mode.
# - Convert leaf values into cell values (numbers, joined sequences, text).

from __future__ import annotations

import math
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from pathlib import Path
from typing import IO, Any, Iterable, Optional, Sized, Union

from openpyxl.workbook import Workbook
from openpyxl.worksheet.worksheet import Worksheet

from .config import PaginationMode, RenderOptions
from .engine import EXCEL_MAX_COLUMNS, MAX_SHEET_TITLE_LENGTH, WorkbookEngine
from .errors import CapacityExceededError, ConfigError, FieldAccessError, RenderError
from .resource import RenderResource, prepare_render_resource
from .schema import RenderLocation
from .utils.log import get_logger

logger = get_logger("renderer")

_SEQUENCE_TYPES = (list, tuple, set, frozenset)


class RenderPhase(str, Enum):
    NEW_SHEET = "new_sheet"
    HEADER_WRITTEN = "header_written"
    BODY_ROWS = "body_rows"
    OVERFLOW = "overflow"
    FINISHED = "finished"


@dataclass
class PaginationState:
    """Cursor over the sheet currently receiving rows."""

    sheet: Worksheet
    sheet_index: int
    row_cursor: int
    row_ceiling: int
    body_rows: int = 0


def format_sequence(values: Iterable[Any], separator: str) -> str:
    return separator.join("" if item is None else str(item) for item in values)


def to_cell_value(value: Any, list_separator: str = ", ") -> Any:
    """Map a leaf value onto what the cell should hold.

    Numbers stay numeric (``Decimal`` becomes ``float``), sequences are joined
    into one string, ``None`` and non-finite floats become an empty string and
    everything else is rendered through ``str``.
    """

    if value is None:
        return ""
    if isinstance(value, bool):
        return str(value)
    if isinstance(value, Decimal):
        value = float(value)
    if isinstance(value, float) and not math.isfinite(value):
        # The file format has no representation for NaN or infinity.
        return ""
    if isinstance(value, (int, float)):
        return value
    if isinstance(value, _SEQUENCE_TYPES):
        return format_sequence(value, list_separator)
    return str(value)


class ExcelDocument:
    """One XLSX document rendered from a record type.

    Usage:
        document = ExcelDocument(EmployeeRow, RenderOptions(sheet_name="Staff"))
        document.render(rows)
        document.save(Path("staff.xlsx"))
    """

    def __init__(
        self,
        source: Union[type, RenderResource],
        options: Optional[RenderOptions] = None,
        *,
        engine: Optional[WorkbookEngine] = None,
    ) -> None:
        self.options = options or RenderOptions()
        if isinstance(source, RenderResource):
            self.resource = source
        else:
            self.resource = prepare_render_resource(source, self.options.data_format_decider)
        self.engine = engine or WorkbookEngine()
        self.row_ceiling = self.options.resolve_row_ceiling()
        self.phase = RenderPhase.NEW_SHEET
        self._state: Optional[PaginationState] = None
        self._validate_capacity_settings()
        self._sheet_title(1)

    def _validate_capacity_settings(self) -> None:
        first_body_row = self.options.origin_row + self.resource.header_height
        if first_body_row >= self.row_ceiling:
            raise ConfigError(
                f"Row ceiling {self.row_ceiling} leaves no room for body rows below a "
                f"{self.resource.header_height}-row header at row {self.options.origin_row}"
            )
        last_column = self.options.origin_column + self.resource.header.width
        if last_column > EXCEL_MAX_COLUMNS:
            raise ConfigError(
                f"{self.resource.header.width} columns starting at column {self.options.origin_column} "
                f"exceed the sheet limit of {EXCEL_MAX_COLUMNS} columns"
            )

    @property
    def workbook(self) -> Workbook:
        return self.engine.workbook

    @property
    def sheet_names(self) -> list[str]:
        return self.engine.sheet_names

    @property
    def state(self) -> Optional[PaginationState]:
        return self._state

    @property
    def body_capacity(self) -> int:
        """Body rows one sheet can hold."""

        return self.row_ceiling - self.options.origin_row - self.resource.header_height

    def render(self, records: Iterable[Any]) -> "ExcelDocument":
        """Render ``records`` (possibly none) and finish the document."""

        self.add_rows(records)
        self.finish()
        return self

    def add_rows(self, records: Iterable[Any]) -> int:
        """Append records after whatever was rendered so far.

        In paginated mode rows continue on new sheets whenever the current one
        is full. In strict mode the whole batch is checked before any row is
        written.

        Returns:
            Number of rows written by this call.

        Raises:
            CapacityExceededError: Strict mode only, when the batch does not fit.
            ConfigError: When the sheets needed for the batch would get titles
                longer than Excel allows.
            FieldAccessError: When a field path cannot be read from a record.
            RenderError: When a value cannot be written.
        """

        strict = self.options.mode is PaginationMode.SINGLE_SHEET
        if strict:
            records = list(records)
            self._check_capacity(len(records))
        elif isinstance(records, Sized):
            self._sheet_title(self._last_sheet_index(len(records)))

        state = self._state or self._start_sheet(1)
        written = 0
        for record in records:
            if not strict and state.row_cursor >= state.row_ceiling:
                state = self._overflow(state)
            self._write_body_row(state, record)
            written += 1

        logger.info(
            "Rows appended",
            extra={
                "rows": written,
                "sheet": state.sheet.title,
                "sheets": len(self.sheet_names),
                "mode": self.options.mode.value,
            },
        )
        return written

    def finish(self) -> None:
        """Auto-size the last sheet and mark the document ready to save."""

        state = self._state or self._start_sheet(1)
        self.engine.auto_size_columns(state.sheet, self.options.column_width_padding)
        self.phase = RenderPhase.FINISHED

    def save(self, path: Path) -> Path:
        if self.phase is not RenderPhase.FINISHED:
            self.finish()
        self.engine.save(path)
        logger.info("Workbook saved", extra={"output": str(path), "sheets": self.sheet_names})
        return path

    def write(self, stream: IO[bytes]) -> None:
        if self.phase is not RenderPhase.FINISHED:
            self.finish()
        self.engine.save(stream)

    def _rows_on_current_sheet(self) -> int:
        return 0 if self._state is None else self._state.body_rows

    def _check_capacity(self, incoming: int) -> None:
        written = self._rows_on_current_sheet()
        if written + incoming > self.body_capacity:
            raise CapacityExceededError(
                f"Single-sheet document holds at most {self.body_capacity} rows; "
                f"{written} written, {incoming} more requested"
            )

    def _last_sheet_index(self, incoming: int) -> int:
        """Index of the sheet the last of ``incoming`` paginated rows lands on."""

        index = 1 if self._state is None else self._state.sheet_index
        spill = incoming - (self.body_capacity - self._rows_on_current_sheet())
        if spill <= 0:
            return index
        return index + math.ceil(spill / self.body_capacity)

    def _sheet_title(self, index: int) -> str:
        title = f"{self.options.sheet_name}{index}"
        if len(title) > MAX_SHEET_TITLE_LENGTH:
            raise ConfigError(
                f"Sheet title {title!r} exceeds {MAX_SHEET_TITLE_LENGTH} characters; "
                f"use a shorter sheet_name"
            )
        return title

    def _start_sheet(self, index: int) -> PaginationState:
        self.phase = RenderPhase.NEW_SHEET
        sheet = self.engine.create_sheet(self._sheet_title(index))
        self._render_header(sheet)
        self._state = PaginationState(
            sheet=sheet,
            sheet_index=index,
            row_cursor=self.options.origin_row + self.resource.header_height,
            row_ceiling=self.row_ceiling,
        )
        self.phase = RenderPhase.HEADER_WRITTEN
        return self._state

    def _overflow(self, previous: PaginationState) -> PaginationState:
        self.phase = RenderPhase.OVERFLOW
        self.engine.auto_size_columns(previous.sheet, self.options.column_width_padding)
        state = self._start_sheet(previous.sheet_index + 1)
        logger.info(
            "Sheet row ceiling reached, continuing on new sheet",
            extra={
                "previous_sheet": previous.sheet.title,
                "body_rows": previous.body_rows,
                "next_sheet": state.sheet.title,
            },
        )
        return state

    def _render_header(self, sheet: Worksheet) -> None:
        resource = self.resource
        for field_path in resource.field_paths:
            cell = resource.header_cell(field_path).translated(
                self.options.origin_row, self.options.origin_column
            )
            self.engine.write_cell(
                sheet,
                cell.first_row,
                cell.first_column,
                cell.header_name,
                resource.cell_style(field_path, RenderLocation.HEADER),
                measure=cell.column_span == 1,
            )
            if cell.is_merged:
                self.engine.merge(sheet, cell.first_row, cell.last_row, cell.first_column, cell.last_column)
        self.engine.outline_merged_regions(sheet)

    def _write_body_row(self, state: PaginationState, record: Any) -> None:
        self.phase = RenderPhase.BODY_ROWS
        for column in self.resource.body_columns:
            try:
                value = to_cell_value(column.accessor.get(record), self.options.list_separator)
                self.engine.write_cell(
                    state.sheet,
                    state.row_cursor,
                    self.options.origin_column + column.column,
                    value,
                    self.resource.cell_style(column.field_path, RenderLocation.BODY),
                )
            except FieldAccessError:
                logger.error(
                    "Field access failed",
                    extra={"field_path": column.field_path, "row": state.row_cursor},
                )
                raise
            except Exception as exc:  # pylint: disable=broad-except
                raise RenderError(
                    f"Failed to render '{column.field_path}' at row {state.row_cursor}: {exc}"
                ) from exc
        state.row_cursor += 1
        state.body_rows += 1


def expected_sheet_count(rows: int, body_capacity: int) -> int:
    """Sheets a paginated render of ``rows`` records produces."""

    return max(1, math.ceil(rows / body_capacity))


def render_workbook(
    record_type: Union[type, RenderResource],
    records: Iterable[Any],
    options: Optional[RenderOptions] = None,
) -> Workbook:
    """Render ``records`` and return the openpyxl workbook."""

    return ExcelDocument(record_type, options).render(records).workbook


def write_excel(
    record_type: Union[type, RenderResource],
    records: Iterable[Any],
    out_path: Path,
    options: Optional[RenderOptions] = None,
) -> Path:
    """Render ``records`` into ``out_path`` and return the path."""

    return ExcelDocument(record_type, options).render(records).save(out_path)
