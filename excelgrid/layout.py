"""Header layout compilation."""

# Module responsibilities:
# - Turn the breadth-first field list into a positioned grid of header cells.
# - Keep coordinates relative to (0, 0); sheets translate them when placing the header.

from __future__ import annotations

from typing import Dict, Tuple

from .errors import SchemaError
from .schema import HeaderCell, HeaderLayout, RecordSchema


def _leaf_spans(schema: RecordSchema) -> Dict[str, int]:
    """Number of body columns under every field path."""

    spans: Dict[str, int] = {}
    # Breadth-first order reversed visits children before their parents.
    for descriptor in reversed(schema.fields):
        if descriptor.is_leaf:
            spans[descriptor.path] = 1
        else:
            spans[descriptor.path] = sum(spans[child] for child in descriptor.children)
    return spans


def compute_layout(schema: RecordSchema) -> HeaderLayout:
    """Place every field of ``schema`` on the header grid.

    Internal nodes occupy one row and span the columns of all leaves beneath
    them. Leaves span one column and stretch down to the last header row.
    Fields are processed level by level; siblings advance a column cursor by
    their span, and children start at their parent's first column.
    """

    if not schema.fields:
        raise SchemaError(f"Type {schema.root_type.__qualname__} has no fields to lay out")

    height = schema.max_depth
    spans = _leaf_spans(schema)
    cursors: Dict[str, int] = {}
    root_cursor = 0
    cells: Dict[str, HeaderCell] = {}

    for descriptor in schema.fields:
        span = spans[descriptor.path]
        if descriptor.parent_path is None:
            first_column = root_cursor
            root_cursor += span
        else:
            first_column = cursors[descriptor.parent_path]
            cursors[descriptor.parent_path] += span
        cursors[descriptor.path] = first_column

        first_row = descriptor.depth - 1
        row_span = 1 if not descriptor.is_leaf else height - descriptor.depth + 1
        cells[descriptor.path] = HeaderCell(
            header_name=descriptor.header_name,
            first_row=first_row,
            last_row=first_row + row_span - 1,
            first_column=first_column,
            last_column=first_column + span - 1,
        )

    return HeaderLayout(height=height, cells=cells)


def body_columns(layout: HeaderLayout, leaf_paths: Tuple[str, ...]) -> Tuple[Tuple[str, int], ...]:
    """Pair each leaf path with its column, ordered left to right."""

    return tuple(
        sorted(
            ((path, layout.cell(path).first_column) for path in leaf_paths),
            key=lambda item: item[1],
        )
    )
