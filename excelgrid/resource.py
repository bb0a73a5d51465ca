"""
RESPONSIBILITIES
- Bundle resolved fields, header layout and style table into one immutable resource.
- Expose the per-cell lookups the document renderer needs.
PROCESS OVERVIEW
1. resolve_fields() walks the record type once and yields ordered descriptors.
2. compute_layout() and build_style_table() consume the descriptors independently.
3. RenderResource freezes the results; renderers only read from it afterwards.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

from .accessor import FieldAccessor
from .layout import body_columns, compute_layout
from .resolver import resolve_fields
from .schema import HeaderCell, HeaderLayout, RecordSchema, RenderLocation
from .styles import DataFormatDecider, StyleHandle, StyleTable, build_style_table
from .utils.log import get_logger

logger = get_logger("resource")


@dataclass(frozen=True)
class BodyColumn:
    """A leaf path bound to its relative column and compiled accessor."""

    field_path: str
    column: int
    accessor: FieldAccessor


@dataclass(frozen=True)
class RenderResource:
    """Everything needed to render a record type, computed once."""

    schema: RecordSchema
    field_paths: Tuple[str, ...]
    leaf_field_paths: Tuple[str, ...]
    header: HeaderLayout
    styles: StyleTable
    body_columns: Tuple[BodyColumn, ...]

    @property
    def header_height(self) -> int:
        return self.header.height

    def header_cell(self, field_path: str) -> HeaderCell:
        return self.header.cell(field_path)

    def cell_style(self, field_path: str, location: RenderLocation) -> StyleHandle:
        return self.styles.get(field_path, location)


def prepare_render_resource(
    record_type: type,
    data_format_decider: Optional[DataFormatDecider] = None,
) -> RenderResource:
    """Compile ``record_type`` into a reusable render resource.

    Raises:
        SchemaError: When the type has no annotated columns.
        StyleResolutionError: When a declared style constant does not exist.
    """

    schema = resolve_fields(record_type)
    header = compute_layout(schema)
    styles = build_style_table(schema, data_format_decider)
    columns = tuple(
        BodyColumn(field_path=path, column=column, accessor=FieldAccessor.compile(path))
        for path, column in body_columns(header, schema.leaf_paths)
    )

    logger.info(
        "Render resource prepared",
        extra={
            "type": record_type.__qualname__,
            "fields": len(schema.fields),
            "columns": len(columns),
            "header_height": header.height,
        },
    )
    return RenderResource(
        schema=schema,
        field_paths=schema.paths,
        leaf_field_paths=schema.leaf_paths,
        header=header,
        styles=styles,
        body_columns=columns,
    )
