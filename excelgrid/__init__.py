"""`excelgrid` renders annotated record types into XLSX workbooks."""

# Module responsibilities:
# - Re-export the declaration API, the render resource compiler and the document renderer
#   so consumers have a stable API surface.

from __future__ import annotations

from .columns import Column, ColumnStyle, default_body_style, default_header_style
from .config import PaginationMode, RenderOptions, load_render_options
from .errors import (
    CapacityExceededError,
    ConfigError,
    ExcelGridError,
    FieldAccessError,
    RenderError,
    SchemaError,
    StyleResolutionError,
)
from .layout import compute_layout
from .renderer import ExcelDocument, render_workbook, write_excel
from .resolver import resolve_fields
from .resource import RenderResource, prepare_render_resource
from .schema import FieldDescriptor, HeaderCell, HeaderLayout, RenderLocation, StyleKey
from .styles import (
    BlackHeaderStyle,
    BlueHeaderStyle,
    CustomExcelCellStyle,
    DataFormatDecider,
    DefaultDataFormatDecider,
    DefaultExcelCellStyle,
    ExcelCellStyle,
    ExcelCellStyleConfigurer,
    NoExcelCellStyle,
    StyleHandle,
    build_style_table,
)

__all__ = [
    "Column",
    "ColumnStyle",
    "default_header_style",
    "default_body_style",
    "PaginationMode",
    "RenderOptions",
    "load_render_options",
    "ExcelGridError",
    "ConfigError",
    "SchemaError",
    "StyleResolutionError",
    "CapacityExceededError",
    "RenderError",
    "FieldAccessError",
    "resolve_fields",
    "compute_layout",
    "build_style_table",
    "prepare_render_resource",
    "RenderResource",
    "ExcelDocument",
    "render_workbook",
    "write_excel",
    "FieldDescriptor",
    "HeaderCell",
    "HeaderLayout",
    "RenderLocation",
    "StyleKey",
    "StyleHandle",
    "ExcelCellStyle",
    "NoExcelCellStyle",
    "CustomExcelCellStyle",
    "ExcelCellStyleConfigurer",
    "BlueHeaderStyle",
    "BlackHeaderStyle",
    "DefaultExcelCellStyle",
    "DataFormatDecider",
    "DefaultDataFormatDecider",
]

__version__ = "0.1.0"
