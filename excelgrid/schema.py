"""Shared data structures for render resource compilation."""

# Module responsibilities:
# - Provide immutable containers for resolved fields, header cells and style keys.
# - Keep the structures free of openpyxl types so layout code stays engine-agnostic.

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import TYPE_CHECKING, Mapping, Optional, Tuple

if TYPE_CHECKING:
    from .columns import ColumnStyle

PATH_SEPARATOR = "."


class RenderLocation(str, Enum):
    """Where a cell sits in the document."""

    HEADER = "header"
    BODY = "body"


@dataclass(frozen=True)
class StyleKey:
    """Lookup key into the style table."""

    field_path: str
    location: RenderLocation


@dataclass(frozen=True)
class FieldDescriptor:
    """One annotated field resolved from a record type."""

    name: str
    field_type: type
    path: str
    header_name: str
    depth: int
    parent_path: Optional[str] = None
    children: Tuple[str, ...] = ()
    header_style: Optional["ColumnStyle"] = None
    body_style: Optional["ColumnStyle"] = None

    @property
    def is_leaf(self) -> bool:
        return not self.children


@dataclass(frozen=True)
class RecordSchema:
    """Breadth-first ordered fields of a record type plus type-level style defaults."""

    root_type: type
    fields: Tuple[FieldDescriptor, ...]
    max_depth: int
    default_header_style: Optional["ColumnStyle"] = None
    default_body_style: Optional["ColumnStyle"] = None

    def field(self, path: str) -> FieldDescriptor:
        for descriptor in self.fields:
            if descriptor.path == path:
                return descriptor
        raise KeyError(path)

    @property
    def paths(self) -> Tuple[str, ...]:
        return tuple(descriptor.path for descriptor in self.fields)

    @property
    def leaf_paths(self) -> Tuple[str, ...]:
        return tuple(descriptor.path for descriptor in self.fields if descriptor.is_leaf)


@dataclass(frozen=True)
class HeaderCell:
    """Rectangular header region, 0-based and inclusive on both ends."""

    header_name: str
    first_row: int
    last_row: int
    first_column: int
    last_column: int

    def __post_init__(self) -> None:
        if self.last_row < self.first_row or self.last_column < self.first_column:
            raise ValueError(f"Invalid header cell range: {self}")

    @property
    def row_span(self) -> int:
        return self.last_row - self.first_row + 1

    @property
    def column_span(self) -> int:
        return self.last_column - self.first_column + 1

    @property
    def is_merged(self) -> bool:
        """True when the region covers more than one physical cell."""

        return self.last_row > self.first_row or self.last_column > self.first_column

    def translated(self, row_offset: int, column_offset: int) -> "HeaderCell":
        """Return a copy moved by the given sheet origin."""

        return HeaderCell(
            header_name=self.header_name,
            first_row=self.first_row + row_offset,
            last_row=self.last_row + row_offset,
            first_column=self.first_column + column_offset,
            last_column=self.last_column + column_offset,
        )


@dataclass(frozen=True)
class HeaderLayout:
    """Compiled header grid: total height and one cell per field path."""

    height: int
    cells: Mapping[str, HeaderCell]

    def __post_init__(self) -> None:
        object.__setattr__(self, "cells", MappingProxyType(dict(self.cells)))

    def cell(self, field_path: str) -> HeaderCell:
        return self.cells[field_path]

    @property
    def width(self) -> int:
        if not self.cells:
            return 0
        return max(cell.last_column for cell in self.cells.values()) + 1
