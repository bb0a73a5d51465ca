"""Declarative column metadata attached to record types."""

# Module responsibilities:
# - Provide the Column marker used inside ``typing.Annotated`` field declarations.
# - Describe style policies (a style implementation or a named member of a style set).
# - Offer class decorators that register type-level default header/body styles.

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Iterable, Optional, Type, TypeVar, Union

from .errors import StyleResolutionError
from .styles import ExcelCellStyle, NoExcelCellStyle

HEADER_STYLE_ATTR = "__excelgrid_header_style__"
BODY_STYLE_ATTR = "__excelgrid_body_style__"

StyleLike = Union["ColumnStyle", Type[ExcelCellStyle], ExcelCellStyle]
T = TypeVar("T", bound=type)


@dataclass(frozen=True)
class ColumnStyle:
    """Style policy: either ``style`` or ``style_set`` + ``name``."""

    style: Union[Type[ExcelCellStyle], ExcelCellStyle, None] = None
    style_set: Optional[Type[Enum]] = None
    name: Optional[str] = None

    @classmethod
    def of(cls, style: Union[Type[ExcelCellStyle], ExcelCellStyle]) -> "ColumnStyle":
        return cls(style=style)

    @classmethod
    def from_set(cls, style_set: Type[Enum], name: str) -> "ColumnStyle":
        return cls(style_set=style_set, name=name)

    def resolve(self) -> ExcelCellStyle:
        """Return the concrete style this policy points at.

        Raises:
            StyleResolutionError: When the named constant is missing from the set
                or the style class cannot be instantiated.
        """

        if self.style_set is not None:
            return self._resolve_from_set(self.style_set)
        if self.style is None:
            return NoExcelCellStyle()
        if isinstance(self.style, ExcelCellStyle):
            return self.style
        try:
            instance = self.style()
        except TypeError as exc:
            raise StyleResolutionError(f"Cannot instantiate style {self.style!r}: {exc}") from exc
        if not isinstance(instance, ExcelCellStyle):
            raise StyleResolutionError(f"{self.style!r} is not an ExcelCellStyle")
        return instance

    def _resolve_from_set(self, style_set: Type[Enum]) -> ExcelCellStyle:
        if not self.name:
            raise StyleResolutionError(f"Style set {style_set.__name__} requires a member name")
        try:
            member = style_set[self.name]
        except KeyError as exc:
            raise StyleResolutionError(
                f"Style set {style_set.__name__} does not name {self.name}"
            ) from exc
        if not isinstance(member, ExcelCellStyle):
            raise StyleResolutionError(f"{style_set.__name__}.{self.name} is not an ExcelCellStyle")
        return member


def as_column_style(value: Optional[StyleLike]) -> Optional[ColumnStyle]:
    if value is None or isinstance(value, ColumnStyle):
        return value
    return ColumnStyle(style=value)


@dataclass(frozen=True)
class Column:
    """Marks a field as rendered; use as ``Annotated[int, Column("Age")]``.

    An empty ``header`` falls back to the field name.
    """

    header: str = ""
    header_style: Optional[StyleLike] = None
    body_style: Optional[StyleLike] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "header_style", as_column_style(self.header_style))
        object.__setattr__(self, "body_style", as_column_style(self.body_style))


def find_column(metadata: Iterable[Any]) -> Optional[Column]:
    for item in metadata:
        if isinstance(item, Column):
            return item
    return None


def default_header_style(style: StyleLike) -> Callable[[T], T]:
    """Class decorator setting the header style used when a field declares none."""

    policy = as_column_style(style)

    def decorator(cls: T) -> T:
        setattr(cls, HEADER_STYLE_ATTR, policy)
        return cls

    return decorator


def default_body_style(style: StyleLike) -> Callable[[T], T]:
    """Class decorator setting the body style used when a field declares none."""

    policy = as_column_style(style)

    def decorator(cls: T) -> T:
        setattr(cls, BODY_STYLE_ATTR, policy)
        return cls

    return decorator


def type_default_styles(cls: type) -> tuple[Optional[ColumnStyle], Optional[ColumnStyle]]:
    """Return the (header, body) defaults declared on ``cls`` or its bases."""

    return getattr(cls, HEADER_STYLE_ATTR, None), getattr(cls, BODY_STYLE_ATTR, None)
