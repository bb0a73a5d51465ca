"""Cell style policies and the precalculated style table."""

# Module responsibilities:
# - Define the ExcelCellStyle extension point plus the built-in header/body styles.
# - Decide number formats per field type through a pluggable decider.
# - Build the (field path, location) -> StyleHandle table once and expose it read-only.

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time
from decimal import Decimal
from enum import Enum
from types import MappingProxyType
from typing import Dict, Iterator, Mapping, Optional, Protocol, Tuple

from openpyxl.styles import Alignment, Border, Font, PatternFill, Side

from .errors import SchemaError
from .schema import FieldDescriptor, RecordSchema, RenderLocation, StyleKey
from .utils.log import get_logger

logger = get_logger("styles")

TEXT_FORMAT = "@"
GENERAL_FORMAT = "General"
INTEGER_FORMAT = "#,##0"
DECIMAL_FORMAT = "#,##0.00"
DATE_FORMAT = "yyyy-mm-dd"
DATETIME_FORMAT = "yyyy-mm-dd hh:mm:ss"
TIME_FORMAT = "hh:mm:ss"


@dataclass(frozen=True)
class StyleHandle:
    """Opaque, hashable description of a physical cell style."""

    number_format: str = GENERAL_FORMAT
    font: Optional[Font] = None
    fill: Optional[PatternFill] = None
    border: Optional[Border] = None
    alignment: Optional[Alignment] = None


class StyleBuilder:
    """Mutable style under construction; styles apply themselves onto it."""

    def __init__(self, number_format: str = GENERAL_FORMAT) -> None:
        self.number_format = number_format
        self.font: Optional[Font] = None
        self.fill: Optional[PatternFill] = None
        self.border: Optional[Border] = None
        self.alignment: Optional[Alignment] = None

    def build(self) -> StyleHandle:
        return StyleHandle(
            number_format=self.number_format,
            font=self.font,
            fill=self.fill,
            border=self.border,
            alignment=self.alignment,
        )


class ExcelCellStyle:
    """Base class for every style a column can declare."""

    def apply(self, builder: StyleBuilder) -> None:
        raise NotImplementedError


class NoExcelCellStyle(ExcelCellStyle):
    """Leaves the engine defaults untouched."""

    def apply(self, builder: StyleBuilder) -> None:
        return None


def _rgb(red: int, green: int, blue: int) -> str:
    return f"FF{red:02X}{green:02X}{blue:02X}"


def thin_borders() -> Border:
    side = Side(style="thin", color="FF000000")
    return Border(left=side, right=side, top=side, bottom=side)


class ExcelCellStyleConfigurer:
    """Fluent collector used by ``CustomExcelCellStyle.configure``."""

    def __init__(self) -> None:
        self._fill: Optional[PatternFill] = None
        self._font: Optional[Font] = None
        self._border: Optional[Border] = None
        self._alignment: Optional[Alignment] = None

    def foreground_color(self, red: int, green: int, blue: int) -> "ExcelCellStyleConfigurer":
        color = _rgb(red, green, blue)
        self._fill = PatternFill(fill_type="solid", fgColor=color, bgColor=color)
        return self

    def font(
        self,
        *,
        bold: bool = False,
        color: Tuple[int, int, int] | None = None,
        size: float | None = None,
    ) -> "ExcelCellStyleConfigurer":
        self._font = Font(
            bold=bold,
            color=_rgb(*color) if color else None,
            size=size,
        )
        return self

    def excel_border(self, border: Border) -> "ExcelCellStyleConfigurer":
        self._border = border
        return self

    def excel_align(self, horizontal: str = "center", vertical: str = "center") -> "ExcelCellStyleConfigurer":
        self._alignment = Alignment(horizontal=horizontal, vertical=vertical)
        return self

    def configure(self, builder: StyleBuilder) -> None:
        if self._fill is not None:
            builder.fill = self._fill
        if self._font is not None:
            builder.font = self._font
        if self._border is not None:
            builder.border = self._border
        if self._alignment is not None:
            builder.alignment = self._alignment


class CustomExcelCellStyle(ExcelCellStyle):
    """Subclass and implement ``configure`` to declare a reusable style."""

    def __init__(self) -> None:
        self._configurer = ExcelCellStyleConfigurer()
        self.configure(self._configurer)

    def configure(self, configurer: ExcelCellStyleConfigurer) -> None:
        raise NotImplementedError

    def apply(self, builder: StyleBuilder) -> None:
        self._configurer.configure(builder)


class BlueHeaderStyle(CustomExcelCellStyle):
    def configure(self, configurer: ExcelCellStyleConfigurer) -> None:
        configurer.foreground_color(223, 235, 246).font(bold=True).excel_border(
            thin_borders()
        ).excel_align()


class BlackHeaderStyle(CustomExcelCellStyle):
    def configure(self, configurer: ExcelCellStyleConfigurer) -> None:
        configurer.foreground_color(0, 0, 0).font(bold=True, color=(255, 255, 255)).excel_border(
            thin_borders()
        ).excel_align()


class DefaultExcelCellStyle(ExcelCellStyle, Enum):
    """Named style set; select members with ``ColumnStyle.from_set``."""

    GREY_HEADER = ((217, 217, 217), True, "center")
    BLUE_HEADER = ((223, 235, 246), True, "center")
    BODY = (None, True, "right")

    def __init__(self, rgb: Optional[Tuple[int, int, int]], bordered: bool, horizontal: str) -> None:
        self._configurer = ExcelCellStyleConfigurer().excel_align(horizontal=horizontal)
        if rgb is not None:
            self._configurer.foreground_color(*rgb)
        if bordered:
            self._configurer.excel_border(thin_borders())

    def apply(self, builder: StyleBuilder) -> None:
        self._configurer.configure(builder)


class DataFormatDecider(Protocol):
    """Pick a number format for values of ``field_type``."""

    def __call__(self, field_type: type) -> str:  # pragma: no cover - interface definition
        ...


class DefaultDataFormatDecider:
    """Thousands separators for numbers, ISO-like dates, text for the rest."""

    def __call__(self, field_type: type) -> str:
        if not isinstance(field_type, type):
            return TEXT_FORMAT
        # bool before int: bool is an int subclass.
        if issubclass(field_type, bool):
            return GENERAL_FORMAT
        if issubclass(field_type, int):
            return INTEGER_FORMAT
        if issubclass(field_type, (float, Decimal)):
            return DECIMAL_FORMAT
        if issubclass(field_type, datetime):
            return DATETIME_FORMAT
        if issubclass(field_type, date):
            return DATE_FORMAT
        if issubclass(field_type, time):
            return TIME_FORMAT
        return TEXT_FORMAT


class StyleTable:
    """Read-only mapping of ``StyleKey`` to interned ``StyleHandle``."""

    def __init__(self, styles: Mapping[StyleKey, StyleHandle]) -> None:
        self._styles: Mapping[StyleKey, StyleHandle] = MappingProxyType(dict(styles))

    def get(self, field_path: str, location: RenderLocation) -> StyleHandle:
        return self._styles[StyleKey(field_path, location)]

    def __getitem__(self, key: StyleKey) -> StyleHandle:
        return self._styles[key]

    def __contains__(self, key: object) -> bool:
        return key in self._styles

    def __iter__(self) -> Iterator[StyleKey]:
        return iter(self._styles)

    def __len__(self) -> int:
        return len(self._styles)

    def is_empty(self) -> bool:
        return not self._styles

    def distinct_handles(self) -> int:
        return len({id(handle) for handle in self._styles.values()})


def _effective_policy(descriptor: FieldDescriptor, schema: RecordSchema, location: RenderLocation):
    if location is RenderLocation.HEADER:
        field_policy, type_policy = descriptor.header_style, schema.default_header_style
    else:
        field_policy, type_policy = descriptor.body_style, schema.default_body_style
    return field_policy if field_policy is not None else type_policy


def build_style_table(
    schema: RecordSchema,
    data_format_decider: Optional[DataFormatDecider] = None,
) -> StyleTable:
    """Resolve the effective style of every field for header and body.

    Field-level policies win over the root type's defaults; without either the
    cell only carries its number format. Headers always use the text format,
    bodies ask ``data_format_decider`` about the field type.

    Raises:
        StyleResolutionError: When a named style constant does not exist.
        SchemaError: When the schema produced no entries at all.
    """

    decider = data_format_decider or DefaultDataFormatDecider()
    header_format = decider(str)
    styles: Dict[StyleKey, StyleHandle] = {}
    interned: Dict[StyleHandle, StyleHandle] = {}

    for descriptor in schema.fields:
        for location in RenderLocation:
            number_format = header_format if location is RenderLocation.HEADER else decider(descriptor.field_type)
            builder = StyleBuilder(number_format)
            policy = _effective_policy(descriptor, schema, location)
            if policy is not None:
                policy.resolve().apply(builder)
            handle = builder.build()
            styles[StyleKey(descriptor.path, location)] = interned.setdefault(handle, handle)

    if not styles:
        raise SchemaError(f"Type {schema.root_type.__name__} has no column styles to render")

    logger.debug(
        "Style table built",
        extra={"keys": len(styles), "handles": len(interned), "type": schema.root_type.__name__},
    )
    return StyleTable(styles)
