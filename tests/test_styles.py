"""Style table resolution tests."""

from __future__ import annotations

from datetime import date, datetime, time
from decimal import Decimal

import pytest

from excelgrid import (
    ColumnStyle,
    CustomExcelCellStyle,
    DefaultDataFormatDecider,
    DefaultExcelCellStyle,
    ExcelCellStyleConfigurer,
    RenderLocation,
    StyleKey,
    StyleResolutionError,
    build_style_table,
    prepare_render_resource,
    resolve_fields,
)
from sample_models import BrokenStyle, EmployeeMain, Measurement, OrderLine

HEADER = RenderLocation.HEADER
BODY = RenderLocation.BODY


class GreenStyle(CustomExcelCellStyle):
    def configure(self, configurer: ExcelCellStyleConfigurer) -> None:
        configurer.foreground_color(0, 128, 0).font(bold=True, size=14)


def test_field_style_overrides_type_default() -> None:
    table = build_style_table(resolve_fields(EmployeeMain))

    assert table.get("employee", HEADER).fill.fgColor.rgb == "FFDFEBF6"
    dept = table.get("dept", HEADER)
    assert dept.fill.fgColor.rgb == "FF000000"
    assert dept.font.bold is True
    assert dept.font.color.rgb == "FFFFFFFF"


def test_children_do_not_inherit_parent_field_style() -> None:
    table = build_style_table(resolve_fields(EmployeeMain))

    for path in ("dept.dept_name", "dept.dept_code", "dept.parent_dept"):
        assert table.get(path, HEADER).fill.fgColor.rgb == "FFDFEBF6"


def test_table_covers_every_field_and_location() -> None:
    schema = resolve_fields(EmployeeMain)
    table = build_style_table(schema)

    assert len(table) == 2 * len(schema.fields)
    for path in schema.paths:
        assert StyleKey(path, HEADER) in table
        assert StyleKey(path, BODY) in table
    assert not table.is_empty()


def test_equal_styles_share_one_handle() -> None:
    table = build_style_table(resolve_fields(EmployeeMain))

    assert table.get("employee", HEADER) is table.get("employee.name", HEADER)
    assert table.get("employee", HEADER) is table.get("dept.parent_dept", HEADER)
    assert table.get("employee", HEADER) is not table.get("dept", HEADER)
    assert table.distinct_handles() < len(table)


def test_number_formats_follow_field_types() -> None:
    table = build_style_table(resolve_fields(OrderLine))

    assert table.get("product.name", BODY).number_format == "@"
    assert table.get("product.price", BODY).number_format == "#,##0.00"
    assert table.get("quantity", BODY).number_format == "#,##0"
    for path in ("product", "product.name", "product.price", "quantity"):
        assert table.get(path, HEADER).number_format == "@"


def test_unstyled_cells_only_carry_number_format() -> None:
    handle = build_style_table(resolve_fields(OrderLine)).get("quantity", BODY)

    assert handle.fill is None
    assert handle.font is None
    assert handle.border is None
    assert handle.alignment is None


def test_custom_decider_is_used_for_body_and_headers() -> None:
    calls = []

    def decider(field_type: type) -> str:
        calls.append(field_type)
        return "0.000" if field_type is Decimal else "@"

    table = build_style_table(resolve_fields(OrderLine), decider)

    assert table.get("product.price", BODY).number_format == "0.000"
    assert table.get("quantity", BODY).number_format == "@"
    assert str in calls


def test_named_style_set_members() -> None:
    table = build_style_table(resolve_fields(Measurement))

    label = table.get("label", BODY)
    assert label.alignment.horizontal == "right"
    assert label.border.left.style == "thin"
    assert label.fill is None

    value = table.get("value", BODY)
    assert value.fill.fgColor.rgb == "FFD9D9D9"
    assert value.number_format == "#,##0.00"
    assert table.get("label", HEADER).fill is None


def test_unknown_style_set_member_fails() -> None:
    with pytest.raises(StyleResolutionError, match="PURPLE_HEADER"):
        prepare_render_resource(BrokenStyle)


def test_column_style_resolution_paths() -> None:
    assert ColumnStyle().resolve().__class__.__name__ == "NoExcelCellStyle"
    assert isinstance(ColumnStyle.of(GreenStyle).resolve(), GreenStyle)
    instance = GreenStyle()
    assert ColumnStyle.of(instance).resolve() is instance
    assert ColumnStyle.from_set(DefaultExcelCellStyle, "BODY").resolve() is DefaultExcelCellStyle.BODY

    with pytest.raises(StyleResolutionError):
        ColumnStyle.from_set(DefaultExcelCellStyle, "").resolve()
    with pytest.raises(StyleResolutionError):
        ColumnStyle(style=int).resolve()


def test_custom_style_configuration() -> None:
    from excelgrid.styles import StyleBuilder

    builder = StyleBuilder("@")
    GreenStyle().apply(builder)
    handle = builder.build()

    assert handle.number_format == "@"
    assert handle.fill.fgColor.rgb == "FF008000"
    assert handle.font.sz == 14
    assert handle.border is None


@pytest.mark.parametrize(
    ("field_type", "expected"),
    [
        (bool, "General"),
        (int, "#,##0"),
        (float, "#,##0.00"),
        (Decimal, "#,##0.00"),
        (datetime, "yyyy-mm-dd hh:mm:ss"),
        (date, "yyyy-mm-dd"),
        (time, "hh:mm:ss"),
        (str, "@"),
        (list, "@"),
        (object, "@"),
    ],
)
def test_default_data_format_decider(field_type: type, expected: str) -> None:
    assert DefaultDataFormatDecider()(field_type) == expected
