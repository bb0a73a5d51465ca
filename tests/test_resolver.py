"""Unit tests for field-path resolution."""

from __future__ import annotations

from decimal import Decimal
from typing import Annotated, List, Optional

import pytest

from excelgrid import SchemaError, resolve_fields
from excelgrid.resolver import declared_type
from sample_models import Customer, EmployeeMain, Measurement, Node, Plain, PydanticEmployee, TaggedItem


def test_fields_are_breadth_first_in_declaration_order() -> None:
    schema = resolve_fields(Customer)

    assert schema.paths == (
        "name",
        "contact",
        "vip",
        "contact.email",
        "contact.address",
        "contact.address.city",
        "contact.address.zip_code",
    )
    assert schema.max_depth == 3


def test_leaf_classification_and_tree_links() -> None:
    schema = resolve_fields(Customer)

    assert schema.leaf_paths == (
        "name",
        "vip",
        "contact.email",
        "contact.address.city",
        "contact.address.zip_code",
    )
    contact = schema.field("contact")
    assert not contact.is_leaf
    assert contact.children == ("contact.email", "contact.address")
    assert schema.field("contact.address.city").parent_path == "contact.address"
    assert schema.field("contact.address.city").depth == 3


def test_unannotated_fields_are_skipped() -> None:
    schema = resolve_fields(Customer)

    assert "internal_id" not in schema.paths


def test_header_name_defaults_to_field_name() -> None:
    schema = resolve_fields(Measurement)

    assert schema.field("label").header_name == "label"
    assert schema.field("value").header_name == "Value"


def test_declared_types_unwrap_optional_and_generics() -> None:
    schema = resolve_fields(TaggedItem)

    assert schema.field("tags").field_type is list
    assert schema.field("note").field_type is str
    assert declared_type(Annotated[Optional[int], "x"]) is int
    assert declared_type(List[Decimal]) is list
    assert declared_type(int | str) is object


def test_type_without_columns_is_rejected() -> None:
    with pytest.raises(SchemaError):
        resolve_fields(Plain)


def test_self_nesting_type_is_rejected() -> None:
    with pytest.raises(SchemaError, match="inside itself"):
        resolve_fields(Node)


def test_pydantic_models_are_resolved() -> None:
    schema = resolve_fields(PydanticEmployee)

    assert schema.paths == ("name", "dept", "salary", "dept.name", "dept.code")
    assert schema.field("salary").field_type is Decimal
    assert schema.max_depth == 2


def test_type_level_defaults_are_read_from_root() -> None:
    schema = resolve_fields(EmployeeMain)

    assert schema.default_header_style is not None
    assert schema.default_body_style is None
    assert schema.field("dept").header_style is not None
    assert schema.field("employee").header_style is None
