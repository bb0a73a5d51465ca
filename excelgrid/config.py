"""Render options and their YAML loader."""

# Module responsibilities:
# - Define the validated RenderOptions model shared by the renderer and the CLI.
# - Load options from YAML and resolve ``module:attr`` import strings for plug-ins.

from __future__ import annotations

import importlib
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .engine import EXCEL_MAX_ROWS, INVALID_TITLE_CHARACTERS, MAX_SHEET_TITLE_LENGTH
from .errors import ConfigError

DEFAULT_SHEET_NAME = "Sheet"
DEFAULT_LIST_SEPARATOR = ", "
DEFAULT_COLUMN_WIDTH_PADDING = 2


class PaginationMode(str, Enum):
    """How the renderer reacts when a sheet runs out of rows."""

    SINGLE_SHEET = "single-sheet-strict"
    MULTI_SHEET = "multi-sheet-paginated"


def import_object(spec: str) -> Any:
    """Import ``package.module:attribute`` (dotted attributes allowed)."""

    module_name, sep, attr_path = spec.partition(":")
    if not sep or not module_name or not attr_path:
        raise ConfigError(f"Import string must look like 'module:attr', got {spec!r}")
    try:
        target: Any = importlib.import_module(module_name)
    except ImportError as exc:
        raise ConfigError(f"Cannot import module {module_name!r}: {exc}") from exc
    for attr in attr_path.split("."):
        try:
            target = getattr(target, attr)
        except AttributeError as exc:
            raise ConfigError(f"{module_name!r} has no attribute {attr_path!r}") from exc
    return target


class RenderOptions(BaseModel):
    """Document-level rendering configuration."""

    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True, extra="forbid")

    sheet_name: str = DEFAULT_SHEET_NAME
    row_ceiling: Optional[int] = Field(default=None, gt=0, le=EXCEL_MAX_ROWS)
    list_separator: str = DEFAULT_LIST_SEPARATOR
    data_format_decider: Optional[Callable[[type], str]] = None
    mode: PaginationMode = PaginationMode.MULTI_SHEET
    column_width_padding: int = Field(default=DEFAULT_COLUMN_WIDTH_PADDING, ge=0)
    origin_row: int = Field(default=0, ge=0)
    origin_column: int = Field(default=0, ge=0)

    @field_validator("sheet_name", mode="before")
    @classmethod
    def _default_sheet_name(cls, value: Any) -> Any:
        if value is None or (isinstance(value, str) and not value.strip()):
            return DEFAULT_SHEET_NAME
        return value

    @field_validator("sheet_name")
    @classmethod
    def _check_sheet_name(cls, value: str) -> str:
        invalid = sorted(set(value) & INVALID_TITLE_CHARACTERS)
        if invalid:
            raise ConfigError(f"Sheet name {value!r} contains characters Excel rejects: {' '.join(invalid)}")
        # Titles get a 1-based index appended, so leave room for at least one digit.
        if len(value) >= MAX_SHEET_TITLE_LENGTH:
            raise ConfigError(
                f"Sheet name {value!r} must be shorter than {MAX_SHEET_TITLE_LENGTH} characters"
            )
        return value

    @field_validator("list_separator", mode="before")
    @classmethod
    def _default_separator(cls, value: Any) -> Any:
        return DEFAULT_LIST_SEPARATOR if value is None else value

    @field_validator("data_format_decider", mode="before")
    @classmethod
    def _import_decider(cls, value: Any) -> Any:
        if isinstance(value, str):
            value = import_object(value)
            # Classes such as DefaultDataFormatDecider are instantiated.
            if isinstance(value, type):
                value = value()
        return value

    def resolve_row_ceiling(self) -> int:
        """Rows a sheet may hold, header included.

        Paginated rendering keeps one row of the format maximum in reserve.
        """

        if self.row_ceiling is not None:
            return self.row_ceiling
        if self.mode is PaginationMode.SINGLE_SHEET:
            return EXCEL_MAX_ROWS
        return EXCEL_MAX_ROWS - 1


def load_render_options(path: Path, **overrides: Any) -> RenderOptions:
    """Load ``RenderOptions`` from a YAML file.

    Args:
        path: YAML file with option keys at the top level.
        overrides: Values taking precedence over the file (``None`` values are ignored).

    Raises:
        ConfigError: When the file is missing, malformed or fails validation.
    """

    if not path.exists():
        raise ConfigError(f"Options file not found: {path}")
    with path.open("r", encoding="utf-8") as fh:
        try:
            payload = yaml.safe_load(fh) or {}
        except yaml.YAMLError as exc:
            raise ConfigError(f"Invalid YAML in {path}: {exc}") from exc
    if not isinstance(payload, dict):
        raise ConfigError("Invalid options YAML structure (expected mapping)")
    payload.update({key: value for key, value in overrides.items() if value is not None})
    return build_render_options(payload)


def build_render_options(payload: dict[str, Any]) -> RenderOptions:
    try:
        return RenderOptions.model_validate(payload)
    except ValidationError as exc:
        raise ConfigError(f"Invalid render options: {exc}") from exc
