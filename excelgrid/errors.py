"""Custom exceptions used across excelgrid."""


class ExcelGridError(Exception):
    """Base error for the package."""


class ConfigError(ExcelGridError):
    """Render options or configuration files are invalid."""


class SchemaError(ExcelGridError):
    """Raised when a record type yields no renderable columns."""


class StyleResolutionError(ExcelGridError):
    """Raised when a style policy names a constant missing from its style set."""


class CapacityExceededError(ExcelGridError):
    """Raised when strict single-sheet rendering receives too many rows."""


class RenderError(ExcelGridError):
    """Raised when writing the document body fails."""


class FieldAccessError(RenderError):
    """Raised when a field path cannot be resolved against a record."""

    def __init__(self, field_path: str, message: str) -> None:
        super().__init__(f"Cannot read '{field_path}': {message}")
        self.field_path = field_path
