"""Compiled field-path accessors for record instances."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Tuple

from .errors import FieldAccessError
from .schema import PATH_SEPARATOR


@dataclass(frozen=True)
class FieldAccessor:
    """Reads one dotted path from a record.

    Each segment is looked up as a key on mappings and as an attribute on
    everything else. A ``None`` intermediate value yields ``None`` for the
    leaf; a missing key or attribute raises ``FieldAccessError``.
    """

    path: str
    segments: Tuple[str, ...]

    @classmethod
    def compile(cls, path: str) -> "FieldAccessor":
        return cls(path=path, segments=tuple(path.split(PATH_SEPARATOR)))

    def get(self, record: Any) -> Any:
        value = record
        for segment in self.segments:
            if value is None:
                return None
            if isinstance(value, Mapping):
                try:
                    value = value[segment]
                except KeyError as exc:
                    raise FieldAccessError(self.path, f"missing key '{segment}'") from exc
                continue
            try:
                value = getattr(value, segment)
            except AttributeError as exc:
                raise FieldAccessError(
                    self.path, f"{type(value).__name__} has no attribute '{segment}'"
                ) from exc
        return value
