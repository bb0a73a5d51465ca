"""Field-path resolution for annotated record types."""

# Module responsibilities:
# - Discover Column-annotated fields on plain classes, dataclasses and pydantic models.
# - Walk nested annotated types breadth-first and emit ordered FieldDescriptor tuples.
# - Reject record types that cannot produce any column, or that contain themselves.

from __future__ import annotations

import types
import typing
from collections import deque
from typing import Any, Deque, Dict, List, Optional, Tuple, Union

from pydantic import BaseModel

from .columns import Column, find_column, type_default_styles
from .errors import SchemaError
from .schema import PATH_SEPARATOR, FieldDescriptor, RecordSchema
from .utils.log import get_logger

logger = get_logger("resolver")

_UNION_TYPES: Tuple[Any, ...] = (Union, types.UnionType)


def declared_type(hint: Any) -> type:
    """Reduce a type hint to the runtime class used for nesting and formats.

    ``Annotated`` wrappers are stripped, ``Optional[X]`` becomes ``X`` and
    generic aliases such as ``list[str]`` become their origin (``list``).
    Anything else that is not a class maps to ``object``.
    """

    if typing.get_origin(hint) is typing.Annotated:
        hint = typing.get_args(hint)[0]
    origin = typing.get_origin(hint)
    if origin in _UNION_TYPES:
        members = [arg for arg in typing.get_args(hint) if arg is not type(None)]
        if len(members) == 1:
            return declared_type(members[0])
        return object
    if origin is not None:
        return origin if isinstance(origin, type) else object
    return hint if isinstance(hint, type) else object


def _annotated_fields(cls: type) -> List[Tuple[str, Any, Column]]:
    """Return ``(name, hint, column)`` for each Column-annotated field of ``cls``."""

    if not isinstance(cls, type) or cls.__module__ == "builtins":
        return []

    found: List[Tuple[str, Any, Column]] = []
    if issubclass(cls, BaseModel):
        for name, info in cls.model_fields.items():
            column = find_column(info.metadata)
            if column is not None:
                found.append((name, info.annotation, column))
        return found

    try:
        hints = typing.get_type_hints(cls, include_extras=True)
    except (NameError, TypeError) as exc:
        raise SchemaError(f"Cannot evaluate annotations of {cls.__qualname__}: {exc}") from exc

    for name, hint in hints.items():
        if typing.get_origin(hint) is not typing.Annotated:
            continue
        column = find_column(hint.__metadata__)
        if column is not None:
            found.append((name, hint, column))
    return found


def _join(parent_path: Optional[str], name: str) -> str:
    return f"{parent_path}{PATH_SEPARATOR}{name}" if parent_path else name


def resolve_fields(root_type: type) -> RecordSchema:
    """Resolve every annotated field of ``root_type`` in breadth-first order.

    Args:
        root_type: Class whose fields carry ``Annotated[..., Column(...)]`` metadata.

    Returns:
        RecordSchema with descriptors ordered level by level, declaration order
        within a level, and the maximum nesting depth.

    Raises:
        SchemaError: When no annotated field is reachable or a type nests itself.
    """

    roots = _annotated_fields(root_type)
    if not roots:
        raise SchemaError(f"Class {root_type.__qualname__} has no Column annotations at all")

    # (name, hint, column, parent path, depth, ancestor types)
    queue: Deque[Tuple[str, Any, Column, Optional[str], int, Tuple[type, ...]]] = deque(
        (name, hint, column, None, 1, (root_type,)) for name, hint, column in roots
    )
    pending: List[Dict[str, Any]] = []
    children_of: Dict[str, List[str]] = {}
    max_depth = 0

    while queue:
        name, hint, column, parent_path, depth, ancestors = queue.popleft()
        path = _join(parent_path, name)
        field_type = declared_type(hint)
        max_depth = max(max_depth, depth)

        nested = _annotated_fields(field_type)
        if nested and field_type in ancestors:
            raise SchemaError(
                f"Field '{path}' nests {field_type.__qualname__} inside itself; header would be infinite"
            )
        children_of[path] = [_join(path, child_name) for child_name, _, _ in nested]
        for child_name, child_hint, child_column in nested:
            queue.append((child_name, child_hint, child_column, path, depth + 1, ancestors + (field_type,)))

        pending.append(
            {
                "name": name,
                "field_type": field_type,
                "path": path,
                "header_name": column.header or name,
                "depth": depth,
                "parent_path": parent_path,
                "header_style": column.header_style,
                "body_style": column.body_style,
            }
        )

    descriptors = tuple(
        FieldDescriptor(children=tuple(children_of[item["path"]]), **item) for item in pending
    )
    header_default, body_default = type_default_styles(root_type)

    logger.debug(
        "Resolved record type",
        extra={
            "type": root_type.__qualname__,
            "fields": len(descriptors),
            "leaves": sum(1 for d in descriptors if d.is_leaf),
            "depth": max_depth,
        },
    )
    return RecordSchema(
        root_type=root_type,
        fields=descriptors,
        max_depth=max_depth,
        default_header_style=header_default,
        default_body_style=body_default,
    )
