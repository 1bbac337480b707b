"""Capture native Python values as Content trees.

This is the adapter between the host language and the format-agnostic
model. Field order always comes from the type's own declaration
(dataclass fields, pydantic model_fields, namedtuple _fields); nothing
is ever sorted. Shapes without a deterministic order or structure,
such as sets or arbitrary objects, are rejected rather than dropped.
"""

from __future__ import annotations

import dataclasses
import enum
from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel

from snapcheck.content.model import (
    Bool,
    Bytes,
    Content,
    EnumVariant,
    Float,
    Integer,
    Map,
    Nil,
    Seq,
    String,
    Struct,
)
from snapcheck.errors import CaptureError

# Recursion guard for self-referencing containers.
MAX_DEPTH = 256


def from_value(value: Any, *, capture_enum_values: bool = False) -> Content:
    """Convert a Python value into a Content tree.

    Args:
        value: The value to capture.
        capture_enum_values: If True, ``enum.Enum`` members carry their
            ``.value`` as payload. By default they capture as unit
            variants (type and member name only).

    Returns:
        The captured Content tree.

    Raises:
        CaptureError: If the value, or anything nested in it, has no
            Content representation.
    """
    return _capture(value, capture_enum_values, 0)


def _capture(value: Any, enum_values: bool, depth: int) -> Content:
    if depth > MAX_DEPTH:
        raise CaptureError(f"value nests deeper than {MAX_DEPTH} levels (cycle?)")
    nested = depth + 1

    if isinstance(value, Content):
        return value
    if value is None:
        return Nil()
    # Enum members first: IntEnum/StrEnum are also int/str
    if isinstance(value, enum.Enum):
        payload = _capture(value.value, enum_values, nested) if enum_values else None
        return EnumVariant(type(value).__name__, value.name, payload)
    if isinstance(value, bool):
        return Bool(value)
    if isinstance(value, int):
        return Integer(int(value))
    if isinstance(value, float):
        return Float(float(value))
    if isinstance(value, str):
        return String(str(value))
    if isinstance(value, (bytes, bytearray, memoryview)):
        return Bytes(bytes(value))

    hook = getattr(type(value), "__snapshot__", None)
    if callable(hook):
        return _capture(hook(value), enum_values, nested)

    if isinstance(value, BaseModel):
        return Struct(
            type(value).__name__,
            tuple(
                (name, _capture(getattr(value, name), enum_values, nested))
                for name in type(value).model_fields
            ),
        )
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return Struct(
            type(value).__name__,
            tuple(
                (f.name, _capture(getattr(value, f.name), enum_values, nested))
                for f in dataclasses.fields(value)
            ),
        )
    if isinstance(value, tuple) and hasattr(type(value), "_fields"):
        return Struct(
            type(value).__name__,
            tuple(
                (name, _capture(item, enum_values, nested))
                for name, item in zip(type(value)._fields, value)
            ),
        )
    if isinstance(value, (list, tuple)):
        return Seq(tuple(_capture(item, enum_values, nested) for item in value))
    if isinstance(value, Mapping):
        return Map(
            tuple(
                (_capture(k, enum_values, nested), _capture(v, enum_values, nested))
                for k, v in value.items()
            )
        )
    if isinstance(value, (set, frozenset)):
        raise CaptureError(
            f"cannot capture {type(value).__name__}: iteration order is not "
            "deterministic; convert it to a sorted list first"
        )
    raise CaptureError(
        f"cannot capture value of type {type(value).__module__}.{type(value).__qualname__}; "
        "define __snapshot__() or convert it to a supported type"
    )
