"""Content model - structural representation of captured values."""

from snapcheck.content.capture import from_value
from snapcheck.content.model import (
    Bool,
    Bytes,
    Content,
    EnumVariant,
    Float,
    Integer,
    Map,
    Nil,
    Path,
    Seq,
    Step,
    StepKind,
    String,
    Struct,
    primitive,
    replace_at,
)

__all__ = [
    "Bool",
    "Bytes",
    "Content",
    "EnumVariant",
    "Float",
    "Integer",
    "Map",
    "Nil",
    "Path",
    "Seq",
    "Step",
    "StepKind",
    "String",
    "Struct",
    "from_value",
    "primitive",
    "replace_at",
]
