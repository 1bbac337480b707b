"""Typed text renderer in RON (Rusty Object Notation) style.

Unlike JSON and YAML this keeps struct type names and enum variant
tags, so a snapshot also pins down which type produced a value::

    User(
      id: 1,
      role: Admin,
      tags: [
        "a",
      ],
    )
"""

from __future__ import annotations

import json
import math

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
from snapcheck.errors import SerializationError

INDENT = "  "


def render_ron(content: Content) -> str:
    """Render a Content tree as pretty-printed RON."""
    return _render(content, 0)


def _render(content: Content, depth: int) -> str:
    if isinstance(content, Nil):
        return "None"
    if isinstance(content, Bool):
        return "true" if content.value else "false"
    if isinstance(content, Integer):
        return str(content.value)
    if isinstance(content, Float):
        return _float(content.value)
    if isinstance(content, String):
        return json.dumps(content.value, ensure_ascii=False)
    if isinstance(content, Bytes):
        return _block("[", "]", [str(b) for b in content.value], depth)
    if isinstance(content, Seq):
        return _block("[", "]", [_render(i, depth + 1) for i in content.items], depth)
    if isinstance(content, Map):
        return _block(
            "{",
            "}",
            [
                f"{_render(k, depth + 1)}: {_render(v, depth + 1)}"
                for k, v in content.entries
            ],
            depth,
        )
    if isinstance(content, Struct):
        if not content.fields:
            return content.name
        return content.name + _block(
            "(",
            ")",
            [f"{name}: {_render(v, depth + 1)}" for name, v in content.fields],
            depth,
        )
    if isinstance(content, EnumVariant):
        if content.payload is None:
            return content.variant
        return f"{content.variant}({_render(content.payload, depth)})"
    raise SerializationError(f"unsupported content node {type(content).__name__}")


def _block(open_: str, close: str, items: list[str], depth: int) -> str:
    if not items:
        return open_ + close
    pad = INDENT * (depth + 1)
    body = "".join(f"{pad}{item},\n" for item in items)
    return f"{open_}\n{body}{INDENT * depth}{close}"


def _float(value: float) -> str:
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "inf" if value > 0 else "-inf"
    return repr(value)
