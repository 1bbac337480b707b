"""JSON and YAML renderers.

Both formats go through the same lowering step: Content is converted
to plain Python values (dicts keep insertion order) and handed to the
stdlib json module or PyYAML. Struct names and enum types are dropped
on the way; use the RON renderer when those must be compared too.
"""

from __future__ import annotations

import json
import math
from typing import Any

import yaml

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

_SCALAR_KEYS = (Nil, Bool, Integer, Float, String)


def to_plain(content: Content, *, string_keys: bool = False) -> Any:
    """Lower a Content tree to dicts, lists and scalars.

    Args:
        content: Tree to convert.
        string_keys: Render every map key as a string, the way JSON
            object keys are written.

    Raises:
        SerializationError: For non-scalar map keys or keys that would
            collide after conversion.
    """
    if isinstance(content, Nil):
        return None
    if isinstance(content, (Bool, Integer, Float, String)):
        return content.value
    if isinstance(content, Bytes):
        return list(content.value)
    if isinstance(content, Seq):
        return [to_plain(item, string_keys=string_keys) for item in content.items]
    if isinstance(content, Map):
        out: dict[Any, Any] = {}
        for key, value in content.entries:
            plain_key = _plain_key(key, string_keys)
            if plain_key in out:
                raise SerializationError(f"duplicate map key {plain_key!r}")
            out[plain_key] = to_plain(value, string_keys=string_keys)
        return out
    if isinstance(content, Struct):
        fields: dict[str, Any] = {}
        for name, value in content.fields:
            if name in fields:
                raise SerializationError(f"duplicate field {name!r} in struct {content.name}")
            fields[name] = to_plain(value, string_keys=string_keys)
        return fields
    if isinstance(content, EnumVariant):
        if content.payload is None:
            return content.variant
        return {content.variant: to_plain(content.payload, string_keys=string_keys)}
    raise SerializationError(f"unsupported content node {type(content).__name__}")


def _plain_key(key: Content, string_keys: bool) -> Any:
    if isinstance(key, EnumVariant) and key.payload is None:
        return key.variant
    if not isinstance(key, _SCALAR_KEYS):
        raise SerializationError(f"map keys must be scalars, got {key.kind}")
    value = to_plain(key)
    if not string_keys or isinstance(value, str):
        return value
    if isinstance(key, Float) and not math.isfinite(key.value):
        raise SerializationError(f"cannot use {key.value!r} as a JSON object key")
    return json.dumps(value)


def render_json(content: Content) -> str:
    """Render as pretty-printed JSON with two-space indentation."""
    data = to_plain(content, string_keys=True)
    try:
        return json.dumps(data, indent=2, ensure_ascii=False, allow_nan=False)
    except ValueError as exc:
        raise SerializationError(f"value is not representable as JSON: {exc}") from exc


class BlockDumper(yaml.SafeDumper):
    """SafeDumper that prints multi-line strings as literal blocks.

    Indents sequences under their parent key so nested lists read the
    same way as nested mappings.
    """

    def increase_indent(self, flow: bool = False, indentless: bool = False) -> None:
        return super().increase_indent(flow, False)


def _represent_str(dumper: yaml.SafeDumper, data: str) -> yaml.ScalarNode:
    if "\n" in data:
        return dumper.represent_scalar("tag:yaml.org,2002:str", data, style="|")
    return dumper.represent_scalar("tag:yaml.org,2002:str", data)


BlockDumper.add_representer(str, _represent_str)


def render_yaml(content: Content) -> str:
    """Render as block-style YAML, keys in their original order."""
    data = to_plain(content)
    try:
        text = yaml.dump(
            data,
            Dumper=BlockDumper,
            sort_keys=False,
            allow_unicode=True,
            default_flow_style=False,
            width=4096,
        )
    except yaml.YAMLError as exc:
        raise SerializationError(f"value is not representable as YAML: {exc}") from exc
    # Top-level scalars get an explicit document end marker
    if text.endswith("\n...\n"):
        text = text[: -len("...\n")]
    return text.rstrip("\n")
