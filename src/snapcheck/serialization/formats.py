"""Snapshot formats and the render dispatch table.

The set of formats is closed: each SnapshotFormat member maps to
exactly one renderer. Every renderer is a pure function of the tree,
so the same Content always yields byte-identical text. Rendered text
never ends in a newline; the snapshot file adds one.
"""

from __future__ import annotations

import pprint
from collections.abc import Callable
from enum import Enum
from typing import Any

from snapcheck.content.model import Content
from snapcheck.serialization.plain import render_json, render_yaml
from snapcheck.serialization.ron import render_ron


class SnapshotFormat(str, Enum):
    """Textual formats a Content tree can be rendered to."""

    JSON = "json"
    YAML = "yaml"
    RON = "ron"


_RENDERERS: dict[SnapshotFormat, Callable[[Content], str]] = {
    SnapshotFormat.JSON: render_json,
    SnapshotFormat.YAML: render_yaml,
    SnapshotFormat.RON: render_ron,
}


def render(tree: Content, fmt: SnapshotFormat | str = SnapshotFormat.YAML) -> str:
    """Render a Content tree in the given format.

    Args:
        tree: The (already redacted) tree.
        fmt: A SnapshotFormat or its string value.

    Raises:
        SerializationError: If the tree cannot be expressed in ``fmt``.
        ValueError: If ``fmt`` names no known format.
    """
    return _RENDERERS[SnapshotFormat(fmt)](tree)


def render_debug(value: Any) -> str:
    """Render any Python object with pprint, keeping dict order."""
    return pprint.pformat(value, width=88, sort_dicts=False)
