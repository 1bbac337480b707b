"""Deterministic text renderers for Content trees."""

from snapcheck.serialization.formats import SnapshotFormat, render, render_debug
from snapcheck.serialization.plain import render_json, render_yaml, to_plain
from snapcheck.serialization.ron import render_ron

__all__ = [
    "SnapshotFormat",
    "render",
    "render_debug",
    "render_json",
    "render_ron",
    "render_yaml",
    "to_plain",
]
