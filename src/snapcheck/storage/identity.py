"""Snapshot identities and the per-slot sequence counter.

An identity names one snapshot slot: where the assertion lives (root,
module, source file, line) plus an optional explicit name. Assertions
that resolve to the same slot more than once are told apart by a
sequence number handed out by a SequenceCounter.
"""

from __future__ import annotations

import re
import threading
from pathlib import Path

from pydantic import BaseModel, Field

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9_.\-]")


def sanitize_name(name: str) -> str:
    """Make a snapshot name safe to embed in a file name."""
    cleaned = _UNSAFE_CHARS.sub("_", name).strip(".")
    return cleaned or "_"


class SnapshotIdentity(BaseModel):
    """Identifies exactly one snapshot slot.

    ``source_file`` may be absolute or relative to ``root``. When
    ``name`` is absent the slot is named after ``line``.
    """

    model_config = {"extra": "forbid", "frozen": True}

    root: Path
    module: str
    source_file: str
    line: int = Field(ge=0)
    name: str | None = None
    sequence: int = Field(default=1, ge=1)

    @property
    def slot_name(self) -> str:
        """File-name stem for this identity, without the sequence suffix."""
        module = self.module.replace(".", "__")
        name = sanitize_name(self.name) if self.name else f"line_{self.line}"
        return f"{sanitize_name(module)}__{name}"

    @property
    def source_dir(self) -> Path:
        return (self.root / self.source_file).parent

    def slot_key(self) -> tuple[str, str]:
        """Everything that determines the base file path of the slot."""
        return (str(self.source_dir), self.slot_name)

    def describe(self) -> str:
        label = self.name if self.name else f"line {self.line}"
        suffix = f" #{self.sequence}" if self.sequence > 1 else ""
        return f"{self.source_file}:{self.line} ({self.module}::{label}{suffix})"


class SequenceCounter:
    """Hands out 1, 2, 3, ... per snapshot slot. Thread-safe.

    One counter should live exactly as long as the scope in which
    repeated assertions must get distinct slots: the pytest plugin
    creates one per test, direct callers share DEFAULT_COUNTER.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._counts: dict[tuple[str, str], int] = {}

    def assign(self, identity: SnapshotIdentity) -> SnapshotIdentity:
        """Return ``identity`` with the next sequence number for its slot."""
        key = identity.slot_key()
        with self._lock:
            count = self._counts.get(key, 0) + 1
            self._counts[key] = count
        return identity.model_copy(update={"sequence": count})

    def reset(self) -> None:
        with self._lock:
            self._counts.clear()


DEFAULT_COUNTER = SequenceCounter()
