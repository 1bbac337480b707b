"""File storage for baseline and pending snapshots.

Maps identities to ``.snap`` files, loads accepted baselines, and
persists pending ``.snap.new`` proposals next to them. Every write is
atomic (temp file in the target directory, fsync, then os.replace), so
readers never observe a partially written snapshot. The store never
deletes a pending file on its own; only an explicit accept or reject
does.
"""

from __future__ import annotations

import difflib
import logging
import os
import tempfile
from enum import Enum
from pathlib import Path

import yaml
from pydantic import ValidationError

from snapcheck.errors import SnapshotIOError
from snapcheck.storage.identity import SnapshotIdentity
from snapcheck.storage.snapshot_file import SnapshotFile

logger = logging.getLogger(__name__)

SNAPSHOT_SUFFIX = ".snap"
PENDING_SUFFIX = ".new"


class Comparison(str, Enum):
    """Result of comparing a baseline body with freshly rendered text."""

    EQUAL = "equal"
    DIFFERENT = "different"


def normalize_body(text: str) -> str:
    """Canonical form used for comparison: LF line endings, no trailing newlines."""
    return text.replace("\r\n", "\n").rstrip("\n")


class SnapshotStore:
    """Resolve, read and atomically write snapshot files.

    File layout, relative to the directory of the asserting source file::

        snapshots/
            {module}__{name}.snap        # accepted baseline
            {module}__{name}-2.snap      # second assertion in the same slot
            {module}__{name}.snap.new    # pending proposal after a mismatch

    Args:
        root: Project root, used when listing pending snapshots.
        snapshot_dir: Directory name placed beside each source file.
    """

    def __init__(self, root: Path, snapshot_dir: str = "snapshots") -> None:
        self.root = root
        self.snapshot_dir = snapshot_dir

    def resolve(self, identity: SnapshotIdentity) -> Path:
        """Return the baseline path for an identity. Pure; touches no files."""
        stem = identity.slot_name
        if identity.sequence > 1:
            stem = f"{stem}-{identity.sequence}"
        return identity.source_dir / self.snapshot_dir / f"{stem}{SNAPSHOT_SUFFIX}"

    @staticmethod
    def pending_path(path: Path) -> Path:
        """Return the pending-artifact path paired with a baseline path."""
        return path.with_name(path.name + PENDING_SUFFIX)

    @staticmethod
    def baseline_path(pending: Path) -> Path:
        """Inverse of pending_path."""
        if not pending.name.endswith(PENDING_SUFFIX):
            raise ValueError(f"{pending} is not a pending snapshot")
        return pending.with_name(pending.name.removesuffix(PENDING_SUFFIX))

    def load_baseline(self, path: Path) -> SnapshotFile | None:
        """Load the accepted snapshot at ``path``.

        Returns:
            The parsed snapshot, or None if no baseline exists yet.

        Raises:
            SnapshotIOError: If the file exists but cannot be read or parsed.
        """
        return self._load(path)

    def load_pending(self, path: Path) -> SnapshotFile | None:
        """Load the pending proposal for baseline ``path``, if any."""
        return self._load(self.pending_path(path))

    def _load(self, path: Path) -> SnapshotFile | None:
        try:
            text = path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except (OSError, UnicodeDecodeError) as exc:
            raise SnapshotIOError(path, exc) from exc
        try:
            return SnapshotFile.from_text(text)
        except (yaml.YAMLError, ValidationError) as exc:
            raise SnapshotIOError(path, exc) from exc

    @staticmethod
    def compare(baseline: str | None, rendered: str) -> Comparison:
        """Compare a baseline body with rendered text.

        A missing baseline is always DIFFERENT, so a first run never
        passes implicitly.
        """
        if baseline is None:
            return Comparison.DIFFERENT
        if normalize_body(baseline) == normalize_body(rendered):
            return Comparison.EQUAL
        return Comparison.DIFFERENT

    @staticmethod
    def diff(baseline: str | None, rendered: str, path: Path | None = None) -> str:
        """Line-based unified diff from the baseline body to the rendered text."""
        old = normalize_body(baseline).split("\n") if baseline is not None else []
        new = normalize_body(rendered).split("\n")
        label = str(path) if path is not None else "snapshot"
        return "\n".join(
            difflib.unified_diff(
                old,
                new,
                fromfile=f"{label} (baseline)" if baseline is not None else "/dev/null",
                tofile=f"{label} (new)",
                lineterm="",
            )
        )

    def write_baseline(self, path: Path, snapshot: SnapshotFile) -> None:
        """Atomically create or overwrite the baseline at ``path``."""
        self._atomic_write(path, snapshot.to_text())
        logger.info("updated snapshot %s", path)

    def write_pending(self, path: Path, snapshot: SnapshotFile) -> Path:
        """Atomically write the pending proposal for baseline ``path``.

        Returns:
            The pending file path.
        """
        pending = self.pending_path(path)
        self._atomic_write(pending, snapshot.to_text())
        logger.info("stored new snapshot %s", pending)
        return pending

    def _atomic_write(self, path: Path, content: str) -> None:
        tmp_name: str | None = None
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{path.name}.", suffix=".tmp", dir=path.parent
            )
            with os.fdopen(fd, "w", encoding="utf-8", newline="\n") as fh:
                fh.write(content)
                fh.flush()
                os.fsync(fh.fileno())
            os.replace(tmp_name, path)
            tmp_name = None
        except OSError as exc:
            raise SnapshotIOError(path, exc) from exc
        finally:
            if tmp_name is not None:
                Path(tmp_name).unlink(missing_ok=True)

    # -- Review operations --

    def list_pending(self) -> list[Path]:
        """All pending snapshots under the root, sorted by path."""
        if not self.root.exists():
            return []
        return sorted(self.root.rglob(f"*{SNAPSHOT_SUFFIX}{PENDING_SUFFIX}"))

    def accept(self, pending: Path) -> Path:
        """Promote a pending snapshot to baseline (atomic rename).

        Returns:
            The baseline path that now holds the accepted content.
        """
        baseline = self.baseline_path(pending)
        try:
            os.replace(pending, baseline)
        except OSError as exc:
            raise SnapshotIOError(pending, exc) from exc
        logger.info("accepted snapshot %s", baseline)
        return baseline

    def reject(self, pending: Path) -> None:
        """Discard a pending snapshot, leaving the baseline untouched."""
        try:
            pending.unlink()
        except OSError as exc:
            raise SnapshotIOError(pending, exc) from exc
        logger.info("rejected snapshot %s", pending)
