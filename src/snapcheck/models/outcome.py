"""Outcome models for snapshot assertions.

An outcome is what the coordinator hands back to call sites: the
terminal status plus everything needed to explain a failure (paths,
diff, the asserted expression and the identity).
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path

from pydantic import BaseModel

from snapcheck.errors import SnapshotMismatchError
from snapcheck.storage.identity import SnapshotIdentity


class OutcomeStatus(str, Enum):
    """Terminal state of a snapshot assertion."""

    passed = "passed"
    failed = "failed"
    updated = "updated"


class SnapshotOutcome(BaseModel):
    """Result of a single snapshot assertion."""

    model_config = {"extra": "forbid"}

    status: OutcomeStatus
    identity: SnapshotIdentity
    path: Path
    rendered: str
    pending_path: Path | None = None
    diff: str | None = None
    expression: str | None = None

    @property
    def passed(self) -> bool:
        """True for passed and updated outcomes."""
        return self.status is not OutcomeStatus.failed

    def describe(self) -> str:
        """Human-readable summary, including the diff for failures."""
        where = self.identity.describe()
        if self.status is OutcomeStatus.passed:
            return f"snapshot {self.path} matches ({where})"
        if self.status is OutcomeStatus.updated:
            return f"snapshot {self.path} updated ({where})"
        lines = [f"snapshot assertion failed for {where}"]
        if self.expression:
            lines.append(f"expression: {self.expression}")
        lines.append(f"baseline:   {self.path}")
        if self.pending_path is not None:
            lines.append(f"pending:    {self.pending_path}")
        if self.diff:
            lines.append("")
            lines.append(self.diff)
        lines.append("")
        lines.append("Review with `snapcheck pending` or rerun with SNAPCHECK_UPDATE=1.")
        return "\n".join(lines)

    def raise_for_status(self) -> SnapshotOutcome:
        """Raise SnapshotMismatchError if the assertion failed.

        Returns:
            self, so calls can be chained.
        """
        if self.status is OutcomeStatus.failed:
            raise SnapshotMismatchError(self)
        return self
