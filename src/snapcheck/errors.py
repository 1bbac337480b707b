"""Exception hierarchy for snapcheck.

Every failure that aborts an assertion derives from SnapcheckError.
A snapshot mismatch is not an error but a designed outcome; it only
becomes an exception (SnapshotMismatchError) when a caller asks the
outcome to raise.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from snapcheck.models.outcome import SnapshotOutcome


class SnapcheckError(Exception):
    """Base class for all snapcheck errors."""


class SelectorParseError(SnapcheckError):
    """Raised when a redaction selector cannot be parsed.

    Attributes:
        position: 0-indexed character offset in the selector text.
        reason: Human-readable description of the problem.
        selector: The selector text being parsed.
    """

    def __init__(self, position: int, reason: str, selector: str = "") -> None:
        self.position = position
        self.reason = reason
        self.selector = selector
        super().__init__(f"invalid selector {selector!r} at position {position}: {reason}")


class SerializationError(SnapcheckError):
    """Raised when a value cannot be represented in the requested format."""

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(reason)


class CaptureError(SerializationError):
    """Raised when a native value has no Content representation."""


class SnapshotIOError(SnapcheckError):
    """Raised when a baseline or pending snapshot cannot be read or written.

    Attributes:
        path: The snapshot file involved.
        cause: The underlying OS error.
    """

    def __init__(self, path: Path, cause: BaseException) -> None:
        self.path = path
        self.cause = cause
        super().__init__(f"snapshot I/O failed for {path}: {cause}")


class SnapshotMismatchError(AssertionError):
    """Raised by SnapshotOutcome.raise_for_status() for failed assertions."""

    def __init__(self, outcome: SnapshotOutcome) -> None:
        self.outcome = outcome
        super().__init__(outcome.describe())
