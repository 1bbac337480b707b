"""snapcheck - snapshot testing with redactions and typed text formats."""

__version__ = "0.1.0"

from snapcheck.assertion import (  # noqa: E402
    assert_debug_snapshot,
    assert_snapshot,
    assert_text_snapshot,
)
from snapcheck.errors import (  # noqa: E402
    CaptureError,
    SelectorParseError,
    SerializationError,
    SnapcheckError,
    SnapshotIOError,
    SnapshotMismatchError,
)
from snapcheck.models.outcome import OutcomeStatus, SnapshotOutcome  # noqa: E402
from snapcheck.redaction.engine import RedactionRule  # noqa: E402
from snapcheck.serialization.formats import SnapshotFormat  # noqa: E402
from snapcheck.storage.identity import SnapshotIdentity  # noqa: E402

__all__ = [
    "CaptureError",
    "OutcomeStatus",
    "RedactionRule",
    "SelectorParseError",
    "SerializationError",
    "SnapcheckError",
    "SnapshotFormat",
    "SnapshotIOError",
    "SnapshotIdentity",
    "SnapshotMismatchError",
    "SnapshotOutcome",
    "__version__",
    "assert_debug_snapshot",
    "assert_snapshot",
    "assert_text_snapshot",
]
