"""Snapshot identities, file format and storage."""

from snapcheck.storage.identity import DEFAULT_COUNTER, SequenceCounter, SnapshotIdentity
from snapcheck.storage.snapshot_file import SnapshotFile, SnapshotMetadata
from snapcheck.storage.snapshot_store import Comparison, SnapshotStore

__all__ = [
    "Comparison",
    "DEFAULT_COUNTER",
    "SequenceCounter",
    "SnapshotFile",
    "SnapshotIdentity",
    "SnapshotMetadata",
    "SnapshotStore",
]
