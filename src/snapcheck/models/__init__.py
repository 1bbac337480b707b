"""snapcheck data models - re-exports all public model classes."""

from snapcheck.models.config import ProjectConfig
from snapcheck.models.outcome import OutcomeStatus, SnapshotOutcome

__all__ = [
    "OutcomeStatus",
    "ProjectConfig",
    "SnapshotOutcome",
]
