"""On-disk snapshot file format.

A snapshot file is a YAML metadata header between two ``---`` lines,
followed by the rendered body::

    ---
    source: tests/test_users.py
    expression: user
    ---
    name: Alice

The header is diagnostic only. Comparisons look at the body alone.
"""

from __future__ import annotations

from datetime import datetime

import yaml
from pydantic import BaseModel, Field

HEADER_DELIMITER = "---"


class SnapshotMetadata(BaseModel):
    """Header fields recorded alongside a snapshot body."""

    # Headers written by other versions may carry fields we don't know
    model_config = {"extra": "ignore"}

    source: str | None = None
    module: str | None = None
    line: int | None = None
    name: str | None = None
    expression: str | None = None
    format: str | None = None
    created: datetime | None = None
    creator: str | None = None


class SnapshotFile(BaseModel):
    """A parsed snapshot file: metadata header plus body text."""

    metadata: SnapshotMetadata = Field(default_factory=SnapshotMetadata)
    body: str

    def to_text(self) -> str:
        """Serialize to the on-disk representation."""
        header = self.metadata.model_dump(mode="json", exclude_none=True)
        lines = [HEADER_DELIMITER]
        if header:
            lines.append(
                yaml.safe_dump(
                    header, sort_keys=False, allow_unicode=True, width=4096
                ).rstrip("\n")
            )
        lines.append(HEADER_DELIMITER)
        lines.append(self.body)
        return "\n".join(lines) + "\n"

    @classmethod
    def from_text(cls, text: str) -> SnapshotFile:
        """Parse file contents. Files without a header are all body.

        Raises:
            yaml.YAMLError: If the header is not valid YAML.
            pydantic.ValidationError: If header fields have wrong types.
        """
        text = text.replace("\r\n", "\n")
        lines = text.split("\n")
        if not lines or lines[0] != HEADER_DELIMITER:
            return cls(body=text.rstrip("\n"))
        try:
            end = lines.index(HEADER_DELIMITER, 1)
        except ValueError:
            return cls(body=text.rstrip("\n"))
        raw = yaml.safe_load("\n".join(lines[1:end])) or {}
        if not isinstance(raw, dict):
            raise yaml.YAMLError("snapshot header must be a mapping")
        body = "\n".join(lines[end + 1 :]).rstrip("\n")
        return cls(metadata=SnapshotMetadata.model_validate(raw), body=body)
