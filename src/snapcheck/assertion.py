"""Assertion coordinator: capture, redact, render, compare, settle.

Each assertion moves through START -> RENDERED -> COMPARED and ends in
exactly one of PASSED, FAILED or UPDATED:

- PASSED: the rendered text equals the baseline body. Nothing is written.
- FAILED: normal mode and the text differs (or no baseline exists). A
  pending snapshot is written beside the baseline and a diff returned.
- UPDATED: update mode and the text differs. The baseline is replaced.

Redaction selectors are compiled before the snapshot store is touched,
so a malformed selector never causes file I/O.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from enum import Enum
from typing import Any

from snapcheck import __version__
from snapcheck.content.capture import from_value
from snapcheck.models.outcome import OutcomeStatus, SnapshotOutcome
from snapcheck.redaction.engine import RuleSpec, apply, compile_rules
from snapcheck.serialization.formats import SnapshotFormat, render, render_debug
from snapcheck.storage.identity import DEFAULT_COUNTER, SequenceCounter, SnapshotIdentity
from snapcheck.storage.snapshot_file import SnapshotFile, SnapshotMetadata
from snapcheck.storage.snapshot_store import Comparison, SnapshotStore, normalize_body

logger = logging.getLogger(__name__)

DEFAULT_CREATOR = f"snapcheck@{__version__}"


class AssertionStage(str, Enum):
    """Lifecycle stages of one snapshot assertion."""

    START = "start"
    RENDERED = "rendered"
    COMPARED = "compared"
    PASSED = "passed"
    FAILED = "failed"
    UPDATED = "updated"


_TERMINAL_STAGES: dict[OutcomeStatus, AssertionStage] = {
    OutcomeStatus.passed: AssertionStage.PASSED,
    OutcomeStatus.failed: AssertionStage.FAILED,
    OutcomeStatus.updated: AssertionStage.UPDATED,
}


def assert_snapshot(
    identity: SnapshotIdentity,
    value: Any,
    redactions: RuleSpec | None = None,
    fmt: SnapshotFormat | str = SnapshotFormat.YAML,
    *,
    update: bool = False,
    expression: str | None = None,
    store: SnapshotStore | None = None,
    counter: SequenceCounter | None = None,
    creator: str | None = None,
) -> SnapshotOutcome:
    """Snapshot a value in a structured format and compare it to its baseline.

    Args:
        identity: Snapshot slot. Its sequence number is assigned here.
        value: Python value (or prebuilt Content tree) to capture.
        redactions: ``{selector: replacement}`` mapping or iterable of
            rules, applied in declaration order before rendering.
        fmt: Output format (JSON, YAML or RON).
        update: Overwrite the baseline on mismatch instead of failing.
        expression: Source text of the asserted expression, kept in
            the file header and in failure messages.
        store: Snapshot store. Defaults to one rooted at identity.root.
        counter: Sequence counter for repeated slots. Defaults to the
            process-wide DEFAULT_COUNTER.
        creator: Value recorded in the header's ``creator`` field.

    Returns:
        The outcome. Call ``raise_for_status()`` to turn a failure into
        an AssertionError.

    Raises:
        SelectorParseError: Malformed redaction selector (before any I/O).
        SerializationError: Value not representable in ``fmt``.
        SnapshotIOError: Baseline or pending file could not be read/written.
    """
    fmt = SnapshotFormat(fmt)
    rules = compile_rules(redactions)
    identity = (counter or DEFAULT_COUNTER).assign(identity)
    _log_stage(identity, AssertionStage.START)

    tree = apply(from_value(value), rules)
    text = render(tree, fmt)
    return _settle(identity, text, fmt.value, update, expression, store, creator)


def assert_text_snapshot(
    identity: SnapshotIdentity,
    text: str,
    *,
    update: bool = False,
    expression: str | None = None,
    store: SnapshotStore | None = None,
    counter: SequenceCounter | None = None,
    creator: str | None = None,
) -> SnapshotOutcome:
    """Snapshot a string verbatim. No capture, redaction or rendering."""
    if not isinstance(text, str):
        raise TypeError(f"text snapshots take a str, got {type(text).__name__}")
    identity = (counter or DEFAULT_COUNTER).assign(identity)
    _log_stage(identity, AssertionStage.START)
    return _settle(identity, text, "text", update, expression, store, creator)


def assert_debug_snapshot(
    identity: SnapshotIdentity,
    value: Any,
    *,
    update: bool = False,
    expression: str | None = None,
    store: SnapshotStore | None = None,
    counter: SequenceCounter | None = None,
    creator: str | None = None,
) -> SnapshotOutcome:
    """Snapshot the pprint rendering of any object.

    Useful for values that cannot be captured as Content. Redactions
    are not supported because there is no tree to walk.
    """
    identity = (counter or DEFAULT_COUNTER).assign(identity)
    _log_stage(identity, AssertionStage.START)
    return _settle(identity, render_debug(value), "debug", update, expression, store, creator)


def _settle(
    identity: SnapshotIdentity,
    text: str,
    format_name: str,
    update: bool,
    expression: str | None,
    store: SnapshotStore | None,
    creator: str | None,
) -> SnapshotOutcome:
    _log_stage(identity, AssertionStage.RENDERED)
    store = store or SnapshotStore(identity.root)
    path = store.resolve(identity)

    baseline = store.load_baseline(path)
    baseline_body = baseline.body if baseline is not None else None
    comparison = store.compare(baseline_body, text)
    _log_stage(identity, AssertionStage.COMPARED)

    if comparison is Comparison.EQUAL:
        outcome = SnapshotOutcome(
            status=OutcomeStatus.passed,
            identity=identity,
            path=path,
            rendered=text,
            expression=expression,
        )
        _log_stage(identity, _TERMINAL_STAGES[outcome.status])
        return outcome

    snapshot = SnapshotFile(
        metadata=SnapshotMetadata(
            source=identity.source_file,
            module=identity.module,
            line=identity.line,
            name=identity.name,
            expression=expression,
            format=format_name,
            created=datetime.now(timezone.utc),
            creator=creator or DEFAULT_CREATOR,
        ),
        body=normalize_body(text),
    )

    if update:
        store.write_baseline(path, snapshot)
        outcome = SnapshotOutcome(
            status=OutcomeStatus.updated,
            identity=identity,
            path=path,
            rendered=text,
            expression=expression,
        )
    else:
        pending = store.write_pending(path, snapshot)
        outcome = SnapshotOutcome(
            status=OutcomeStatus.failed,
            identity=identity,
            path=path,
            rendered=text,
            pending_path=pending,
            diff=store.diff(baseline_body, text, path),
            expression=expression,
        )
    _log_stage(identity, _TERMINAL_STAGES[outcome.status])
    return outcome


def _log_stage(identity: SnapshotIdentity, stage: AssertionStage) -> None:
    logger.debug("snapshot %s -> %s", identity.describe(), stage.value)
