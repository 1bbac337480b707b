"""pytest integration: the ``snapshot`` fixture.

This is the outermost harness. It reads the update-mode toggle once
per session (``--snapshot-update`` or SNAPCHECK_UPDATE), builds
identities from the running test and the calling line, and turns
failed outcomes into assertion errors.

Example::

    def test_user(snapshot):
        snapshot(make_user(), redactions={".id": "[id]"})
        snapshot(make_user(), fmt="ron", name="user_typed")
"""

from __future__ import annotations

import linecache
import sys
from pathlib import Path
from typing import Any

import pytest

from snapcheck.assertion import assert_debug_snapshot, assert_snapshot, assert_text_snapshot
from snapcheck.models.config import ProjectConfig, load_project_config, update_mode_from_env
from snapcheck.models.outcome import SnapshotOutcome
from snapcheck.redaction.engine import RuleSpec
from snapcheck.serialization.formats import SnapshotFormat
from snapcheck.storage.identity import SequenceCounter, SnapshotIdentity
from snapcheck.storage.snapshot_store import SnapshotStore

_UPDATE_KEY = pytest.StashKey[bool]()
_CONFIG_KEY = pytest.StashKey[ProjectConfig]()


def pytest_addoption(parser: pytest.Parser) -> None:
    group = parser.getgroup("snapcheck")
    group.addoption(
        "--snapshot-update",
        action="store_true",
        default=False,
        help="Overwrite snapshot baselines on mismatch instead of failing.",
    )


def pytest_configure(config: pytest.Config) -> None:
    try:
        from_env = update_mode_from_env()
    except ValueError as exc:
        raise pytest.UsageError(str(exc)) from exc
    config.stash[_UPDATE_KEY] = bool(config.getoption("snapshot_update")) or from_env
    config.stash[_CONFIG_KEY] = load_project_config(Path(config.rootpath))


class SnapshotAsserter:
    """Callable bound to one test; each call is one snapshot assertion.

    Repeated calls within the same test share a SequenceCounter, so the
    second unnamed snapshot lands in ``<test>-2.snap`` and so on.
    """

    def __init__(
        self,
        *,
        root: Path,
        module: str,
        source_file: str,
        test_name: str,
        update: bool = False,
        config: ProjectConfig | None = None,
    ) -> None:
        self.config = config or ProjectConfig()
        self.root = root
        self.module = module
        self.source_file = source_file
        self.test_name = test_name
        self.update = update
        self.counter = SequenceCounter()
        self.store = SnapshotStore(root, snapshot_dir=self.config.snapshot_dir)

    def __call__(
        self,
        value: Any,
        *,
        name: str | None = None,
        redactions: RuleSpec | None = None,
        fmt: SnapshotFormat | str | None = None,
    ) -> SnapshotOutcome:
        """Assert a structured snapshot of ``value``."""
        identity, expression = self._identity(name)
        return assert_snapshot(
            identity,
            value,
            redactions,
            fmt or self.config.default_format,
            update=self.update,
            expression=expression,
            store=self.store,
            counter=self.counter,
            creator=self.config.creator,
        ).raise_for_status()

    def text(self, text: str, *, name: str | None = None) -> SnapshotOutcome:
        """Assert a verbatim string snapshot."""
        identity, expression = self._identity(name)
        return assert_text_snapshot(
            identity,
            text,
            update=self.update,
            expression=expression,
            store=self.store,
            counter=self.counter,
            creator=self.config.creator,
        ).raise_for_status()

    def debug(self, value: Any, *, name: str | None = None) -> SnapshotOutcome:
        """Assert a pprint snapshot of ``value``."""
        identity, expression = self._identity(name)
        return assert_debug_snapshot(
            identity,
            value,
            update=self.update,
            expression=expression,
            store=self.store,
            counter=self.counter,
            creator=self.config.creator,
        ).raise_for_status()

    def _identity(self, name: str | None) -> tuple[SnapshotIdentity, str | None]:
        # Two frames up: this helper, then the public method, then the test
        frame = sys._getframe(2)
        line = frame.f_lineno
        expression = linecache.getline(frame.f_code.co_filename, line).strip() or None
        identity = SnapshotIdentity(
            root=self.root,
            module=self.module,
            source_file=self.source_file,
            line=line,
            name=name or self.test_name,
        )
        return identity, expression


@pytest.fixture
def snapshot(request: pytest.FixtureRequest) -> SnapshotAsserter:
    """Snapshot asserter scoped to the current test."""
    config = request.config
    root = Path(config.rootpath)
    test_path = Path(request.path)
    try:
        source_file = test_path.relative_to(root).as_posix()
    except ValueError:
        source_file = str(test_path)
    module = request.module.__name__ if request.module is not None else test_path.stem
    return SnapshotAsserter(
        root=root,
        module=module,
        source_file=source_file,
        test_name=request.node.name,
        update=config.stash.get(_UPDATE_KEY, False),
        config=config.stash.get(_CONFIG_KEY, None),
    )
