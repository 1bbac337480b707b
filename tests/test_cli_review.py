"""Tests for the snapcheck pending/show/accept/reject CLI commands."""

from pathlib import Path

from typer.testing import CliRunner

from snapcheck.cli.main import app
from snapcheck.storage.snapshot_file import SnapshotFile, SnapshotMetadata
from snapcheck.storage.snapshot_store import SnapshotStore

runner = CliRunner()


def _snapshot(body: str) -> SnapshotFile:
    return SnapshotFile(
        metadata=SnapshotMetadata(
            source="tests/test_users.py",
            line=8,
            expression="snapshot(user)",
            format="yaml",
        ),
        body=body,
    )


def _setup(root: Path) -> tuple[Path, Path]:
    """One changed snapshot (a) and one new snapshot (b)."""
    store = SnapshotStore(root)
    changed = root / "tests" / "snapshots" / "a.snap"
    store.write_baseline(changed, _snapshot("name: Alice"))
    store.write_pending(changed, _snapshot("name: Bob"))
    new = root / "tests" / "snapshots" / "b.snap"
    store.write_pending(new, _snapshot("id: 1"))
    return changed, new


class TestPending:
    """snapcheck pending."""

    def test_no_pending(self, tmp_path: Path):
        """An empty project reports nothing to review."""
        result = runner.invoke(app, ["pending", "--root", str(tmp_path)])
        assert result.exit_code == 0
        assert "No pending snapshots." in result.output

    def test_lists_pending(self, tmp_path: Path):
        """Each pending snapshot is listed with its status."""
        _setup(tmp_path)
        result = runner.invoke(app, ["pending", "--root", str(tmp_path)])
        assert result.exit_code == 0
        assert "tests/snapshots/a.snap.new" in result.output
        assert "tests/snapshots/b.snap.new" in result.output
        assert "changed" in result.output
        assert "new" in result.output
        assert "2 pending snapshot(s)" in result.output

    def test_long_paths_are_printed_in_full(self, tmp_path: Path):
        """Deeply nested pending paths are never shortened."""
        store = SnapshotStore(tmp_path)
        deep = tmp_path / "tests" / "integration" / "payments" / "snapshots"
        store.write_pending(
            deep / "tests__integration__payments__test_refund__line_42.snap",
            _snapshot("id: 1"),
        )
        result = runner.invoke(app, ["pending", "--root", str(tmp_path)])
        assert result.exit_code == 0
        assert (
            "tests/integration/payments/snapshots/"
            "tests__integration__payments__test_refund__line_42.snap.new"
        ) in result.output

    def test_unreadable_pending_is_listed(self, tmp_path: Path):
        """A pending file with a broken header is flagged, not fatal."""
        _setup(tmp_path)
        broken = tmp_path / "tests" / "snapshots" / "c.snap.new"
        broken.write_text("---\nsource: [unclosed\n---\nbody\n", encoding="utf-8")
        result = runner.invoke(app, ["pending", "--root", str(tmp_path)])
        assert result.exit_code == 0
        assert "unreadable" in result.output
        assert "3 pending snapshot(s)" in result.output


class TestShow:
    """snapcheck show."""

    def test_shows_diff(self, tmp_path: Path):
        """The diff between baseline and pending is printed."""
        changed, _ = _setup(tmp_path)
        result = runner.invoke(app, ["show", str(changed), "--root", str(tmp_path)])
        assert result.exit_code == 0
        assert "-name: Alice" in result.output
        assert "+name: Bob" in result.output
        assert "snapshot(user)" in result.output

    def test_missing_pending_exits_nonzero(self, tmp_path: Path):
        """Showing a snapshot with nothing pending is an error."""
        result = runner.invoke(
            app, ["show", str(tmp_path / "nope.snap"), "--root", str(tmp_path)]
        )
        assert result.exit_code == 1
        assert "No pending snapshot" in result.output


class TestAcceptReject:
    """snapcheck accept / reject."""

    def test_accept_all(self, tmp_path: Path):
        """--all promotes every pending snapshot."""
        changed, new = _setup(tmp_path)
        result = runner.invoke(app, ["accept", "--all", "--root", str(tmp_path)])
        assert result.exit_code == 0
        assert "2 snapshot(s) accepted" in result.output
        store = SnapshotStore(tmp_path)
        assert store.load_baseline(changed).body == "name: Bob"
        assert store.load_baseline(new).body == "id: 1"
        assert store.list_pending() == []

    def test_accept_single_by_pending_path(self, tmp_path: Path):
        """A pending path can be accepted on its own."""
        changed, new = _setup(tmp_path)
        pending = SnapshotStore.pending_path(changed)
        result = runner.invoke(app, ["accept", str(pending), "--root", str(tmp_path)])
        assert result.exit_code == 0
        assert "1 snapshot(s) accepted" in result.output
        assert SnapshotStore.pending_path(new).exists()

    def test_reject_keeps_baseline(self, tmp_path: Path):
        """Rejecting deletes the pending file only."""
        changed, _ = _setup(tmp_path)
        result = runner.invoke(app, ["reject", str(changed), "--root", str(tmp_path)])
        assert result.exit_code == 0
        assert "1 snapshot(s) rejected" in result.output
        assert not SnapshotStore.pending_path(changed).exists()
        assert SnapshotStore(tmp_path).load_baseline(changed).body == "name: Alice"

    def test_requires_paths_or_all(self, tmp_path: Path):
        """Without paths or --all nothing happens."""
        _setup(tmp_path)
        result = runner.invoke(app, ["accept", "--root", str(tmp_path)])
        assert result.exit_code == 1
        assert len(SnapshotStore(tmp_path).list_pending()) == 2


class TestVersion:
    """snapcheck --version."""

    def test_version(self):
        """--version prints the package version."""
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert "snapcheck 0.1.0" in result.output
