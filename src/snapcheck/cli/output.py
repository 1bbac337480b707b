"""Rich terminal output for pending snapshot review."""

from __future__ import annotations

from pathlib import Path

from rich import box
from rich.console import Console
from rich.syntax import Syntax
from rich.table import Table

from snapcheck.errors import SnapshotIOError
from snapcheck.storage.snapshot_file import SnapshotFile
from snapcheck.storage.snapshot_store import SnapshotStore

# Room left for padding plus the Source and Expression columns
_DETAIL_WIDTH = 40


def _display_path(path: Path, root: Path) -> str:
    try:
        return path.relative_to(root).as_posix()
    except ValueError:
        return str(path)


def render_pending_table(
    store: SnapshotStore,
    pending: list[Path],
    console: Console,
) -> None:
    """Render one row per pending snapshot.

    Args:
        store: Store the pending files belong to.
        pending: Pending snapshot paths.
        console: Rich Console for output.
    """
    rows: list[tuple[str, str, str, str]] = []
    for path in pending:
        baseline = store.baseline_path(path)
        try:
            snapshot = store.load_pending(baseline)
        except SnapshotIOError:
            rows.append((_display_path(path, store.root), "[red]unreadable[/red]", "", ""))
            continue
        meta = snapshot.metadata if snapshot is not None else None
        source = ""
        if meta is not None and meta.source:
            source = f"{meta.source}:{meta.line}" if meta.line is not None else meta.source
        status = "[yellow]changed[/yellow]" if baseline.exists() else "[green]new[/green]"
        rows.append(
            (
                _display_path(path, store.root),
                status,
                source,
                (meta.expression or "") if meta is not None else "",
            )
        )

    # Pending paths are always printed in full, even past the terminal width
    pending_width = max((len(row[0]) for row in rows), default=0)
    table = Table(box=box.SIMPLE, padding=(0, 2))
    table.add_column("Pending", style="bold", no_wrap=True, min_width=pending_width)
    table.add_column("Baseline", no_wrap=True, min_width=len("unreadable"))
    table.add_column("Source", overflow="fold")
    table.add_column("Expression", overflow="fold")
    for row in rows:
        table.add_row(*row)

    needed = pending_width + len("unreadable") + _DETAIL_WIDTH
    if needed > console.width:
        table.width = needed
    console.print(table, crop=False)


def render_review(
    pending_path: Path,
    pending: SnapshotFile,
    baseline: SnapshotFile | None,
    console: Console,
) -> None:
    """Render header details and the diff for one pending snapshot."""
    meta = pending.metadata
    console.print(f"[bold]Snapshot:[/bold] {pending_path}")
    if meta.source:
        console.print(f"[bold]Source:[/bold] {meta.source}:{meta.line}")
    if meta.expression:
        console.print(f"[bold]Expression:[/bold] {meta.expression}")
    if meta.format:
        console.print(f"[bold]Format:[/bold] {meta.format}")
    console.print()

    diff = SnapshotStore.diff(
        baseline.body if baseline is not None else None,
        pending.body,
        SnapshotStore.baseline_path(pending_path),
    )
    if not diff:
        console.print("[green]Pending snapshot matches the baseline.[/green]")
        return
    console.print(Syntax(diff, "diff", theme="ansi_dark", word_wrap=True))
