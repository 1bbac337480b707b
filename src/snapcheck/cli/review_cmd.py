"""snapcheck pending / show / accept / reject -- review pending snapshots.

Pending snapshots (``*.snap.new``) are written by failing assertions.
Accepting one atomically replaces its baseline; rejecting deletes it.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer
from rich.console import Console

from snapcheck.cli.output import render_pending_table, render_review
from snapcheck.errors import SnapshotIOError
from snapcheck.models.config import find_project_root, load_project_config
from snapcheck.storage.snapshot_store import PENDING_SUFFIX, SnapshotStore


def _open_store(root: Optional[Path]) -> SnapshotStore:
    project_root = root.resolve() if root is not None else find_project_root()
    project_config = load_project_config(project_root)
    return SnapshotStore(project_root, snapshot_dir=project_config.snapshot_dir)


def _select(store: SnapshotStore, paths: Optional[list[Path]], all_: bool) -> list[Path]:
    if all_:
        return store.list_pending()
    if not paths:
        typer.echo("Error: pass pending snapshot paths or --all", err=True)
        raise typer.Exit(code=1)
    selected: list[Path] = []
    for path in paths:
        # Accept either the .snap.new file or its baseline path
        if not path.name.endswith(PENDING_SUFFIX):
            path = store.pending_path(path)
        if not path.exists():
            typer.echo(f"Error: No pending snapshot: {path}", err=True)
            raise typer.Exit(code=1)
        selected.append(path)
    return selected


def pending(
    root: Optional[Path] = typer.Option(None, "--root", help="Project root (default: auto-detect)"),
) -> None:
    """List pending snapshots awaiting review."""
    console = Console()
    store = _open_store(root)
    found = store.list_pending()
    if not found:
        console.print("No pending snapshots.")
        return
    render_pending_table(store, found, console)
    console.print(f"{len(found)} pending snapshot(s)")


def show(
    path: Path = typer.Argument(..., help="Pending snapshot (or its baseline path)"),
    root: Optional[Path] = typer.Option(None, "--root", help="Project root (default: auto-detect)"),
) -> None:
    """Show the diff between a pending snapshot and its baseline."""
    console = Console()
    store = _open_store(root)
    (pending_path,) = _select(store, [path], False)
    baseline_path = store.baseline_path(pending_path)
    try:
        proposed = store.load_pending(baseline_path)
        baseline = store.load_baseline(baseline_path)
    except SnapshotIOError as exc:
        console.print(f"[bold red]Error:[/bold red] {exc}")
        raise typer.Exit(code=1)
    if proposed is None:
        console.print(f"[bold red]Error:[/bold red] No pending snapshot: {pending_path}")
        raise typer.Exit(code=1)
    render_review(pending_path, proposed, baseline, console)


def accept(
    paths: Optional[list[Path]] = typer.Argument(None, help="Pending snapshots to accept"),
    all_: bool = typer.Option(False, "--all", "-a", help="Accept every pending snapshot"),
    root: Optional[Path] = typer.Option(None, "--root", help="Project root (default: auto-detect)"),
) -> None:
    """Accept pending snapshots as the new baselines."""
    console = Console()
    store = _open_store(root)
    selected = _select(store, paths, all_)
    for pending_path in selected:
        try:
            baseline = store.accept(pending_path)
        except SnapshotIOError as exc:
            console.print(f"[bold red]Error:[/bold red] {exc}")
            raise typer.Exit(code=1)
        console.print(f"[green]✓ accepted[/green] {baseline}")
    console.print(f"{len(selected)} snapshot(s) accepted")


def reject(
    paths: Optional[list[Path]] = typer.Argument(None, help="Pending snapshots to reject"),
    all_: bool = typer.Option(False, "--all", "-a", help="Reject every pending snapshot"),
    root: Optional[Path] = typer.Option(None, "--root", help="Project root (default: auto-detect)"),
) -> None:
    """Delete pending snapshots, keeping the current baselines."""
    console = Console()
    store = _open_store(root)
    selected = _select(store, paths, all_)
    for pending_path in selected:
        try:
            store.reject(pending_path)
        except SnapshotIOError as exc:
            console.print(f"[bold red]Error:[/bold red] {exc}")
            raise typer.Exit(code=1)
        console.print(f"[red]✗ rejected[/red] {pending_path}")
    console.print(f"{len(selected)} snapshot(s) rejected")
