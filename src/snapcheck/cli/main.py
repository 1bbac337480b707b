"""snapcheck CLI entry point."""

import typer

from snapcheck import __version__
from snapcheck.cli.review_cmd import accept, pending, reject, show

app = typer.Typer(
    name="snapcheck",
    help="Review and accept pending snapshots",
    no_args_is_help=True,
)

# Register subcommands
app.command()(accept)
app.command()(pending)
app.command()(reject)
app.command()(show)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"snapcheck {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False,
        "--version",
        "-v",
        help="Show version and exit.",
        callback=version_callback,
        is_eager=True,
    ),
) -> None:
    """Review and accept pending snapshots."""
