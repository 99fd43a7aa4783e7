"""CLI entry point: registers the scan command."""

import typer

app = typer.Typer(
    name="logscout",
    help="logscout - Parallel error survey for log files",
    add_completion=False,
    rich_markup_mode="rich",
)


# Import the command module to register it
from .scan import scan as _scan  # noqa: F401, E402

__all__ = ["app"]
