"""The scan command: CLI options -> ScanConfig -> ScanCoordinator -> formatter."""

from pathlib import Path
from typing import List, Optional

import typer

from .. import __version__
from ..config import default_log_directory, load_config
from ..exceptions import ConfigurationError, FatalScanError, LogScoutError, ScanCancelledError
from ..formatters import FORMATS, get_formatter
from ..logging_config import setup_logging
from ..scanning import ScanCoordinator
from . import app
from ._common import ExitCode, console, err_console, running_as_root
from .progress import ScanProgress


@app.command()
def scan(
    roots: Optional[List[Path]] = typer.Argument(
        None,
        help="Directories (or files) to scan. Defaults to the current directory.",
        show_default=False,
    ),
    system: bool = typer.Option(
        False,
        "--system",
        "-s",
        help="Also scan the platform log directory (/var/log on Linux and macOS)",
    ),
    max_size: Optional[float] = typer.Option(
        None,
        "--max-size",
        "-m",
        help="Skip files larger than this many MB (default: 50)",
        min=0.001,
    ),
    workers: Optional[int] = typer.Option(
        None,
        "--workers",
        "-w",
        help="Number of parallel workers (default: CPU count)",
    ),
    depth: Optional[int] = typer.Option(
        None,
        "--depth",
        "-d",
        help="Directory levels to descend below each root (default: 0)",
        min=0,
    ),
    error_patterns: Optional[List[str]] = typer.Option(
        None,
        "--error-pattern",
        "-e",
        help="Substring that marks an error line (repeatable, replaces defaults)",
    ),
    warning_patterns: Optional[List[str]] = typer.Option(
        None,
        "--warning-pattern",
        help="Substring that marks a warning line (repeatable, replaces defaults)",
    ),
    exclude: Optional[List[str]] = typer.Option(
        None,
        "--exclude",
        "-x",
        help="File name glob to skip (repeatable, replaces defaults)",
    ),
    fmt: str = typer.Option(
        "rich",
        "--format",
        "-f",
        help="Output format: rich (default), json, quiet",
    ),
    details: bool = typer.Option(
        False,
        "--details",
        help="List every file and its matched lines",
    ),
    no_progress: bool = typer.Option(
        False,
        "--no-progress",
        help="Hide the progress bar",
    ),
    fail_on_errors: bool = typer.Option(
        False,
        "--fail-on-errors",
        help="Exit 1 when any error line is found (for CI gating)",
    ),
    config: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="Configuration file path (TOML format)",
        exists=True,
        file_okay=True,
        dir_okay=False,
        readable=True,
    ),
    log_file: Optional[Path] = typer.Option(
        None,
        "--log-file",
        help="Also write diagnostics to this file",
        dir_okay=False,
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable verbose (DEBUG) logging",
    ),
    quiet: bool = typer.Option(
        False,
        "--quiet",
        "-q",
        help="Suppress all but ERROR logging",
    ),
    version: bool = typer.Option(
        False,
        "--version",
        help="Show version and exit",
    ),
):
    """
    Scan log files in parallel and report error statistics.

    [bold cyan]Examples:[/bold cyan]

      logscout /var/log/nginx

      logscout --system --depth 2

      logscout logs/ -e timeout -e refused --details

      logscout . --format json | jq .errors_found

      logscout . --fail-on-errors --format quiet
    """
    if version:
        console.print(f"[bold cyan]logscout[/bold cyan] version [green]{__version__}[/green]")
        raise typer.Exit(ExitCode.SUCCESS)

    if verbose and quiet:
        err_console.print("[red]Error:[/red] --verbose and --quiet are mutually exclusive")
        raise typer.Exit(ExitCode.CONFIG_ERROR)

    if fmt not in FORMATS:
        err_console.print(f"[red]Error:[/red] --format must be one of: {', '.join(FORMATS)}")
        raise typer.Exit(ExitCode.CONFIG_ERROR)

    logger = setup_logging(
        verbose=verbose, quiet=quiet, log_file=str(log_file) if log_file else None
    )

    scan_roots = list(roots or [])
    if system:
        log_dir = default_log_directory()
        scan_roots.insert(0, log_dir)
        if not running_as_root():
            logger.warning(
                f"Not running with root privileges; some files under {log_dir} "
                "may not be readable. Run with sudo for full access."
            )
    if not scan_roots:
        scan_roots = [Path(".")]

    try:
        settings = load_config(
            config_file=config,
            workers=workers,
            max_file_size_mb=max_size,
            max_depth=depth,
            error_patterns=error_patterns or None,
            warning_patterns=warning_patterns or None,
            exclude_patterns=exclude or None,
            verbose=verbose,
            quiet=quiet,
        )
        logger.debug(f"Loaded settings: {settings}")

        coordinator = ScanCoordinator.from_config(settings)
        with ScanProgress(enabled=fmt == "rich" and not no_progress) as progress:
            summary = coordinator.run(
                scan_roots, on_start=progress.start, on_result=progress.advance
            )

    except ConfigurationError as e:
        logger.debug(f"{e.__class__.__name__}: {e}")
        err_console.print(f"[red]Configuration error:[/red] {e}")
        raise typer.Exit(ExitCode.CONFIG_ERROR)

    except ScanCancelledError as e:
        err_console.print(f"\n[yellow]Scan cancelled:[/yellow] {e}")
        raise typer.Exit(ExitCode.INTERRUPTED)

    except FatalScanError as e:
        logger.debug(f"{e.__class__.__name__}: {e}")
        err_console.print(f"[red]Scan failed:[/red] {e}")
        raise typer.Exit(ExitCode.SCAN_FAILED)

    except LogScoutError as e:
        logger.error(f"{e.__class__.__name__}: {e}")
        err_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(ExitCode.INTERNAL_ERROR)

    except KeyboardInterrupt:
        logger.info("Scan interrupted by user")
        err_console.print("\n[yellow]Scan interrupted[/yellow]")
        raise typer.Exit(ExitCode.INTERRUPTED)

    except Exception as e:
        logger.exception("Unexpected error during scan")
        err_console.print(f"[red]Unexpected error:[/red] {e}")
        raise typer.Exit(ExitCode.INTERNAL_ERROR)

    get_formatter(fmt, details=details).render(summary)

    if fail_on_errors and summary.errors_found > 0:
        if fmt == "rich":
            console.print(
                f"\n[red]FAIL:[/red] {summary.errors_found} error lines in "
                f"{len(summary.files_with_errors)} files"
            )
        raise typer.Exit(ExitCode.ERRORS_FOUND)
