"""Shared CLI helpers."""

import os
import sys

from rich.console import Console

console = Console()
err_console = Console(stderr=True)


class ExitCode:
    """Process exit codes.

    A summary with skipped or unreadable files is still a success.
    """

    SUCCESS = 0
    ERRORS_FOUND = 1
    SCAN_FAILED = 2
    CONFIG_ERROR = 81
    INTERNAL_ERROR = 100
    INTERRUPTED = 130


def running_as_root() -> bool:
    """True on POSIX when the effective user is root; always True elsewhere."""
    if sys.platform.startswith("win") or not hasattr(os, "geteuid"):
        return True
    return os.geteuid() == 0
