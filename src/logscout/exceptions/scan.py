"""Run-level scan failures.

Per-file and per-root problems are never raised; they are recorded as
outcomes in the summary. Only conditions that prevent a summary from being
produced at all live here.
"""

from pathlib import Path
from typing import TYPE_CHECKING, Sequence

from .base import LogScoutError

if TYPE_CHECKING:
    from ..scanning.models import RootError


class FatalScanError(LogScoutError):
    """Base class for failures that prevent a scan summary."""

    pass


class NoScannableRootsError(FatalScanError):
    """Raised when none of the supplied roots could be listed."""

    def __init__(self, roots: Sequence[Path], root_errors: Sequence["RootError"] = ()):
        super().__init__(
            "No scannable roots",
            details={
                "roots": ", ".join(str(r) for r in roots) or "<none>",
                "reason": "; ".join(f"{e.path}: {e.reason}" for e in root_errors)
                or "no roots given",
            },
        )
        self.roots = list(roots)
        self.root_errors = list(root_errors)


class InvalidWorkerCountError(FatalScanError):
    """Raised when the worker pool cannot be constructed."""

    def __init__(self, workers: int):
        super().__init__(
            f"Cannot start worker pool with {workers} workers",
            details={"workers": str(workers), "reason": "must be at least 1"},
        )
        self.workers = workers


class ScanCancelledError(FatalScanError):
    """Raised when a scan was cancelled before every file was folded."""

    def __init__(self, completed: int, total: int):
        super().__init__(
            "Scan cancelled",
            details={"completed": str(completed), "total": str(total)},
        )
        self.completed = completed
        self.total = total
