"""Parallel log scanning pipeline.

    roots -> FileEnumerator -> ScanCoordinator -> scan_file x N -> ScanSummary
"""

from .coordinator import ScanCoordinator, default_worker_count, run_scan
from .enumerator import Enumeration, FileEnumerator
from .matcher import MatchPolicy
from .models import (
    LineMatch,
    Ok,
    ReadError,
    RootError,
    ScanResult,
    ScanSummary,
    Severity,
    Skipped,
    SummaryTally,
    TooLarge,
)
from .scanner import DEFAULT_SIZE_LIMIT, scan_file

__all__ = [
    "ScanCoordinator",
    "run_scan",
    "default_worker_count",
    "FileEnumerator",
    "Enumeration",
    "MatchPolicy",
    "scan_file",
    "DEFAULT_SIZE_LIMIT",
    "Severity",
    "LineMatch",
    "Ok",
    "Skipped",
    "TooLarge",
    "ReadError",
    "RootError",
    "ScanResult",
    "ScanSummary",
    "SummaryTally",
]
