"""
logscout - parallel error survey for log files

Scans a set of log directories with a bounded thread pool, classifies every
line as error, warning or neither, and reports one aggregate summary.
"""

__version__ = "0.1.0"

from .scanning import (
    MatchPolicy,
    ScanCoordinator,
    ScanResult,
    ScanSummary,
    Severity,
    run_scan,
)

__all__ = [
    "run_scan",  # Main entry point
    "ScanCoordinator",
    "MatchPolicy",
    "ScanResult",
    "ScanSummary",
    "Severity",
]
