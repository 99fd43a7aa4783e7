"""Exception hierarchy for logscout."""

from .base import LogScoutError
from .config import ConfigurationError, InvalidConfigError
from .scan import (
    FatalScanError,
    InvalidWorkerCountError,
    NoScannableRootsError,
    ScanCancelledError,
)

__all__ = [
    "LogScoutError",
    "ConfigurationError",
    "InvalidConfigError",
    "FatalScanError",
    "NoScannableRootsError",
    "InvalidWorkerCountError",
    "ScanCancelledError",
]
