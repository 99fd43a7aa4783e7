"""Data models for the scanning layer.

A scan produces one ``ScanResult`` per candidate file. The outcome of a file is
one of four tagged records (``Ok``, ``Skipped``, ``TooLarge``, ``ReadError``);
none of them are exceptions. ``ScanSummary`` is the fold of all results.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Iterable, Optional, Union


class Severity(Enum):
    """Classification of a matched line. ERROR outranks WARNING."""

    WARNING = "warning"
    ERROR = "error"


@dataclass(frozen=True)
class LineMatch:
    """A single classified line."""

    line_number: int
    severity: Severity
    text: str


# ── Outcomes ───────────────────────────────────────────────────


@dataclass(frozen=True)
class Ok:
    """File was read and every line classified."""

    error_count: int = 0
    warning_count: int = 0
    line_count: int = 0
    matches: tuple[LineMatch, ...] = ()

    kind = "ok"


@dataclass(frozen=True)
class Skipped:
    """File was readable but not scanned (e.g. binary content)."""

    reason: str

    kind = "skipped"


@dataclass(frozen=True)
class TooLarge:
    """File exceeded the size limit; content was not read."""

    size: int

    kind = "too_large"


@dataclass(frozen=True)
class ReadError:
    """File could not be opened or read after enumeration."""

    cause: str

    kind = "read_error"


Outcome = Union[Ok, Skipped, TooLarge, ReadError]


@dataclass(frozen=True)
class ScanResult:
    """Per-file scan result."""

    path: Path
    outcome: Outcome
    elapsed: float = 0.0

    @property
    def ok(self) -> bool:
        return isinstance(self.outcome, Ok)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "path": str(self.path),
            "outcome": self.outcome.kind,
            "elapsed_ms": round(self.elapsed * 1000, 3),
        }
        outcome = self.outcome
        if isinstance(outcome, Ok):
            data.update(
                error_count=outcome.error_count,
                warning_count=outcome.warning_count,
                line_count=outcome.line_count,
                matches=[
                    {"line": m.line_number, "severity": m.severity.value, "text": m.text}
                    for m in outcome.matches
                ],
            )
        elif isinstance(outcome, Skipped):
            data["reason"] = outcome.reason
        elif isinstance(outcome, TooLarge):
            data["size"] = outcome.size
        elif isinstance(outcome, ReadError):
            data["cause"] = outcome.cause
        return data


@dataclass(frozen=True)
class RootError:
    """A root (or nested directory) that does not exist or cannot be listed."""

    path: Path
    reason: str


# ── Fold ───────────────────────────────────────────────────────


@dataclass
class SummaryTally:
    """Mutable counters for one worker; merged once at the join barrier.

    Fold rules:
        every outcome        -> files_scanned += 1
        Ok                   -> errors/warnings += counts
        TooLarge             -> large_files += 1, files_skipped += 1
        Skipped, ReadError   -> files_skipped += 1
    """

    files_scanned: int = 0
    errors_found: int = 0
    warnings_found: int = 0
    files_skipped: int = 0
    large_files: int = 0

    def add(self, result: ScanResult) -> None:
        self.files_scanned += 1
        outcome = result.outcome
        if isinstance(outcome, Ok):
            self.errors_found += outcome.error_count
            self.warnings_found += outcome.warning_count
        elif isinstance(outcome, TooLarge):
            self.large_files += 1
            self.files_skipped += 1
        else:
            self.files_skipped += 1

    def merge(self, other: SummaryTally) -> SummaryTally:
        self.files_scanned += other.files_scanned
        self.errors_found += other.errors_found
        self.warnings_found += other.warnings_found
        self.files_skipped += other.files_skipped
        self.large_files += other.large_files
        return self


@dataclass(frozen=True)
class ScanSummary:
    """Aggregate statistics for one invocation.

    ``results`` is in enumeration order, not completion order.
    """

    files_scanned: int = 0
    errors_found: int = 0
    warnings_found: int = 0
    files_skipped: int = 0
    large_files: int = 0
    elapsed: float = 0.0
    results: tuple[ScanResult, ...] = ()
    root_errors: tuple[RootError, ...] = ()

    @classmethod
    def from_tally(
        cls,
        tally: SummaryTally,
        results: Iterable[ScanResult],
        root_errors: Iterable[RootError] = (),
        elapsed: float = 0.0,
    ) -> ScanSummary:
        return cls(
            files_scanned=tally.files_scanned,
            errors_found=tally.errors_found,
            warnings_found=tally.warnings_found,
            files_skipped=tally.files_skipped,
            large_files=tally.large_files,
            elapsed=elapsed,
            results=tuple(results),
            root_errors=tuple(root_errors),
        )

    @classmethod
    def from_results(
        cls,
        results: Iterable[ScanResult],
        root_errors: Iterable[RootError] = (),
        elapsed: float = 0.0,
    ) -> ScanSummary:
        """Fold results sequentially. Same totals as any partitioned fold."""
        results = tuple(results)
        tally = SummaryTally()
        for result in results:
            tally.add(result)
        return cls.from_tally(tally, results, root_errors, elapsed)

    def _count(self, outcome_type: type) -> int:
        return sum(1 for r in self.results if isinstance(r.outcome, outcome_type))

    @property
    def read_errors(self) -> int:
        return self._count(ReadError)

    @property
    def binary_files(self) -> int:
        return sum(
            1
            for r in self.results
            if isinstance(r.outcome, Skipped) and r.outcome.reason == "binary"
        )

    @property
    def files_with_errors(self) -> list[ScanResult]:
        return [
            r for r in self.results if isinstance(r.outcome, Ok) and r.outcome.error_count > 0
        ]

    def result_for(self, path: Path) -> Optional[ScanResult]:
        for result in self.results:
            if result.path == path:
                return result
        return None

    def to_dict(self) -> dict[str, Any]:
        return {
            "files_scanned": self.files_scanned,
            "errors_found": self.errors_found,
            "warnings_found": self.warnings_found,
            "files_skipped": self.files_skipped,
            "large_files": self.large_files,
            "read_errors": self.read_errors,
            "binary_files": self.binary_files,
            "elapsed_ms": round(self.elapsed * 1000, 3),
            "root_errors": [{"path": str(e.path), "reason": e.reason} for e in self.root_errors],
            "results": [r.to_dict() for r in self.results],
        }
