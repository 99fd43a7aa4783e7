"""Parallel scan coordinator.

Fans candidate files out over a fixed-size thread pool and folds the per-file
results into a single ``ScanSummary``.

Paths are statically partitioned: worker ``k`` of ``W`` owns indices
``k, k + W, k + 2W, ...``. Each worker keeps its own ``SummaryTally`` and a
list of ``(index, result)`` pairs, so nothing is shared between workers. The
coordinator joins every worker (the only synchronization point), merges the
tallies and puts each result back at its enumeration index.
"""

from __future__ import annotations

import os
import threading
import time
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import TYPE_CHECKING, Callable, Optional, Sequence

from ..exceptions import InvalidWorkerCountError, NoScannableRootsError, ScanCancelledError
from ..logging_config import get_logger
from .enumerator import FileEnumerator
from .matcher import MatchPolicy
from .models import ReadError, ScanResult, ScanSummary, SummaryTally
from .scanner import DEFAULT_MAX_MATCHES, DEFAULT_SIZE_LIMIT, scan_file

if TYPE_CHECKING:
    from ..config import ScanConfig

logger = get_logger(__name__)

StartCallback = Callable[[int], None]
ResultCallback = Callable[[ScanResult], None]


def default_worker_count() -> int:
    return os.cpu_count() or 1


class ScanCoordinator:
    """Owns the worker pool for one or more scan runs."""

    def __init__(
        self,
        policy: Optional[MatchPolicy] = None,
        size_limit: int = DEFAULT_SIZE_LIMIT,
        workers: Optional[int] = None,
        enumerator: Optional[FileEnumerator] = None,
        max_matches: int = DEFAULT_MAX_MATCHES,
    ):
        """
        Args:
            policy: Line classification policy (defaults to MatchPolicy())
            size_limit: Largest file size in bytes that is read
            workers: Pool size (None = CPU count)
            enumerator: Candidate discovery (defaults to a single-level walk)
            max_matches: Matched lines kept per file
        """
        self.policy = policy or MatchPolicy()
        self.size_limit = size_limit
        self.workers = default_worker_count() if workers is None else workers
        self.enumerator = enumerator or FileEnumerator()
        self.max_matches = max_matches

    @classmethod
    def from_config(cls, config: ScanConfig) -> ScanCoordinator:
        return cls(
            policy=MatchPolicy.from_config(config),
            size_limit=config.max_file_size_bytes,
            workers=config.workers,
            enumerator=FileEnumerator.from_config(config),
            max_matches=config.max_matches_per_file,
        )

    def run(
        self,
        roots: Sequence[Path],
        on_start: Optional[StartCallback] = None,
        on_result: Optional[ResultCallback] = None,
        cancel: Optional[threading.Event] = None,
    ) -> ScanSummary:
        """
        Scan every candidate file under ``roots``.

        Args:
            roots: Ordered root paths
            on_start: Called once with the number of candidate files
            on_result: Called after each file, from the worker thread
            cancel: Checked between files; when set, no summary is produced

        Returns:
            ScanSummary with results in enumeration order

        Raises:
            NoScannableRootsError: None of the roots could be listed
            InvalidWorkerCountError: Pool size below 1
            ScanCancelledError: ``cancel`` was set before every file was scanned
        """
        if self.workers < 1:
            raise InvalidWorkerCountError(self.workers)

        start = time.perf_counter()
        roots = [Path(r) for r in roots]
        enumeration = self.enumerator.enumerate(roots)

        if enumeration.resolved_roots == 0:
            raise NoScannableRootsError(roots, enumeration.root_errors)

        paths = enumeration.paths
        if on_start is not None:
            on_start(len(paths))

        if not paths:
            logger.info("No candidate files found")
            return ScanSummary(
                elapsed=time.perf_counter() - start,
                root_errors=tuple(enumeration.root_errors),
            )

        cancel = cancel or threading.Event()
        pool_size = min(self.workers, len(paths))
        logger.debug(f"Scanning {len(paths)} files with {pool_size} workers")

        slots: list[Optional[ScanResult]] = [None] * len(paths)
        tally = SummaryTally()

        with ThreadPoolExecutor(max_workers=pool_size, thread_name_prefix="logscout") as executor:
            futures = [
                executor.submit(self._work, paths, k, pool_size, on_result, cancel)
                for k in range(pool_size)
            ]
            try:
                for future in futures:
                    indexed, local = future.result()
                    tally.merge(local)
                    for index, result in indexed:
                        slots[index] = result
            except KeyboardInterrupt:
                # In-flight reads finish; workers stop at their next file.
                cancel.set()
                raise

        if tally.files_scanned < len(paths):
            raise ScanCancelledError(completed=tally.files_scanned, total=len(paths))

        summary = ScanSummary.from_tally(
            tally,
            results=slots,
            root_errors=enumeration.root_errors,
            elapsed=time.perf_counter() - start,
        )
        logger.info(
            f"Scan complete: {summary.files_scanned} scanned, {summary.errors_found} errors, "
            f"{summary.files_skipped} skipped, {summary.large_files} large"
        )
        return summary

    def _work(
        self,
        paths: Sequence[Path],
        offset: int,
        stride: int,
        on_result: Optional[ResultCallback],
        cancel: threading.Event,
    ) -> tuple[list[tuple[int, ScanResult]], SummaryTally]:
        indexed: list[tuple[int, ScanResult]] = []
        local = SummaryTally()
        for index in range(offset, len(paths), stride):
            if cancel.is_set():
                break
            result = self._scan_one(paths[index])
            local.add(result)
            indexed.append((index, result))
            if on_result is not None:
                on_result(result)
        return indexed, local

    def _scan_one(self, path: Path) -> ScanResult:
        try:
            result = scan_file(path, self.policy, self.size_limit, self.max_matches)
        except Exception as e:
            logger.error(f"Unexpected error scanning {path}: {e}")
            return ScanResult(path=path, outcome=ReadError(cause=f"unexpected error: {e}"))
        if isinstance(result.outcome, ReadError):
            logger.warning(f"Cannot read {path}: {result.outcome.cause}")
        return result


def run_scan(
    roots: Sequence[Path],
    policy: Optional[MatchPolicy] = None,
    size_limit: int = DEFAULT_SIZE_LIMIT,
    worker_count: Optional[int] = None,
) -> ScanSummary:
    """Scan ``roots`` with a one-off coordinator. See ``ScanCoordinator.run``."""
    coordinator = ScanCoordinator(policy=policy, size_limit=size_limit, workers=worker_count)
    return coordinator.run(roots)
