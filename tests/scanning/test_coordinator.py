"""Tests for the parallel ScanCoordinator."""

import threading
import time

import pytest

from logscout.config import ScanConfig
from logscout.exceptions import InvalidWorkerCountError, NoScannableRootsError, ScanCancelledError
from logscout.scanning import coordinator as coordinator_module
from logscout.scanning.coordinator import ScanCoordinator, default_worker_count, run_scan
from logscout.scanning.enumerator import FileEnumerator
from logscout.scanning.matcher import MatchPolicy
from logscout.scanning.models import Ok, ReadError, ScanSummary, TooLarge
from logscout.scanning.scanner import scan_file


def _counters(summary: ScanSummary):
    return (
        summary.files_scanned,
        summary.errors_found,
        summary.warnings_found,
        summary.files_skipped,
        summary.large_files,
    )


@pytest.fixture
def mixed_dir(tmp_path, write_log):
    """Twelve files with varying error counts plus one binary file."""
    for i in range(12):
        write_log(tmp_path, f"svc{i:02d}.log", "ok\n" + "error\n" * i + "warn\n" * (i % 3))
    write_log(tmp_path, "blob.bin", b"\x00\x01\x02")
    return tmp_path


class TestScenarios:
    """End-to-end behavior on small directory trees."""

    def test_single_file_counts(self, app_log):
        summary = run_scan([app_log], worker_count=2)
        assert summary.files_scanned == 1
        assert summary.errors_found == 1
        assert summary.warnings_found == 1
        outcome = summary.results[0].outcome
        assert isinstance(outcome, Ok)
        assert (outcome.error_count, outcome.warning_count, outcome.line_count) == (1, 1, 3)

    def test_empty_and_oversized(self, tmp_path, write_log):
        write_log(tmp_path, "empty.log", "")
        write_log(tmp_path, "huge.log", "x" * 64)
        summary = run_scan([tmp_path], size_limit=32)
        assert summary.files_scanned == 2
        assert summary.files_skipped == 1
        assert summary.large_files == 1
        assert isinstance(summary.results[0].outcome, Ok)
        assert summary.results[1].outcome == TooLarge(size=64)

    def test_only_missing_root_is_fatal(self, tmp_path):
        with pytest.raises(NoScannableRootsError) as exc_info:
            run_scan([tmp_path / "nonexistent"])
        assert exc_info.value.root_errors[0].reason == "does not exist"

    def test_unreadable_file_is_recorded(self, tmp_path, write_log, unreadable):
        unreadable(write_log(tmp_path, "a_locked.log", "error\n"))
        write_log(tmp_path, "b_normal.log", "error one\nfine\nerror two\n")
        summary = run_scan([tmp_path], worker_count=2)
        assert summary.files_scanned == 2
        assert summary.errors_found == 2
        assert summary.read_errors == 1
        assert isinstance(summary.results[0].outcome, ReadError)


class TestFatalConditions:
    """Only run-cannot-start conditions raise."""

    def test_no_roots(self):
        with pytest.raises(NoScannableRootsError):
            run_scan([])

    def test_zero_workers(self, app_log):
        with pytest.raises(InvalidWorkerCountError):
            run_scan([app_log], worker_count=0)

    def test_empty_but_valid_root_is_not_fatal(self, tmp_path):
        summary = run_scan([tmp_path])
        assert _counters(summary) == (0, 0, 0, 0, 0)
        assert summary.results == ()

    def test_partial_root_failure_is_not_fatal(self, app_log, tmp_path):
        summary = run_scan([tmp_path / "missing", app_log])
        assert summary.files_scanned == 1
        assert len(summary.root_errors) == 1


class TestProperties:
    """Fold correctness, order preservation, idempotence."""

    def test_files_scanned_equals_candidates(self, mixed_dir):
        candidates = FileEnumerator().enumerate([mixed_dir]).paths
        summary = run_scan([mixed_dir], worker_count=4)
        assert summary.files_scanned == len(candidates)

    def test_errors_are_sum_of_ok_counts(self, mixed_dir):
        summary = run_scan([mixed_dir], worker_count=4)
        expected = sum(r.outcome.error_count for r in summary.results if r.ok)
        assert summary.errors_found == expected == sum(range(12))

    @pytest.mark.parametrize("workers", [1, 2, 3, 8, 32])
    def test_worker_count_does_not_change_counters(self, mixed_dir, workers):
        baseline = run_scan([mixed_dir], worker_count=1)
        assert _counters(run_scan([mixed_dir], worker_count=workers)) == _counters(baseline)

    def test_matches_sequential_fold(self, mixed_dir):
        summary = run_scan([mixed_dir], worker_count=4)
        sequential = ScanSummary.from_results(summary.results)
        assert _counters(summary) == _counters(sequential)

    def test_idempotent(self, mixed_dir):
        first = run_scan([mixed_dir], worker_count=3)
        second = run_scan([mixed_dir], worker_count=3)
        assert _counters(first) == _counters(second)
        assert [r.outcome for r in first.results] == [r.outcome for r in second.results]

    def test_results_follow_enumeration_order(self, mixed_dir, monkeypatch):
        paths = FileEnumerator().enumerate([mixed_dir]).paths

        def _slow_first(path, *args, **kwargs):
            # Earlier files finish last
            time.sleep(0.002 * (len(paths) - paths.index(path)))
            return scan_file(path, *args, **kwargs)

        monkeypatch.setattr(coordinator_module, "scan_file", _slow_first)
        summary = run_scan([mixed_dir], worker_count=4)
        assert [r.path for r in summary.results] == paths

    def test_elapsed_is_wall_clock(self, mixed_dir):
        summary = run_scan([mixed_dir], worker_count=4)
        assert summary.elapsed > 0.0
        assert summary.elapsed >= max(r.elapsed for r in summary.results)


class TestCoordinatorOptions:
    """Callbacks, cancellation, worker failures, configuration."""

    def test_callbacks(self, mixed_dir):
        totals, seen = [], []
        lock = threading.Lock()

        def _on_result(result):
            with lock:
                seen.append(result.path)

        summary = ScanCoordinator(workers=3).run(
            [mixed_dir], on_start=totals.append, on_result=_on_result
        )
        assert totals == [summary.files_scanned]
        assert sorted(seen) == sorted(r.path for r in summary.results)

    def test_preset_cancel_raises(self, mixed_dir):
        cancel = threading.Event()
        cancel.set()
        with pytest.raises(ScanCancelledError) as exc_info:
            ScanCoordinator(workers=2).run([mixed_dir], cancel=cancel)
        assert exc_info.value.completed == 0

    def test_cancel_mid_run(self, mixed_dir):
        cancel = threading.Event()
        with pytest.raises(ScanCancelledError):
            ScanCoordinator(workers=1).run(
                [mixed_dir], on_result=lambda r: cancel.set(), cancel=cancel
            )

    def test_unexpected_worker_error_becomes_read_error(self, mixed_dir, monkeypatch):
        def _explode(path, *args, **kwargs):
            if path.name == "svc03.log":
                raise RuntimeError("boom")
            return scan_file(path, *args, **kwargs)

        monkeypatch.setattr(coordinator_module, "scan_file", _explode)
        summary = run_scan([mixed_dir], worker_count=4)
        failed = [r for r in summary.results if isinstance(r.outcome, ReadError)]
        assert [r.path.name for r in failed] == ["svc03.log"]
        assert "boom" in failed[0].outcome.cause
        assert summary.files_scanned == 13

    def test_default_workers(self):
        assert ScanCoordinator().workers == default_worker_count() >= 1

    def test_from_config(self, tmp_path, write_log):
        write_log(tmp_path, "a.log", "timeout\nerror\n")
        write_log(tmp_path, "sub/b.log", "timeout\n")
        config = ScanConfig(workers=2, max_depth=1, error_patterns=["timeout"], warning_patterns=[])
        coordinator = ScanCoordinator.from_config(config)
        assert coordinator.workers == 2
        assert coordinator.size_limit == config.max_file_size_bytes
        summary = coordinator.run([tmp_path])
        assert summary.files_scanned == 2
        assert summary.errors_found == 2

    def test_custom_policy(self, app_log):
        policy = MatchPolicy(error_patterns=("disk",), warning_patterns=("memory",))
        summary = run_scan([app_log], policy=policy)
        assert (summary.errors_found, summary.warnings_found) == (1, 1)
