"""Tests for the logscout command line."""

import importlib
import json
import os

import pytest
from typer.testing import CliRunner

from logscout import __version__
from logscout.cli import app
from logscout.cli._common import ExitCode

scan_module = importlib.import_module("logscout.cli.scan")

runner = CliRunner()


@pytest.fixture(autouse=True)
def isolated_env(tmp_path, monkeypatch):
    """Keep user/project config files and LOGSCOUT_* variables out of the run."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("USERPROFILE", str(home))
    monkeypatch.chdir(home)
    for key in list(os.environ):
        if key.startswith("LOGSCOUT_"):
            monkeypatch.delenv(key)


def _invoke(*args):
    return runner.invoke(app, [str(a) for a in args])


class TestSuccessfulRuns:
    def test_rich_summary(self, app_log):
        result = _invoke(app_log, "--no-progress")
        assert result.exit_code == ExitCode.SUCCESS, result.output
        assert "Total files scanned: 1" in result.output
        assert "Total errors found: 1" in result.output

    def test_json_output(self, app_log):
        result = _invoke(app_log, "--format", "json", "--details")
        assert result.exit_code == ExitCode.SUCCESS, result.output
        data = json.loads(result.stdout)
        assert data["errors_found"] == 1
        assert data["warnings_found"] == 1
        assert data["results"][0]["line_count"] == 3

    def test_quiet_output(self, app_log, tmp_path, write_log):
        write_log(app_log, "clean.log", "all good\n")
        result = _invoke(app_log, "--format", "quiet")
        assert result.exit_code == ExitCode.SUCCESS
        assert result.stdout.strip() == str(app_log / "app.log")

    def test_details_lists_matches(self, app_log):
        result = _invoke(app_log, "--details", "--no-progress")
        assert "ERROR disk full" in result.output
        assert "WARN low memory" in result.output

    def test_custom_patterns_replace_defaults(self, app_log):
        result = _invoke(app_log, "-f", "json", "-e", "start", "--warning-pattern", "disk")
        data = json.loads(result.stdout)
        assert (data["errors_found"], data["warnings_found"]) == (1, 1)

    def test_skipped_files_are_not_failure(self, tmp_path, write_log):
        write_log(tmp_path, "big.log", "x" * 4096)
        result = _invoke(tmp_path, "--max-size", "0.001", "-f", "json")
        assert result.exit_code == ExitCode.SUCCESS
        data = json.loads(result.stdout)
        assert (data["files_skipped"], data["large_files"]) == (1, 1)

    def test_depth_option(self, tmp_path, write_log):
        write_log(tmp_path, "nested/deep.log", "error\n")
        shallow = json.loads(_invoke(tmp_path, "-f", "json").stdout)
        deep = json.loads(_invoke(tmp_path, "-f", "json", "--depth", "1").stdout)
        assert shallow["files_scanned"] == 0
        assert deep["errors_found"] == 1

    def test_defaults_to_current_directory(self, tmp_path, write_log, monkeypatch):
        write_log(tmp_path, "here.log", "error\n")
        monkeypatch.chdir(tmp_path)
        data = json.loads(_invoke("-f", "json").stdout)
        assert data["errors_found"] == 1

    def test_system_shortcut(self, tmp_path, write_log, monkeypatch):
        system_dir = tmp_path / "varlog"
        write_log(system_dir, "syslog", "kernel panic\n")
        monkeypatch.setattr(scan_module, "default_log_directory", lambda: system_dir)
        monkeypatch.setattr(scan_module, "running_as_root", lambda: True)
        data = json.loads(_invoke("--system", "-f", "json").stdout)
        assert data["errors_found"] == 1
        assert data["files_scanned"] == 1

    def test_config_file(self, app_log, tmp_path):
        config = tmp_path / "home" / "scan.toml"
        config.write_text('error_patterns = ["memory"]\nwarning_patterns = ["start"]\n')
        data = json.loads(_invoke(app_log, "-f", "json", "--config", config).stdout)
        assert (data["errors_found"], data["warnings_found"]) == (1, 1)


class TestExitCodes:
    def test_version(self):
        result = _invoke("--version")
        assert result.exit_code == ExitCode.SUCCESS
        assert __version__ in result.output

    def test_fail_on_errors(self, app_log):
        result = _invoke(app_log, "--fail-on-errors", "--no-progress")
        assert result.exit_code == ExitCode.ERRORS_FOUND
        assert "FAIL" in result.output

    def test_fail_on_errors_clean(self, tmp_path, write_log):
        write_log(tmp_path, "ok.log", "all fine\n")
        result = _invoke(tmp_path, "--fail-on-errors", "--no-progress")
        assert result.exit_code == ExitCode.SUCCESS

    def test_missing_root_is_fatal(self, tmp_path):
        result = _invoke(tmp_path / "nonexistent")
        assert result.exit_code == ExitCode.SCAN_FAILED
        assert "Scan failed" in result.output

    def test_zero_workers_is_fatal(self, app_log):
        result = _invoke(app_log, "--workers", "0")
        assert result.exit_code == ExitCode.SCAN_FAILED

    def test_verbose_and_quiet(self, app_log):
        result = _invoke(app_log, "--verbose", "--quiet")
        assert result.exit_code == ExitCode.CONFIG_ERROR

    def test_unknown_format(self, app_log):
        result = _invoke(app_log, "--format", "xml")
        assert result.exit_code == ExitCode.CONFIG_ERROR

    def test_malformed_config(self, app_log, tmp_path):
        config = tmp_path / "bad.toml"
        config.write_text("workers = = 1\n")
        result = _invoke(app_log, "--config", config)
        assert result.exit_code == ExitCode.CONFIG_ERROR
        assert "Configuration error" in result.output

    def test_internal_error(self, app_log, monkeypatch):
        def _boom(*args, **kwargs):
            raise RuntimeError("kaboom")

        monkeypatch.setattr(scan_module.ScanCoordinator, "run", _boom)
        result = _invoke(app_log, "--no-progress")
        assert result.exit_code == ExitCode.INTERNAL_ERROR
        assert "kaboom" in result.output
