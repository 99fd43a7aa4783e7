"""Shared test fixtures for logscout tests."""

import os
from pathlib import Path

import pytest


@pytest.fixture
def write_log():
    """Write a text or bytes file, creating parent directories."""

    def _write(directory: Path, name: str, content="") -> Path:
        path = directory / name
        path.parent.mkdir(parents=True, exist_ok=True)
        if isinstance(content, bytes):
            path.write_bytes(content)
        else:
            path.write_text(content, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def unreadable():
    """Factory for files with all permission bits cleared; restored on teardown.

    Skips the test where permission bits are not enforced (root, non-POSIX).
    """
    if not hasattr(os, "geteuid") or os.geteuid() == 0:
        pytest.skip("permission bits are not enforced for this user")
    created = []

    def _make(path: Path) -> Path:
        os.chmod(path, 0)
        created.append(path)
        return path

    yield _make

    for path in created:
        if path.exists():
            os.chmod(path, 0o755 if path.is_dir() else 0o644)


@pytest.fixture
def app_log(tmp_path, write_log):
    """Directory with a single three-line app.log."""
    write_log(tmp_path, "app.log", "INFO start\nERROR disk full\nWARN low memory\n")
    return tmp_path
