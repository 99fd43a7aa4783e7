"""Single-file scanner.

``scan_file`` never raises for a file that enumeration found: every failure
is encoded in the returned ``ScanResult``.
"""

from __future__ import annotations

import time
from pathlib import Path

from ..logging_config import get_logger
from .matcher import MatchPolicy
from .models import LineMatch, Ok, ReadError, ScanResult, Severity, Skipped, TooLarge

logger = get_logger(__name__)

DEFAULT_SIZE_LIMIT = 50 * 1024 * 1024
DEFAULT_MAX_MATCHES = 100

# Files above this are still scanned when within the limit, but logged.
LARGE_FILE_NOTICE = 100_000_000

SNIFF_BYTES = 8192
# Share of undecodable characters in the sniffed head that marks a file as binary
MAX_INVALID_RATIO = 0.30


def looks_binary(head: bytes) -> bool:
    """Heuristic binary check on the first block of a file."""
    if not head:
        return False
    if b"\x00" in head:
        return True
    text = head.decode("utf-8", errors="replace")
    invalid = text.count("\ufffd")
    if len(head) == SNIFF_BYTES and invalid:
        # a multibyte sequence cut at the block boundary costs one char
        invalid -= 1
    return invalid / len(text) > MAX_INVALID_RATIO


def scan_file(
    path: Path,
    policy: MatchPolicy,
    size_limit: int = DEFAULT_SIZE_LIMIT,
    max_matches: int = DEFAULT_MAX_MATCHES,
) -> ScanResult:
    """
    Scan one file and classify every line.

    Args:
        path: File to scan
        policy: Line classification policy
        size_limit: Largest file size in bytes that is read (inclusive)
        max_matches: Matched lines kept for display; counters are not capped

    Returns:
        ScanResult with an Ok, Skipped, TooLarge or ReadError outcome
    """
    start = time.perf_counter()
    outcome = _scan(path, policy, size_limit, max_matches)
    elapsed = time.perf_counter() - start
    logger.debug(f"{path}: {outcome.kind} in {elapsed * 1000:.1f} ms")
    return ScanResult(path=path, outcome=outcome, elapsed=elapsed)


def _scan(path: Path, policy: MatchPolicy, size_limit: int, max_matches: int):
    try:
        size = path.stat().st_size
    except OSError as e:
        return ReadError(cause=_describe(e))

    if size > size_limit:
        return TooLarge(size=size)
    if size > LARGE_FILE_NOTICE:
        logger.info(f"Large file detected: {path} ({size} bytes), processing may take time")

    errors = warnings = lines = 0
    matches: list[LineMatch] = []
    bytes_read = 0

    try:
        with open(path, "rb") as handle:
            if looks_binary(handle.read(SNIFF_BYTES)):
                return Skipped(reason="binary")
            handle.seek(0)

            for raw in handle:
                bytes_read += len(raw)
                if bytes_read > size_limit:
                    # File grew past the limit while we were reading it.
                    return TooLarge(size=bytes_read)
                if b"\x00" in raw:
                    return Skipped(reason="binary")

                lines += 1
                line = raw.decode("utf-8", errors="replace").rstrip("\r\n")
                severity = policy.classify(line)
                if severity is None:
                    continue
                if severity is Severity.ERROR:
                    errors += 1
                else:
                    warnings += 1
                if len(matches) < max_matches:
                    matches.append(LineMatch(line_number=lines, severity=severity, text=line))
    except OSError as e:
        return ReadError(cause=_describe(e))

    return Ok(
        error_count=errors,
        warning_count=warnings,
        line_count=lines,
        matches=tuple(matches),
    )


def _describe(error: OSError) -> str:
    if isinstance(error, PermissionError):
        return "permission denied"
    if isinstance(error, FileNotFoundError):
        return "file vanished before it could be read"
    return error.strerror or str(error)
