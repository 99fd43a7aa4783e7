"""Candidate file discovery.

Roots are walked in the order given; entries inside a directory are visited
in lexicographic name order, so the same tree always yields the same list.
Only one directory level is read by default.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from fnmatch import fnmatch
from pathlib import Path
from typing import TYPE_CHECKING, Iterable, Optional, Sequence

from ..logging_config import get_logger
from .models import RootError

if TYPE_CHECKING:
    from ..config import ScanConfig

logger = get_logger(__name__)

DEFAULT_EXCLUDE_PATTERNS = ("*.gz", "*.bz2", "*.xz", "*.zst", "*.zip")


@dataclass
class Enumeration:
    """Ordered candidate paths plus the roots that could not be listed."""

    paths: list[Path] = field(default_factory=list)
    root_errors: list[RootError] = field(default_factory=list)
    resolved_roots: int = 0


class FileEnumerator:
    """Produces the ordered list of candidate files for a set of roots."""

    def __init__(
        self,
        max_depth: int = 0,
        exclude_patterns: Iterable[str] = DEFAULT_EXCLUDE_PATTERNS,
        allow_hidden: bool = True,
    ):
        """
        Args:
            max_depth: Directory levels to descend below each root (0 = root only)
            exclude_patterns: Glob patterns matched against file names
            allow_hidden: Include files whose name starts with a dot
        """
        if max_depth < 0:
            raise ValueError("max_depth must be non-negative")
        self.max_depth = max_depth
        self.exclude_patterns = tuple(exclude_patterns)
        self.allow_hidden = allow_hidden

    @classmethod
    def from_config(cls, config: ScanConfig) -> FileEnumerator:
        return cls(
            max_depth=config.max_depth,
            exclude_patterns=config.exclude_patterns,
            allow_hidden=config.allow_hidden_files,
        )

    def enumerate(self, roots: Sequence[Path]) -> Enumeration:
        result = Enumeration()
        seen: set[Path] = set()

        for root in roots:
            root = Path(root)
            if root.is_file():
                result.resolved_roots += 1
                self._add(root, result, seen)
                continue
            entries = self._list_dir(root, result)
            if entries is None:
                continue
            result.resolved_roots += 1
            self._walk(entries, 0, result, seen)

        logger.debug(
            f"Enumerated {len(result.paths)} candidate files from {len(roots)} roots "
            f"({len(result.root_errors)} unreadable)"
        )
        return result

    # ── Internals ──────────────────────────────────────────────

    def _list_dir(self, directory: Path, result: Enumeration) -> Optional[list[os.DirEntry]]:
        try:
            with os.scandir(directory) as it:
                return sorted(it, key=lambda e: e.name)
        except FileNotFoundError:
            reason = "does not exist"
        except NotADirectoryError:
            reason = "not a directory"
        except PermissionError:
            reason = "permission denied"
        except OSError as e:
            reason = e.strerror or str(e)
        logger.warning(f"Cannot list {directory}: {reason}")
        result.root_errors.append(RootError(path=directory, reason=reason))
        return None

    def _walk(
        self, entries: list[os.DirEntry], depth: int, result: Enumeration, seen: set[Path]
    ) -> None:
        subdirs: list[os.DirEntry] = []
        for entry in entries:
            try:
                if entry.is_file():
                    self._add(Path(entry.path), result, seen)
                elif depth < self.max_depth and entry.is_dir(follow_symlinks=False):
                    subdirs.append(entry)
            except OSError as e:
                logger.debug(f"Skipping {entry.path}: {e}")

        for subdir in subdirs:
            children = self._list_dir(Path(subdir.path), result)
            if children is not None:
                self._walk(children, depth + 1, result, seen)

    def _add(self, path: Path, result: Enumeration, seen: set[Path]) -> None:
        name = path.name
        if not self.allow_hidden and name.startswith("."):
            return
        if any(fnmatch(name, pattern) for pattern in self.exclude_patterns):
            logger.debug(f"Excluded (pattern): {path}")
            return
        key = path.resolve()
        if key in seen:
            return
        seen.add(key)
        result.paths.append(path)
