"""Line classification policy."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Iterable, Optional

from ..exceptions import InvalidConfigError
from .models import Severity

if TYPE_CHECKING:
    from ..config import ScanConfig

DEFAULT_ERROR_PATTERNS = ("error", "fail", "exception", "fatal", "critical", "panic")
DEFAULT_WARNING_PATTERNS = ("warn",)


def _normalize(patterns: Iterable[str]) -> tuple[str, ...]:
    return tuple(p.lower() for p in patterns if p)


@dataclass(frozen=True)
class MatchPolicy:
    """Case-insensitive substring patterns split by severity.

    The policy holds no mutable state, so one instance is shared by every
    worker thread.
    """

    error_patterns: tuple[str, ...] = DEFAULT_ERROR_PATTERNS
    warning_patterns: tuple[str, ...] = DEFAULT_WARNING_PATTERNS

    def __post_init__(self) -> None:
        errors = _normalize(self.error_patterns)
        warnings = _normalize(self.warning_patterns)
        if not errors and not warnings:
            raise InvalidConfigError("patterns", "[]", "at least one pattern is required")
        object.__setattr__(self, "error_patterns", errors)
        object.__setattr__(self, "warning_patterns", warnings)

    @classmethod
    def from_config(cls, config: ScanConfig) -> MatchPolicy:
        return cls(
            error_patterns=tuple(config.error_patterns),
            warning_patterns=tuple(config.warning_patterns),
        )

    def classify(self, line: str) -> Optional[Severity]:
        """Return the highest severity matched by ``line``, or None."""
        lowered = line.lower()
        # Errors are checked first: a line matching both kinds is an error.
        for pattern in self.error_patterns:
            if pattern in lowered:
                return Severity.ERROR
        for pattern in self.warning_patterns:
            if pattern in lowered:
                return Severity.WARNING
        return None
