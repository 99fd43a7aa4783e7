"""Configuration loading and management for logscout.

Configuration sources are merged in priority order:
    1. Defaults (defined in ScanConfig)
    2. Global config (~/.logscout.toml)
    3. Project config (./logscout.toml)
    4. Explicit config file (--config)
    5. Environment variables (LOGSCOUT_* prefix)
    6. CLI overrides (passed as kwargs)

Example:
    >>> config = load_config(workers=4, max_depth=1)
    >>> config.workers
    4
    >>> config.max_file_size_bytes
    52428800
"""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Literal, Optional, get_type_hints

from .exceptions import ConfigurationError, InvalidConfigError
from .scanning.enumerator import DEFAULT_EXCLUDE_PATTERNS
from .scanning.matcher import DEFAULT_ERROR_PATTERNS, DEFAULT_WARNING_PATTERNS

Verbosity = Literal["quiet", "normal", "verbose"]

ENV_PREFIX = "LOGSCOUT_"


@dataclass(frozen=True)
class ScanConfig:
    """Configuration for a scan run.

    Attributes:
        Performance:
            workers: Number of parallel workers (None = CPU count; checked when
                the pool is built)

        Limits:
            max_file_size_mb: Files above this size are reported as too large
            max_matches_per_file: Matched lines kept per file for display

        Discovery:
            max_depth: Directory levels below each root (0 = root only)
            exclude_patterns: File name globs never scanned
            allow_hidden_files: Include dot-files

        Matching:
            error_patterns: Case-insensitive substrings classed as errors
            warning_patterns: Case-insensitive substrings classed as warnings

        Output control:
            verbosity: Logging verbosity level
    """

    workers: Optional[int] = None
    max_file_size_mb: float = 50.0
    max_matches_per_file: int = 100

    max_depth: int = 0
    exclude_patterns: list[str] = field(default_factory=lambda: list(DEFAULT_EXCLUDE_PATTERNS))
    allow_hidden_files: bool = True

    error_patterns: list[str] = field(default_factory=lambda: list(DEFAULT_ERROR_PATTERNS))
    warning_patterns: list[str] = field(default_factory=lambda: list(DEFAULT_WARNING_PATTERNS))

    verbosity: Verbosity = "normal"

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        if self.max_file_size_mb <= 0:
            raise InvalidConfigError("max_file_size_mb", self.max_file_size_mb, "must be positive")
        if self.max_matches_per_file < 0:
            raise InvalidConfigError(
                "max_matches_per_file", self.max_matches_per_file, "must be non-negative"
            )
        if self.max_depth < 0:
            raise InvalidConfigError("max_depth", self.max_depth, "must be non-negative")
        if not self.error_patterns and not self.warning_patterns:
            raise InvalidConfigError("error_patterns", "[]", "at least one pattern is required")
        if self.verbosity not in ("quiet", "normal", "verbose"):
            raise InvalidConfigError("verbosity", self.verbosity, "expected quiet/normal/verbose")

    @property
    def max_file_size_bytes(self) -> int:
        """Get max file size in bytes."""
        return int(self.max_file_size_mb * 1024 * 1024)


def default_log_directory() -> Path:
    """Platform log directory used by ``--system``."""
    if sys.platform.startswith("win"):
        root = os.environ.get("SystemRoot", r"C:\Windows")
        return Path(root) / "System32" / "LogFiles"
    return Path("/var/log")


def load_config(config_file: Optional[Path] = None, **overrides) -> ScanConfig:
    """Load configuration with auto-discovery and merging.

    Args:
        config_file: Optional explicit config file path
        **overrides: Direct overrides (typically from CLI flags); None values are ignored

    Returns:
        Validated ScanConfig instance

    Raises:
        ConfigurationError: If a config file or value is invalid
    """
    merged: dict[str, Any] = {}

    global_config = Path.home() / ".logscout.toml"
    if global_config.exists():
        merged.update(_load_toml_section(global_config))

    project_config = Path.cwd() / "logscout.toml"
    if project_config.exists():
        merged.update(_load_toml_section(project_config))

    if config_file is not None:
        if not config_file.exists():
            raise ConfigurationError(f"Config file not found: {config_file}")
        merged.update(_load_toml_section(config_file))

    merged.update(_load_env_vars())

    if overrides.pop("verbose", False):
        overrides["verbosity"] = "verbose"
    if overrides.pop("quiet", False):
        overrides["verbosity"] = "quiet"

    merged.update({k: v for k, v in overrides.items() if v is not None})

    try:
        return ScanConfig(**merged)
    except TypeError as e:
        # Unknown field in config
        raise ConfigurationError(f"Invalid configuration: {e}")


def _load_env_vars() -> dict[str, Any]:
    """Load configuration from LOGSCOUT_* environment variables.

    List fields take comma-separated values, e.g.
    ``LOGSCOUT_ERROR_PATTERNS=error,denied``.
    """
    type_hints = get_type_hints(ScanConfig)

    result: dict[str, Any] = {}

    for field_name in ScanConfig.__dataclass_fields__:
        env_key = f"{ENV_PREFIX}{field_name.upper()}"
        env_value = os.environ.get(env_key)

        if env_value is None:
            continue

        type_hint = type_hints.get(field_name)
        if type_hint is None:
            continue

        try:
            parsed = _parse_env_value(env_value, type_hint)
        except ValueError as e:
            raise InvalidConfigError(env_key, env_value, str(e))
        if parsed is not None:
            result[field_name] = parsed

    return result


def _parse_env_value(value: str, type_hint: Any) -> Any:
    """Parse environment variable string to the correct type.

    Raises:
        ValueError: If value can't be parsed to expected type
    """
    origin = getattr(type_hint, "__origin__", None)

    # Optional[X] is Union[X, None]
    args = getattr(type_hint, "__args__", ())
    if type(None) in args:
        non_none_types = [t for t in args if t is not type(None)]
        if non_none_types:
            type_hint = non_none_types[0]
            origin = getattr(type_hint, "__origin__", None)

    if origin is list:
        return [item.strip() for item in value.split(",") if item.strip()]

    if type_hint is bool:
        lower = value.lower()
        if lower in ("true", "1", "yes", "on"):
            return True
        elif lower in ("false", "0", "no", "off"):
            return False
        else:
            raise ValueError(f"expected true/false, got '{value}'")

    if type_hint is int:
        return int(value)

    if type_hint is float:
        return float(value)

    if type_hint is str or origin is Literal:
        return value

    return None


def _load_toml_section(path: Path) -> dict[str, Any]:
    """Load a TOML file and return its settings table.

    Settings may sit at top level or under a ``[logscout]`` table.
    """
    try:
        data = _load_toml_file(path)
    except ConfigurationError:
        raise
    except Exception as e:
        raise ConfigurationError(f"Invalid config file '{path}': {e}")
    section = data.get("logscout", data)
    if not isinstance(section, dict):
        raise ConfigurationError(f"Invalid config file '{path}': [logscout] must be a table")
    return dict(section)


def _load_toml_file(path: Path) -> dict:
    """Load TOML file and return parsed dict.

    Raises:
        ConfigurationError: If tomllib/tomli not available
        Exception: If TOML parsing fails
    """
    try:
        # Python 3.11+ has tomllib in stdlib
        import tomllib
    except ModuleNotFoundError:
        try:
            # Fallback to tomli for Python 3.9-3.10
            import tomli as tomllib  # type: ignore
        except ImportError:
            raise ConfigurationError(
                "TOML support requires Python 3.11+ or 'tomli' package. "
                "Install with: pip install tomli"
            )

    with open(path, "rb") as f:
        return tomllib.load(f)
