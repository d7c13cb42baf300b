"""Configuration loading and management for filemove.

Move detection is driven by two policy thresholds (minimum acceptance score
and length-ratio pruning) plus a few performance knobs. Configuration
sources are merged in priority order:
    1. Defaults (defined in MoveDetectionConfig)
    2. Global config (~/.filemove.toml)
    3. Project config (./filemove.toml)
    4. Explicit config file
    5. Environment variables (FILEMOVE_* prefix)
    6. Keyword overrides (typically CLI flags)

Example:
    >>> config = load_config(min_score=90)
    >>> config.min_score
    90
    >>> config.min_length_ratio
    0.5
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional, get_type_hints

from .exceptions import FileMoveError, InvalidConfigError


@dataclass(frozen=True)
class MoveDetectionConfig:
    """Policy thresholds and tuning parameters for move detection.

    Scores live on the 0..100 scale produced by ``similarity.score``.

    Users can tune the two policy thresholds based on false positive/negative
    tradeoffs:
    - Lower min_score → more moves accepted (higher recall, lower precision)
    - Lower min_length_ratio → fewer pairs pruned, slower scoring

    Attributes:
        Matching policy:
            min_score: Pairs scoring below this are never accepted as moves
            min_length_ratio: Pairs whose shorter/longer line count falls
                below this are pruned before scoring

        Caller-side limits:
            max_files: Skip detection when removed + added exceeds this

        Performance tuning:
            workers: Scoring threads (None or 1 = sequential)
            parallel_threshold: Minimum candidate pairs before threads are used

        Scanning:
            exclude_patterns: Glob patterns skipped when hashing a directory
    """

    # === Matching policy ===
    min_score: int = 75
    min_length_ratio: float = 0.5

    # === Caller-side limits ===
    max_files: int = 20000

    # === Performance ===
    workers: Optional[int] = None
    parallel_threshold: int = 2000

    # === Scanning ===
    exclude_patterns: list[str] = field(
        default_factory=lambda: [
            ".git/*",
            "node_modules/*",
            "venv/*",
            ".venv/*",
            "__pycache__/*",
            "*.pyc",
            "build/*",
            "dist/*",
        ]
    )

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        # Types first: TOML and overrides can carry strings or bools
        for name in ("min_score", "max_files", "parallel_threshold"):
            if not _is_int(getattr(self, name)):
                raise ValueError(f"{name} must be an integer")
        if self.workers is not None and not _is_int(self.workers):
            raise ValueError("workers must be an integer")
        if not (_is_int(self.min_length_ratio) or isinstance(self.min_length_ratio, float)):
            raise ValueError("min_length_ratio must be a number")
        if not isinstance(self.exclude_patterns, list) or not all(
            isinstance(p, str) for p in self.exclude_patterns
        ):
            raise ValueError("exclude_patterns must be a list of strings")

        if not 0 <= self.min_score <= 100:
            raise ValueError("min_score must be between 0 and 100")
        if not 0.0 < self.min_length_ratio <= 1.0:
            raise ValueError("min_length_ratio must be in (0.0, 1.0]")

        if self.max_files < 1:
            raise ValueError("max_files must be at least 1")

        if self.workers is not None and self.workers < 1:
            raise ValueError("workers must be at least 1")
        if self.parallel_threshold < 1:
            raise ValueError("parallel_threshold must be at least 1")


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


# Default configuration (singleton)
DEFAULT_CONFIG = MoveDetectionConfig()


def load_config(config_file: Optional[Path] = None, **overrides) -> MoveDetectionConfig:
    """Load configuration with auto-discovery and merging.

    Args:
        config_file: Optional explicit config file path
        **overrides: Direct overrides; ``None`` values are ignored so CLI
            options that were not given fall through to lower layers

    Returns:
        Validated MoveDetectionConfig instance

    Raises:
        FileMoveError: If a config file is missing or unparsable, or names
            an unknown setting
        InvalidConfigError: If a value has the wrong type or is out of range
    """
    sources = [
        ("global config", Path.home() / ".filemove.toml"),
        ("project config", Path.cwd() / "filemove.toml"),
    ]
    if config_file is not None:
        if not config_file.exists():
            raise FileMoveError(f"Config file not found: {config_file}")
        sources.append(("config file", config_file))

    merged: dict = {}
    for label, path in sources:
        if path.exists():
            merged.update(_load_toml_file(label, path))

    merged.update(_load_env_vars())
    merged.update({k: v for k, v in overrides.items() if v is not None})

    unknown = sorted(set(merged) - set(MoveDetectionConfig.__dataclass_fields__))
    if unknown:
        raise FileMoveError(f"Invalid configuration: unknown setting(s) {', '.join(unknown)}")

    try:
        return MoveDetectionConfig(**merged)
    except ValueError as e:
        key = str(e).split(" ", 1)[0]
        raise InvalidConfigError(key, merged.get(key), str(e))


def _load_env_vars() -> dict[str, Any]:
    """Load numeric settings from FILEMOVE_* environment variables.

    Supported environment variables:
        FILEMOVE_MIN_SCORE: int
        FILEMOVE_MIN_LENGTH_RATIO: float
        FILEMOVE_MAX_FILES: int
        FILEMOVE_WORKERS: int
        FILEMOVE_PARALLEL_THRESHOLD: int

    ``exclude_patterns`` is a list and can only be set from a config file.
    """
    type_hints = get_type_hints(MoveDetectionConfig)

    result: dict[str, Any] = {}

    for field_name in MoveDetectionConfig.__dataclass_fields__:
        env_key = f"FILEMOVE_{field_name.upper()}"
        env_value = os.environ.get(env_key)
        if env_value is None:
            continue

        parse = _env_parser(type_hints[field_name])
        if parse is None:
            continue
        try:
            result[field_name] = parse(env_value)
        except ValueError as e:
            raise InvalidConfigError(field_name, env_value, f"{env_key}: {e}")

    return result


def _env_parser(type_hint: Any) -> Optional[type]:
    """int or float for numeric fields (Optional[int] included), else None."""
    args = getattr(type_hint, "__args__", ())
    if type(None) in args:
        type_hint = next(t for t in args if t is not type(None))
    if type_hint in (int, float):
        return type_hint
    return None


def _load_toml_file(label: str, path: Path) -> dict:
    """Load a TOML config file.

    A ``[filemove]`` table is unwrapped if present, so the settings can live
    in a shared config file.
    """
    try:
        # Python 3.11+ has tomllib in stdlib
        import tomllib
    except ModuleNotFoundError:
        import tomli as tomllib  # type: ignore

    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        raise FileMoveError(f"Invalid {label} '{path}': {e}")

    section = data.get("filemove")
    if isinstance(section, dict):
        return section
    return data
