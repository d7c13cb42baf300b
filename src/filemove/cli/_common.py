"""Shared CLI helpers."""

from pathlib import Path
from typing import List, Optional

from rich.console import Console

from ..config import MoveDetectionConfig, load_config
from ..hashing import scan_directory
from ..models import LineHashSequence
from ..snapshot import load_snapshot

console = Console()


def resolve_config(
    config: Optional[Path] = None,
    min_score: Optional[int] = None,
    min_length_ratio: Optional[float] = None,
    max_files: Optional[int] = None,
    workers: Optional[int] = None,
) -> MoveDetectionConfig:
    """Build config from CLI options; unset options fall through to files/env."""
    return load_config(
        config_file=config,
        min_score=min_score,
        min_length_ratio=min_length_ratio,
        max_files=max_files,
        workers=workers,
    )


def load_files(source: Path, settings: MoveDetectionConfig) -> List[LineHashSequence]:
    """Snapshot JSON file, or a directory hashed on the fly."""
    if source.is_dir():
        return scan_directory(source, settings.exclude_patterns)
    return load_snapshot(source)
