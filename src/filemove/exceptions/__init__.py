"""Exception hierarchy for filemove."""

from .base import FileMoveError
from .config import ConfigurationError, InvalidConfigError
from .snapshot import SnapshotError, SnapshotFormatError

__all__ = [
    "FileMoveError",
    "ConfigurationError",
    "InvalidConfigError",
    "SnapshotError",
    "SnapshotFormatError",
]
