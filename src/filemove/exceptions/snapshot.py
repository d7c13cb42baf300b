"""Snapshot exceptions: unreadable or malformed line-hash snapshots."""

from pathlib import Path

from .base import FileMoveError


class SnapshotError(FileMoveError):
    """Base class for snapshot loading errors."""

    pass


class SnapshotFormatError(SnapshotError):
    """Raised when a snapshot file cannot be parsed into line-hash sequences."""

    def __init__(self, path: Path, reason: str):
        super().__init__(
            f"Invalid snapshot: {path}",
            details={"path": str(path), "reason": reason},
        )
        self.path = path
        self.reason = reason
