"""Data models for file move detection.

A snapshot is a collection of LineHashSequence values, one per file. The
engine compares the files removed from the previous snapshot against the
files added in the current one and reports accepted moves as a MoveMap.
"""

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Tuple

# Removed-file key -> added-file key, injective on both sides.
MoveMap = Dict[str, str]


@dataclass(frozen=True)
class LineHashSequence:
    """Ordered per-line content hashes for one file.

    ``line_hashes`` is None for the unhashable state (binary or unreadable
    content). Such a file is never matched.
    """

    key: str
    line_hashes: Optional[Tuple[str, ...]]

    @classmethod
    def of(cls, key: str, line_hashes: Iterable[str]) -> "LineHashSequence":
        return cls(key=key, line_hashes=tuple(line_hashes))

    @classmethod
    def unhashable(cls, key: str) -> "LineHashSequence":
        return cls(key=key, line_hashes=None)

    @property
    def is_unhashable(self) -> bool:
        return self.line_hashes is None

    @property
    def line_count(self) -> Optional[int]:
        if self.line_hashes is None:
            return None
        return len(self.line_hashes)


@dataclass(frozen=True)
class CandidatePair:
    """A (removed, added) pair that survived pruning, with its cached score."""

    removed: LineHashSequence
    added: LineHashSequence
    score: int

    @property
    def removed_key(self) -> str:
        return self.removed.key

    @property
    def added_key(self) -> str:
        return self.added.key


@dataclass(frozen=True)
class Match:
    """One accepted move."""

    removed_key: str
    added_key: str
    score: int


@dataclass
class MoveDetectionResult:
    """Outcome of one detection run.

    ``moves`` is what the persistence layer consumes; the rest is reporting.
    """

    moves: MoveMap = field(default_factory=dict)
    matches: List[Match] = field(default_factory=list)
    unmatched_removed: List[str] = field(default_factory=list)
    unmatched_added: List[str] = field(default_factory=list)
    candidate_count: int = 0
    skipped_reason: Optional[str] = None

    @property
    def skipped(self) -> bool:
        return self.skipped_reason is not None
