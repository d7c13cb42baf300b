"""
filemove - File Move Detection

Matches files removed since the previous analysis to files added in the
current one by comparing per-line content hashes, so accumulated per-file
history can follow a rename or move.
"""

__version__ = "0.1.0"

from .config import MoveDetectionConfig, load_config
from .engine import MoveDetector, detect_moves, find_moves
from .matcher import GreedyMatcher, Matcher
from .models import CandidatePair, LineHashSequence, Match, MoveDetectionResult, MoveMap
from .similarity import score

__all__ = [
    "detect_moves",  # Main entry point
    "find_moves",
    "MoveDetector",
    "MoveDetectionConfig",
    "load_config",
    "LineHashSequence",
    "CandidatePair",
    "Match",
    "MoveDetectionResult",
    "MoveMap",
    "Matcher",
    "GreedyMatcher",
    "score",
]
