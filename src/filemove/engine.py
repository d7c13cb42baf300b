"""Move detection engine: pairs removed files with added files.

Pipeline:
  1. Split the two snapshots by key: keys present on both sides are
     unchanged; keys only in the previous snapshot are removed; keys only in
     the current snapshot are added.
  2. Generate and score candidate pairs (length-ratio pruning first).
  3. Match pairs into an injective move map.

The engine does no I/O and keeps no state between runs. The move map is
handed to whatever migrates per-file history from old keys to new ones.
"""

import logging
from typing import Dict, Iterable, Optional

from .candidates import generate_candidates
from .config import DEFAULT_CONFIG, MoveDetectionConfig
from .matcher import GreedyMatcher, Matcher, to_move_map
from .models import LineHashSequence, MoveDetectionResult, MoveMap

logger = logging.getLogger(__name__)


def find_moves(
    removed: Iterable[LineHashSequence],
    added: Iterable[LineHashSequence],
    min_score: int = DEFAULT_CONFIG.min_score,
    min_length_ratio: float = DEFAULT_CONFIG.min_length_ratio,
    matcher: Optional[Matcher] = None,
) -> MoveMap:
    """Match removed files to added files and return the move map.

    Both sides must have unique keys; that is not checked here.
    """
    pairs = generate_candidates(removed, added, min_length_ratio)
    return to_move_map((matcher or GreedyMatcher()).match(pairs, min_score))


def detect_moves(
    previous: Iterable[LineHashSequence],
    current: Iterable[LineHashSequence],
    config: Optional[MoveDetectionConfig] = None,
    matcher: Optional[Matcher] = None,
) -> MoveDetectionResult:
    """Detect moved files between two snapshots.

    Args:
        previous: Files of the previous analysis
        current: Files of the current analysis
        config: Thresholds and limits (defaults if None)
        matcher: Matching strategy (GreedyMatcher if None)

    Returns:
        MoveDetectionResult; ``moves`` is empty when nothing matched or when
        detection was skipped because of ``config.max_files``.
    """
    config = config or DEFAULT_CONFIG
    matcher = matcher or GreedyMatcher()

    previous_by_key: Dict[str, LineHashSequence] = {f.key: f for f in previous}
    current_by_key: Dict[str, LineHashSequence] = {f.key: f for f in current}

    removed_keys = sorted(previous_by_key.keys() - current_by_key.keys())
    added_keys = sorted(current_by_key.keys() - previous_by_key.keys())

    if not removed_keys or not added_keys:
        logger.debug(
            "No move possible (%d removed, %d added)", len(removed_keys), len(added_keys)
        )
        return MoveDetectionResult(unmatched_removed=removed_keys, unmatched_added=added_keys)

    file_count = len(removed_keys) + len(added_keys)
    if file_count > config.max_files:
        reason = f"{file_count} removed/added files exceed max_files={config.max_files}"
        logger.warning("Move detection skipped: %s", reason)
        return MoveDetectionResult(
            unmatched_removed=removed_keys,
            unmatched_added=added_keys,
            skipped_reason=reason,
        )

    pairs = generate_candidates(
        [previous_by_key[k] for k in removed_keys],
        [current_by_key[k] for k in added_keys],
        config.min_length_ratio,
        workers=config.workers,
        parallel_threshold=config.parallel_threshold,
    )
    matches = matcher.match(pairs, config.min_score)
    moves = to_move_map(matches)

    for m in matches:
        logger.debug("Move detected: %s -> %s (score %d)", m.removed_key, m.added_key, m.score)

    moved_to = set(moves.values())
    result = MoveDetectionResult(
        moves=moves,
        matches=matches,
        unmatched_removed=[k for k in removed_keys if k not in moves],
        unmatched_added=[k for k in added_keys if k not in moved_to],
        candidate_count=len(pairs),
    )
    logger.info(
        "Detected %d move(s) among %d removed and %d added file(s) (%d candidate pairs)",
        len(moves),
        len(removed_keys),
        len(added_keys),
        len(pairs),
    )
    return result


class MoveDetector:
    """Reusable detector bound to a config and a matching strategy."""

    def __init__(
        self,
        config: Optional[MoveDetectionConfig] = None,
        matcher: Optional[Matcher] = None,
    ):
        self.config = config or DEFAULT_CONFIG
        self.matcher = matcher or GreedyMatcher()

    def detect(
        self,
        previous: Iterable[LineHashSequence],
        current: Iterable[LineHashSequence],
    ) -> MoveDetectionResult:
        return detect_moves(previous, current, config=self.config, matcher=self.matcher)
