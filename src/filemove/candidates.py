"""Candidate pair generation for move detection.

Scoring every (removed, added) pair is quadratic in the number of files, and
most pairs are obviously unrelated. Before the scorer runs, pairs are pruned
on line count alone: a file whose shorter length is below a fixed proportion
of the longer one cannot plausibly be the same file after an edit.

The length filter is evaluated with numpy, one removed file against the
line counts of all added files at a time. Surviving pairs are scored either
sequentially or on a thread pool; results are always returned in generation
order (removed files by key, then added files by key).
"""

import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Callable, Iterable, List, Optional, Tuple

import numpy as np

from .models import CandidatePair, LineHashSequence
from .similarity import score

logger = logging.getLogger(__name__)

Scorer = Callable[[LineHashSequence, LineHashSequence], int]

# Pair count below which thread overhead is not worth it
PARALLEL_THRESHOLD = 2000


def length_ratio_compatible(len_a: int, len_b: int, min_ratio: float) -> bool:
    """True if the shorter length is at least ``min_ratio`` of the longer one.

    Zero-length files are never compatible with anything.
    """
    if len_a <= 0 or len_b <= 0:
        return False
    return min(len_a, len_b) >= min_ratio * max(len_a, len_b)


def _compatible_mask(length: int, others: np.ndarray, min_ratio: float) -> np.ndarray:
    """Vectorised ``length_ratio_compatible`` of one length against many."""
    shorter = np.minimum(others, length)
    longer = np.maximum(others, length)
    return (shorter > 0) & (shorter >= min_ratio * longer)


def _comparable(files: Iterable[LineHashSequence]) -> List[LineHashSequence]:
    """Files that can take part in a match, sorted by key."""
    return sorted(
        (f for f in files if f.line_hashes is not None and len(f.line_hashes) > 0),
        key=lambda f: f.key,
    )


def _score_pairs(
    pairs: List[Tuple[LineHashSequence, LineHashSequence]],
    scorer: Scorer,
    workers: Optional[int],
    parallel_threshold: int,
) -> List[int]:
    if workers is None or workers <= 1 or len(pairs) < parallel_threshold:
        return [scorer(removed, added) for removed, added in pairs]

    logger.debug("Scoring %d candidate pairs on %d threads", len(pairs), workers)
    scores: List[int] = [0] * len(pairs)
    with ThreadPoolExecutor(max_workers=workers) as executor:
        futures = {
            executor.submit(scorer, removed, added): index
            for index, (removed, added) in enumerate(pairs)
        }
        for future in as_completed(futures):
            scores[futures[future]] = future.result()
    return scores


def generate_candidates(
    removed: Iterable[LineHashSequence],
    added: Iterable[LineHashSequence],
    min_length_ratio: float,
    scorer: Scorer = score,
    workers: Optional[int] = None,
    parallel_threshold: int = PARALLEL_THRESHOLD,
) -> List[CandidatePair]:
    """Produce the scored (removed, added) pairs worth matching.

    Args:
        removed: Files present only in the previous snapshot
        added: Files present only in the current snapshot
        min_length_ratio: Pairs with shorter/longer line count below this
            are pruned without being scored
        scorer: Pairwise similarity function
        workers: Scoring threads; None or 1 scores sequentially
        parallel_threshold: Minimum pair count before threads are used

    Returns:
        CandidatePair list in generation order, each with its score set.
    """
    removed_files = _comparable(removed)
    added_files = _comparable(added)
    if not removed_files or not added_files:
        return []

    added_lengths = np.fromiter(
        (len(f.line_hashes) for f in added_files), dtype=np.int64, count=len(added_files)
    )

    to_score: List[Tuple[LineHashSequence, LineHashSequence]] = []
    for removed_file in removed_files:
        mask = _compatible_mask(len(removed_file.line_hashes), added_lengths, min_length_ratio)
        for index in np.flatnonzero(mask):
            to_score.append((removed_file, added_files[index]))

    total = len(removed_files) * len(added_files)
    logger.debug(
        "Length-ratio pruning kept %d of %d pairs (min ratio %.2f)",
        len(to_score),
        total,
        min_length_ratio,
    )

    scores = _score_pairs(to_score, scorer, workers, parallel_threshold)
    return [
        CandidatePair(removed=removed_file, added=added_file, score=pair_score)
        for (removed_file, added_file), pair_score in zip(to_score, scores)
    ]
