"""Global assignment of removed files to added files.

The matcher turns scored candidate pairs into an injective move map. The
default ``GreedyMatcher`` approximates maximum-weight bipartite matching:

  1. Drop pairs scoring below the acceptance threshold, and pairs at
     MIN_SCORE (no shared lines) whatever the threshold.
  2. Sort by score descending, then removed key, then added key.
  3. Walk once, accepting a pair only if neither file is already taken.

The result is injective by construction and independent of the order the
pairs were generated in. It is not always the global optimum; an exact
matcher can be substituted through the same ``match`` contract.
"""

import logging
from abc import ABC, abstractmethod
from typing import Iterable, List, Set

from .models import CandidatePair, Match, MoveMap
from .similarity import MIN_SCORE

logger = logging.getLogger(__name__)


class Matcher(ABC):
    """Contract for matching strategies.

    Implementations must return an injective list of matches, every one
    scoring at least ``min_score`` and above MIN_SCORE, deterministically
    for a given input set.
    """

    @abstractmethod
    def match(self, pairs: Iterable[CandidatePair], min_score: int) -> List[Match]:
        """Assign removed files to added files from scored pairs."""
        pass


class GreedyMatcher(Matcher):
    """Highest score first, ties broken by (removed key, added key)."""

    def match(self, pairs: Iterable[CandidatePair], min_score: int) -> List[Match]:
        floor = max(min_score, MIN_SCORE + 1)
        eligible = [p for p in pairs if p.score >= floor]
        eligible.sort(key=lambda p: (-p.score, p.removed_key, p.added_key))

        consumed_removed: Set[str] = set()
        consumed_added: Set[str] = set()
        matches: List[Match] = []

        for pair in eligible:
            if pair.removed_key in consumed_removed or pair.added_key in consumed_added:
                continue
            consumed_removed.add(pair.removed_key)
            consumed_added.add(pair.added_key)
            matches.append(Match(pair.removed_key, pair.added_key, pair.score))

        logger.debug(
            "Greedy matching accepted %d of %d eligible pairs", len(matches), len(eligible)
        )
        return matches


def to_move_map(matches: Iterable[Match]) -> MoveMap:
    """Collapse matches into the removed-key -> added-key map."""
    return {m.removed_key: m.added_key for m in matches}
