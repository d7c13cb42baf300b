"""Line-hash similarity between two files.

Score on the integer scale [0, 100]:

    score = floor(100 * (common / shorter) * sqrt(shorter / longer))

Where ``common`` is the multiset intersection of the two hash sequences (a
hash seen m times in A and n times in B contributes min(m, n)), and
``shorter``/``longer`` are the two content line counts.

Lines hashed to BLANK_LINE_HASH carry no content: they are left out of both
``common`` and the line counts, so two files sharing only blank or brace
lines do not look alike, while an unchanged file still scores 100.

The first factor is containment of the shorter file, which tolerates line
reordering, insertions and deletions. The second caps the achievable score
when sizes differ: a 10-line file fully contained in a 10,000-line file
scores 3, not 100.

The product simplifies to 100 * common / sqrt(len_a * len_b) and is
evaluated with an integer square root, so scores never drift across a
threshold through float rounding.
"""

import math
from collections import Counter
from typing import Sequence

from .models import LineHashSequence

MIN_SCORE = 0
MAX_SCORE = 100

# Hash of a line without content (blank, or punctuation only)
BLANK_LINE_HASH = ""


def _content_counts(line_hashes: Sequence[str]) -> Counter:
    counts = Counter(line_hashes)
    counts.pop(BLANK_LINE_HASH, None)
    return counts


def _intersection(counts_a: Counter, counts_b: Counter) -> int:
    if len(counts_a) > len(counts_b):
        counts_a, counts_b = counts_b, counts_a
    common = 0
    for line_hash, count in counts_a.items():
        other = counts_b.get(line_hash)
        if other:
            common += min(count, other)
    return common


def common_line_count(hashes_a: Sequence[str], hashes_b: Sequence[str]) -> int:
    """Size of the multiset intersection of two hash sequences, blank lines excluded."""
    return _intersection(_content_counts(hashes_a), _content_counts(hashes_b))


def score(file_a: LineHashSequence, file_b: LineHashSequence) -> int:
    """Symmetric similarity score between two files.

    Unhashable files, and files without content lines, are not comparable
    and score MIN_SCORE.
    """
    if file_a.line_hashes is None or file_b.line_hashes is None:
        return MIN_SCORE

    counts_a = _content_counts(file_a.line_hashes)
    counts_b = _content_counts(file_b.line_hashes)
    len_a = sum(counts_a.values())
    len_b = sum(counts_b.values())
    if len_a == 0 or len_b == 0:
        return MIN_SCORE

    common = _intersection(counts_a, counts_b)
    if common == 0:
        return MIN_SCORE

    # floor(sqrt(floor(x))) == floor(sqrt(x)) for x >= 0
    value = math.isqrt(MAX_SCORE * MAX_SCORE * common * common // (len_a * len_b))
    return min(MAX_SCORE, value)
