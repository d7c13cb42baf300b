"""Line hashing: turns files into LineHashSequence values.

Each line is hashed with all whitespace removed, so re-indentation and
trailing-space edits do not break a match. Lines without content (blank, or
punctuation only such as ``}``) hash to BLANK_LINE_HASH, which the scorer
ignores. Files that cannot be decoded as text become unhashable sequences.

Lines end at ``\\n``, ``\\r\\n`` or ``\\r`` only; form feeds and other
Unicode separators stay inside their line, so there is exactly one hash per
line of the file.
"""

import hashlib
import logging
import re
from pathlib import Path, PurePosixPath
from typing import List, Optional, Sequence, Tuple

from .models import LineHashSequence
from .similarity import BLANK_LINE_HASH

logger = logging.getLogger(__name__)

_WHITESPACE = re.compile(r"\s+")
_CONTENT = re.compile(r"\w")
_LINE_BREAK = re.compile(r"\r\n|\r|\n")


def hash_line(line: str) -> str:
    """md5 hex digest of the line without whitespace; BLANK_LINE_HASH if no content."""
    if not _CONTENT.search(line):
        return BLANK_LINE_HASH
    stripped = _WHITESPACE.sub("", line)
    return hashlib.md5(stripped.encode("utf-8")).hexdigest()


def split_lines(text: str) -> List[str]:
    """Split on line breaks; a trailing break does not start a new line."""
    if not text:
        return []
    lines = _LINE_BREAK.split(text)
    if lines[-1] == "":
        lines.pop()
    return lines


def hash_text(text: str) -> Tuple[str, ...]:
    return tuple(hash_line(line) for line in split_lines(text))


def hash_file(path: Path, key: Optional[str] = None) -> LineHashSequence:
    """Hash one file; binary or unreadable content yields the unhashable state."""
    key = key if key is not None else path.as_posix()
    try:
        with open(path, "r", encoding="utf-8", newline="") as f:
            text = f.read()
    except UnicodeDecodeError:
        logger.debug("Not text, unhashable: %s", path)
        return LineHashSequence.unhashable(key)
    except OSError as e:
        logger.debug("Cannot read %s, unhashable: %s", path, e)
        return LineHashSequence.unhashable(key)
    return LineHashSequence(key=key, line_hashes=hash_text(text))


def _is_excluded(relative: PurePosixPath, exclude_patterns: Sequence[str]) -> bool:
    """True if the path or any of its parent directories matches a pattern."""
    parts = relative.parts
    for depth in range(1, len(parts) + 1):
        prefix = PurePosixPath(*parts[:depth])
        for pattern in exclude_patterns:
            if prefix.match(pattern):
                return True
    return False


def scan_directory(
    root: Path, exclude_patterns: Sequence[str] = ()
) -> List[LineHashSequence]:
    """Hash every regular file under ``root``.

    Keys are POSIX relative paths; the result is sorted by key. Hidden files
    and directories are skipped.
    """
    root = Path(root)
    files: List[LineHashSequence] = []
    skipped = 0

    for filepath in root.rglob("*"):
        if not filepath.is_file():
            continue

        relative = PurePosixPath(filepath.relative_to(root).as_posix())
        if any(part.startswith(".") for part in relative.parts):
            skipped += 1
            continue
        if _is_excluded(relative, exclude_patterns):
            skipped += 1
            logger.debug("Skipped (pattern): %s", relative)
            continue

        files.append(hash_file(filepath, key=str(relative)))

    files.sort(key=lambda f: f.key)
    logger.info("Hashed %d file(s) under %s, %d skipped", len(files), root, skipped)
    return files
