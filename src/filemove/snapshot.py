"""JSON snapshots of line hashes.

Format::

    {"files": {"src/a.py": ["<hash>", "<hash>", ...], "logo.png": null}}

``null`` marks an unhashable file.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Iterable, List

from .exceptions import SnapshotFormatError
from .models import LineHashSequence

logger = logging.getLogger(__name__)


def snapshot_to_dict(files: Iterable[LineHashSequence]) -> Dict[str, Any]:
    return {
        "files": {
            f.key: None if f.line_hashes is None else list(f.line_hashes)
            for f in sorted(files, key=lambda f: f.key)
        }
    }


def snapshot_from_dict(data: Any, source: Path = Path("<memory>")) -> List[LineHashSequence]:
    """Build line-hash sequences from a parsed snapshot document.

    Raises:
        SnapshotFormatError: If the document does not follow the format.
    """
    if not isinstance(data, dict) or not isinstance(data.get("files"), dict):
        raise SnapshotFormatError(source, "expected an object with a 'files' mapping")

    files: List[LineHashSequence] = []
    for key, hashes in data["files"].items():
        if hashes is None:
            files.append(LineHashSequence.unhashable(key))
        elif isinstance(hashes, list) and all(isinstance(h, str) for h in hashes):
            files.append(LineHashSequence.of(key, hashes))
        else:
            raise SnapshotFormatError(source, f"line hashes of '{key}' must be a list of strings or null")
    return files


def load_snapshot(path: Path) -> List[LineHashSequence]:
    """Read a snapshot file.

    Raises:
        SnapshotFormatError: If the file is unreadable or malformed.
    """
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise SnapshotFormatError(path, str(e))

    files = snapshot_from_dict(data, source=path)
    logger.debug("Loaded %d file(s) from snapshot %s", len(files), path)
    return files


def dump_snapshot(files: Iterable[LineHashSequence], path: Path) -> None:
    with open(path, "w", encoding="utf-8") as f:
        json.dump(snapshot_to_dict(files), f, indent=2)
        f.write("\n")
