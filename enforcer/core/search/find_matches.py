from __future__ import annotations

import logging
import os
from fnmatch import fnmatchcase
from pathlib import Path
from typing import Iterable

from enforcer.core.errors import EnforcerLoadError


logger = logging.getLogger(__name__)


def is_unwanted(component: str, ignore: Iterable[str]) -> bool:
    """True if a single path component matches any ignore glob."""
    return any(fnmatchcase(component, pattern) for pattern in ignore)


def has_ending(name: str, endings: Iterable[str]) -> bool:
    return any(name.endswith(e) for e in endings)


def find_matches(start: str | Path, ignore: list[str], endings: list[str]) -> list[Path]:
    """Find files below `start` whose name ends with one of `endings`.

    Directories (and files) whose name matches an ignore glob are skipped,
    including everything beneath them. A file given as `start` is returned
    as-is.
    """
    root = Path(start)
    if root.is_file():
        return [root]
    if not root.is_dir():
        raise EnforcerLoadError(
            code="E_PATH_NOT_FOUND",
            message="path does not exist",
            file=str(root),
        )

    out: list[Path] = []
    for dirpath, dirnames, filenames in os.walk(root):
        # Prune in place so os.walk never descends into ignored directories.
        dirnames[:] = sorted(d for d in dirnames if not is_unwanted(d, ignore))
        for name in filenames:
            if is_unwanted(name, ignore) or not has_ending(name, endings):
                continue
            out.append(Path(dirpath) / name)

    logger.debug("found %d matching files below %s", len(out), root)
    return sorted(out)
