from __future__ import annotations

import logging
import os
from pathlib import Path

from excise.models import normalize_path

logger = logging.getLogger(__name__)


def list_files_recursive(directory: Path) -> list[Path]:
    """Every plain file below ``directory``, expanded with an explicit stack.

    Symlinked directories are listed as neither files nor directories and
    are never entered, so link cycles can not make the walk loop. Symlinks to
    files are returned like regular files.
    """
    results: list[Path] = []
    stack: list[Path] = [normalize_path(directory)]
    while stack:
        current = stack.pop()
        try:
            with os.scandir(current) as iterator:
                entries = list(iterator)
        except FileNotFoundError:
            logger.warning("Directory disappeared while listing: %s", current)
            continue
        for entry in entries:
            full_path = current / entry.name
            if entry.is_dir(follow_symlinks=False):
                stack.append(full_path)
            elif entry.is_symlink() and os.path.isdir(full_path):
                logger.debug("Not following symlinked directory %s", full_path)
            elif entry.is_file():
                results.append(full_path)
    return results
