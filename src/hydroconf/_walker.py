"""Candidate directories for the upward file search."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Iterator, Sequence

logger = logging.getLogger(__name__)

# Searched inside every ancestor, in this order. "" is the ancestor itself.
SETTINGS_DIRS: tuple[str, ...] = ("", "config")


def walk_to_root(start: Path | str) -> list[Path]:
    """Return *start* and all of its ancestors, closest first.

    If *start* is an existing file the walk begins at its parent directory.
    A path that cannot be made absolute falls back to the filesystem root.

    >>> walk_to_root("/a/dir")
    [PosixPath('/a/dir'), PosixPath('/a'), PosixPath('/')]
    """
    try:
        directory = Path(os.path.normpath(os.path.abspath(start)))
    except OSError as exc:
        logger.warning("Failed to normalize path %s: %s", start, exc)
        return [Path(Path(start).anchor or os.sep)]

    if directory.is_file():
        directory = directory.parent

    return [directory, *directory.parents]


def candidate_dirs(level: Path, subdirs: Sequence[str] = SETTINGS_DIRS) -> Iterator[Path]:
    """Yield the directories searched at one ancestor level."""
    for subdir in subdirs:
        yield level / subdir if subdir else level


def iter_candidates(levels: Sequence[Path], subdirs: Sequence[str] = SETTINGS_DIRS) -> Iterator[Path]:
    """Flatten *levels* into search order: each ancestor, then its subfolders."""
    for level in levels:
        yield from candidate_dirs(level, subdirs)
