"""Discovery of settings, secrets and dotenv files.

Search policy:

* settings and secrets stop at the first ancestor level where either one
  exists, and both are then taken from that level only;
* the local settings override (``<stem>.local.<ext>``) is looked up along
  the whole walk;
* ``.env`` and ``.env.<environment>`` are each looked up along the whole
  walk, independently of the settings files.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path, PurePath
from typing import Iterable, Sequence

from ._formats import DEFAULT_FORMATS, FileFormat, extensions, format_for
from ._walker import candidate_dirs, iter_candidates, walk_to_root

logger = logging.getLogger(__name__)

SETTINGS_STEM = "settings"
SECRETS_STEM = ".secrets"
DOTENV_NAME = ".env"

# A filename that was rejected or switched off: the source is absent, and
# unlike None no conventional `settings.*` search happens.
NO_FILE = ""


@dataclass(frozen=True)
class DiscoveredSources:
    """Files found for one resolution run."""

    settings_path: Path | None = None
    local_settings_path: Path | None = None
    secrets_path: Path | None = None
    dotenv_paths: tuple[Path, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not (
            self.settings_path
            or self.local_settings_path
            or self.secrets_path
            or self.dotenv_paths
        )


# ---------------------------------------------------------------------------
# Filename helpers
# ---------------------------------------------------------------------------


def is_pure_filename(name: str) -> bool:
    """True when *name* has no directory component."""
    if not name or name in (".", ".."):
        return False
    return PurePath(name).name == name and "/" not in name and "\\" not in name


def _checked_names(
    filename: str | None,
    stem: str,
    kind: str,
    formats: tuple[FileFormat, ...],
) -> list[str]:
    """Return the filenames to try for one source, most preferred first.

    An empty list means the source is absent. ``None`` selects the
    conventional names; ``NO_FILE`` selects nothing.
    """
    if filename is None:
        return [f"{stem}.{ext}" for ext in extensions(formats)]

    if filename == NO_FILE:
        return []

    if not is_pure_filename(filename):
        logger.warning("Please pass a pure file name, not a path: %r (%s file ignored)", filename, kind)
        return []

    suffix = PurePath(filename).suffix
    if not suffix:
        logger.warning("Missing %s file extension: %r (expected one of %s)", kind, filename, ", ".join(extensions(formats)))
        return []

    if format_for(filename, formats) is None:
        logger.warning("Unsupported %s file extension: %r", kind, suffix)
        return []

    return [filename]


def _local_name(filename: str) -> str:
    path = PurePath(filename)
    return f"{path.stem}.local{path.suffix}"


# ---------------------------------------------------------------------------
# Search
# ---------------------------------------------------------------------------


def find_file(directories: Iterable[Path], names: Sequence[str]) -> Path | None:
    """Return the first existing ``directory/name``.

    Directories are the outer loop, so a closer directory always wins over
    a preferred extension further up.
    """
    for directory in directories:
        for name in names:
            candidate = directory / name
            if candidate.is_file():
                logger.debug("Collect from %s", candidate)
                return candidate
    return None


def locate(
    root: Path | str,
    environment_name: str,
    settings_filename: str | None = None,
    secrets_filename: str | None = None,
    formats: tuple[FileFormat, ...] = DEFAULT_FORMATS,
) -> DiscoveredSources:
    """Find every configuration file for *environment_name* above *root*.

    With no explicit filename the conventional stems (``settings``,
    ``.secrets``) are tried with each registered extension in priority
    order. Invalid filenames never raise: the source is recorded absent.
    """
    levels = walk_to_root(root)

    settings_names = _checked_names(settings_filename, SETTINGS_STEM, "settings", formats)
    secrets_names = _checked_names(secrets_filename, SECRETS_STEM, "secrets", formats)

    settings_path: Path | None = None
    secrets_path: Path | None = None
    if settings_names or secrets_names:
        for level in levels:
            settings_path = find_file(candidate_dirs(level), settings_names)
            secrets_path = find_file(candidate_dirs(level), secrets_names)
            if settings_path or secrets_path:
                break

    local_settings_path: Path | None = None
    if settings_path is not None:
        local_names = [_local_name(settings_path.name)]
    else:
        local_names = [_local_name(name) for name in settings_names]
    if local_names:
        local_settings_path = find_file(iter_candidates(levels), local_names)

    dotenv_names = [DOTENV_NAME]
    if environment_name:
        dotenv_names.append(f"{DOTENV_NAME}.{environment_name}")
    dotenv_paths = [
        path
        for path in (find_file(iter_candidates(levels), [name]) for name in dotenv_names)
        if path is not None
    ]

    sources = DiscoveredSources(
        settings_path=settings_path,
        local_settings_path=local_settings_path,
        secrets_path=secrets_path,
        dotenv_paths=tuple(dotenv_paths),
    )
    logger.debug("Discovered sources from %s: %s", root, sources)
    return sources
