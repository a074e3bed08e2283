"""Ordered application of file layers onto a ``ConfigDocument``.

Every file contributes its ``default`` section first, then the section of
the selected environment. Files are applied in the order
settings -> local settings -> secrets.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Mapping

from ._document import ConfigDocument
from ._formats import DEFAULT_FORMATS, FileFormat, load_file
from ._sources import DiscoveredSources

logger = logging.getLogger(__name__)

DEFAULT_SECTION = "default"

# Layer names in precedence order, lowest first.
FILE_LAYERS: tuple[str, ...] = ("settings", "local_settings", "secrets")


def _find_section(raw_sections: Mapping[str, Any], name: str) -> Any:
    """Section lookup is case-insensitive, like every other key lookup."""
    if name in raw_sections:
        return raw_sections[name]
    wanted = name.lower()
    for key, value in raw_sections.items():
        if str(key).lower() == wanted:
            return value
    return None


def merge_sections(
    raw_sections: Mapping[str, Any],
    environment_name: str,
    document: ConfigDocument | None = None,
) -> ConfigDocument:
    """Merge ``default`` and then *environment_name* from one file.

    Missing sections are skipped silently.
    """
    document = document if document is not None else ConfigDocument()

    names = [DEFAULT_SECTION]
    if environment_name and environment_name.lower() != DEFAULT_SECTION:
        names.append(environment_name)

    for name in names:
        section = _find_section(raw_sections, name)
        if section is None:
            continue
        if not isinstance(section, Mapping):
            logger.debug("Section [%s] is not a table, skipped", name)
            continue
        document.merge(section)
    return document


class LayerMerger:
    """Load the discovered files and merge them in precedence order."""

    def __init__(
        self,
        environment_name: str,
        encoding: str = "utf-8",
        formats: tuple[FileFormat, ...] = DEFAULT_FORMATS,
    ) -> None:
        self.environment_name = environment_name
        self.encoding = encoding
        self.formats = formats

    def load(self, sources: DiscoveredSources) -> dict[str, dict[str, Any]]:
        """Read every discovered file, keyed by layer name.

        The result is the raw loaded document: untouched file content,
        still keyed by environment-section name.
        """
        paths: dict[str, Path | None] = {
            "settings": sources.settings_path,
            "local_settings": sources.local_settings_path,
            "secrets": sources.secrets_path,
        }
        return {
            layer: load_file(path, self.encoding, self.formats)
            for layer, path in paths.items()
            if path is not None
        }

    def merge(
        self,
        raw_layers: Mapping[str, Mapping[str, Any]],
        document: ConfigDocument | None = None,
    ) -> ConfigDocument:
        document = document if document is not None else ConfigDocument()
        for layer in FILE_LAYERS:
            raw_sections = raw_layers.get(layer)
            if raw_sections is None:
                continue
            logger.debug("Applying %s layer for environment %r", layer, self.environment_name)
            merge_sections(raw_sections, self.environment_name, document)
        return document
