"""Settings file formats, keyed by extension.

The registry is built once at import time from the parsers that are
actually importable. TOML, JSON, YAML and INI are always available; HJSON
needs the optional ``hjson`` package.
"""

from __future__ import annotations

import configparser
import json
import logging
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable

import yaml

from ._types import FileReadError

try:
    import hjson
except ImportError:  # pragma: no cover
    hjson = None

logger = logging.getLogger(__name__)

Parser = Callable[[str], Any]


@dataclass(frozen=True)
class FileFormat:
    """One supported settings file format."""

    extension: str
    parse: Parser


# ---------------------------------------------------------------------------
# Parsers
# ---------------------------------------------------------------------------


def _parse_yaml(text: str) -> Any:
    # An empty YAML file loads as None.
    return yaml.safe_load(text) or {}


def _parse_ini(text: str) -> dict[str, Any]:
    """Parse INI text; dotted option names expand into nested tables."""
    # No implicit DEFAULT section: "default" is an ordinary environment here.
    parser = configparser.ConfigParser(interpolation=None, default_section="\x00")
    parser.optionxform = str  # type: ignore[assignment]
    parser.read_string(text)

    result: dict[str, Any] = {}
    for section in parser.sections():
        table: dict[str, Any] = {}
        for option, value in parser.items(section):
            *parents, leaf = option.split(".")
            node = table
            for part in parents:
                node = node.setdefault(part, {})
                if not isinstance(node, dict):
                    raise ValueError(f"[{section}] option {option!r} nests under a plain value")
            if isinstance(node.get(leaf), dict):
                raise ValueError(f"[{section}] option {option!r} would replace a nested table")
            node[leaf] = value
        result[section] = table
    return result


def _available_formats() -> list[FileFormat]:
    formats = [
        FileFormat("toml", tomllib.loads),
        FileFormat("json", json.loads),
        FileFormat("yaml", _parse_yaml),
        FileFormat("yml", _parse_yaml),
        FileFormat("ini", _parse_ini),
    ]
    if hjson is not None:
        formats.append(FileFormat("hjson", hjson.loads))
    return formats


# Priority order: toml wins over every other extension in the same directory.
DEFAULT_FORMATS: tuple[FileFormat, ...] = tuple(_available_formats())


def extensions(formats: tuple[FileFormat, ...] = DEFAULT_FORMATS) -> list[str]:
    return [fmt.extension for fmt in formats]


def format_for(path: Path | str, formats: tuple[FileFormat, ...] = DEFAULT_FORMATS) -> FileFormat | None:
    """Return the registered format for *path*'s extension, or ``None``."""
    suffix = Path(path).suffix.lstrip(".").lower()
    for fmt in formats:
        if fmt.extension == suffix:
            return fmt
    return None


def load_file(
    path: Path,
    encoding: str = "utf-8",
    formats: tuple[FileFormat, ...] = DEFAULT_FORMATS,
) -> dict[str, Any]:
    """Read and parse a settings file into its top-level table.

    Raises ``FileReadError`` for I/O errors, decode errors, parse errors, and
    content whose top level is not a table.
    """
    fmt = format_for(path, formats)
    if fmt is None:
        raise FileReadError(path, f"unsupported extension '{Path(path).suffix}'")

    try:
        text = Path(path).read_text(encoding=encoding)
    except (OSError, UnicodeDecodeError, LookupError) as exc:
        raise FileReadError(path, str(exc)) from exc

    try:
        data = fmt.parse(text)
    except (ValueError, yaml.YAMLError, configparser.Error) as exc:
        raise FileReadError(path, f"invalid {fmt.extension}: {exc}") from exc

    if not isinstance(data, dict):
        raise FileReadError(path, f"top level must be a table, got {type(data).__name__}")

    logger.debug("Loaded %s (%d sections)", path, len(data))
    return data
