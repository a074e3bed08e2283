"""Overrides read from ``.env`` files."""

from __future__ import annotations

import io
import logging
from pathlib import Path
from typing import Iterable

from dotenv import dotenv_values
from dotenv.parser import parse_stream

from ._document import Override
from ._types import FileReadError

logger = logging.getLogger(__name__)


def normalize_prefix(prefix: str) -> str:
    """``"APP_"`` and ``"APP"`` name the same prefix."""
    return prefix.rstrip("_")


def translate_key(rest: str, nested_separator: str) -> str | None:
    """Replace the nested separator with dots; ``None`` for malformed keys."""
    dotted = rest.replace(nested_separator, ".") if nested_separator else rest
    if not dotted or any(not part for part in dotted.split(".")):
        logger.debug("Ignoring malformed override key %r", rest)
        return None
    return dotted


def read_dotenv(path: Path, encoding: str = "utf-8") -> dict[str, str | None]:
    """Parse one dotenv file, preserving its order.

    The file was already found on disk, so any read or syntax error is
    fatal and raised as ``FileReadError``. Variable interpolation is off:
    ``${VAR}`` would otherwise read the live process environment.
    """
    try:
        text = Path(path).read_text(encoding=encoding)
    except (OSError, UnicodeDecodeError, LookupError) as exc:
        raise FileReadError(path, str(exc)) from exc

    for binding in parse_stream(io.StringIO(text)):
        if binding.error:
            raise FileReadError(
                path,
                f"invalid dotenv syntax at line {binding.original.line}: "
                f"{binding.original.string.strip()!r}",
            )

    return dict(dotenv_values(stream=io.StringIO(text), interpolate=False))


def dotenv_overrides(
    paths: Iterable[Path],
    prefix: str,
    nested_separator: str = "__",
    encoding: str = "utf-8",
) -> list[Override]:
    """Translate ``<PREFIX>_A__B=value`` lines into ``a.b`` overrides.

    Files are read in the given order, so later files win. The prefix match
    is case-insensitive; keys without the prefix and empty values are
    skipped.
    """
    marker = f"{normalize_prefix(prefix)}_".lower()
    overrides: list[Override] = []

    for path in paths:
        values = read_dotenv(path, encoding)
        logger.debug("Read %d entries from %s", len(values), path)
        for name, value in values.items():
            if not value:
                continue
            if not name.lower().startswith(marker):
                continue
            key = translate_key(name[len(marker):], nested_separator)
            if key is None:
                continue
            overrides.append(Override(key, value, source=str(path)))

    return overrides
