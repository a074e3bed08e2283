"""Process environment as a read-only snapshot, and the overrides it carries.

A resolution never reads ``os.environ`` piecemeal: it captures one
snapshot up front and passes it through the pipeline. Tests install a
fake snapshot with ``set_environ`` (or ``override_environ``) instead of
touching the real process environment.
"""

from __future__ import annotations

import logging
import os
from types import MappingProxyType
from typing import Mapping

from ._document import Override
from ._dotenv import normalize_prefix, translate_key

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Module-level snapshot management
# ---------------------------------------------------------------------------

_active_environ: Mapping[str, str] | None = None


def set_environ(environ: Mapping[str, str] | None) -> None:
    """Install a fixed environment used instead of ``os.environ``."""
    global _active_environ
    _active_environ = None if environ is None else MappingProxyType(dict(environ))


def get_environ() -> Mapping[str, str] | None:
    """Return the installed environment (may be ``None``)."""
    return _active_environ


def snapshot_environ(environ: Mapping[str, str] | None = None) -> Mapping[str, str]:
    """Return an immutable copy of *environ*, the installed one, or ``os.environ``."""
    if environ is not None:
        return MappingProxyType(dict(environ))
    if _active_environ is not None:
        return _active_environ
    return MappingProxyType(dict(os.environ))


# ---------------------------------------------------------------------------
# Overlay
# ---------------------------------------------------------------------------


def env_overrides(
    environ: Mapping[str, str],
    prefix: str,
    nested_separator: str = "__",
) -> list[Override]:
    """Translate ``<PREFIX>_A__B`` variables into ``a.b`` overrides.

    The prefix match is case-sensitive. Variables are visited in sorted
    order so the result does not depend on the environment's own ordering.
    """
    marker = f"{normalize_prefix(prefix)}_"
    overrides: list[Override] = []

    for name in sorted(environ):
        if not name.startswith(marker):
            continue
        key = translate_key(name[len(marker):], nested_separator)
        if key is None:
            continue
        overrides.append(Override(key, environ[name], source="environ"))

    logger.debug("Collected %d overrides with prefix %r", len(overrides), marker)
    return overrides
