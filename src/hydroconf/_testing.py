"""Test utilities for hydroconf."""

from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator, Mapping

from ._environ import get_environ, set_environ


@contextmanager
def override_environ(environ: Mapping[str, str] | None = None, **variables: str) -> Iterator[Mapping[str, str]]:
    """Temporarily resolve against a fixed environment instead of ``os.environ``.

    The real process environment is never modified. Usage::

        with override_environ(ENV_FOR_HYDRO="production", HYDRO_PG__PORT="1234"):
            conf = hydrate(Config)
    """
    previous = get_environ()
    set_environ({**(environ or {}), **variables})
    try:
        yield get_environ()  # type: ignore[misc]
    finally:
        set_environ(previous)
