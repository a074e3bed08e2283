"""Foundation types for hydroconf.

Provides the missing-value sentinel and the exception hierarchy raised
during resolution and typed access.
"""

from __future__ import annotations

from pathlib import Path

# ---------------------------------------------------------------------------
# Sentinel
# ---------------------------------------------------------------------------


class _Undefined:
    """Sentinel for missing config values (distinct from ``None``)."""

    _instance: _Undefined | None = None

    def __new__(cls) -> _Undefined:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNDEFINED"

    def __bool__(self) -> bool:
        return False


UNDEFINED = _Undefined()


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class HydroError(Exception):
    """Base exception for everything hydroconf raises."""


class FileReadError(HydroError):
    """A discovered file could not be read, decoded or parsed."""

    def __init__(self, path: Path | str, reason: str) -> None:
        self.path = Path(path)
        self.reason = reason
        super().__init__(f"Could not load '{self.path}': {reason}")


class DeserializeError(HydroError):
    """The merged document cannot be coerced into the requested shape."""

    def __init__(self, key: str, reason: str) -> None:
        self.key = key
        self.reason = reason
        where = f"'{key}'" if key else "the document root"
        super().__init__(f"Invalid value at {where}: {reason}")


class UndefinedValueError(HydroError):
    """Raised when a required configuration key is missing."""

    def __init__(self, key: str) -> None:
        self.key = key
        super().__init__(f"Configuration key '{key}' is required but not set.")
