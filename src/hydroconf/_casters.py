"""Cast helpers used by the typed getters of ``ConfigDocument``.

Overrides coming from ``.env`` files and environment variables always
arrive as strings, so the getters must understand string spellings.
"""

from __future__ import annotations

from typing import Any, Callable


# ---------------------------------------------------------------------------
# Scalar casters
# ---------------------------------------------------------------------------

_TRUTHY = frozenset({"1", "true", "yes", "on", "t", "y"})
_FALSY = frozenset({"0", "false", "no", "off", "f", "n", ""})


def cast_bool(value: Any) -> bool:
    """Cast a value to ``bool``, handling common string representations.

    Raises ``ValueError`` for unrecognised strings.
    """
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return bool(value)
    if isinstance(value, str):
        lower = value.strip().lower()
        if lower in _TRUTHY:
            return True
        if lower in _FALSY:
            return False
        raise ValueError(f"Cannot cast {value!r} to bool")
    raise ValueError(f"Cannot cast {type(value).__name__} to bool")


def cast_int(value: Any) -> int:
    """Cast to ``int`` without silently truncating floats."""
    if isinstance(value, bool):
        raise ValueError("Cannot cast bool to int")
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if not value.is_integer():
            raise ValueError(f"Cannot cast {value!r} to int without losing precision")
        return int(value)
    if isinstance(value, str):
        return int(value.strip())
    raise ValueError(f"Cannot cast {type(value).__name__} to int")


def cast_float(value: Any) -> float:
    if isinstance(value, bool):
        raise ValueError("Cannot cast bool to float")
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        return float(value.strip())
    raise ValueError(f"Cannot cast {type(value).__name__} to float")


def cast_str(value: Any) -> str:
    if isinstance(value, (dict, list)):
        raise ValueError(f"Cannot cast {type(value).__name__} to str")
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


# ---------------------------------------------------------------------------
# Csv
# ---------------------------------------------------------------------------


class Csv:
    """Split a string into a list, with optional per-element casting.

    Lists pass through untouched, so a value read from a TOML array and the
    same value overridden through ``HYDRO_HOSTS=a,b`` both come back as lists.

    >>> Csv()("a, b, c")
    ['a', 'b', 'c']
    >>> Csv(cast=int)("1,2,3")
    [1, 2, 3]
    """

    def __init__(
        self,
        cast: Callable[[Any], Any] = str,
        delimiter: str = ",",
        strip: bool = True,
    ) -> None:
        self.cast = cast
        self.delimiter = delimiter
        self.strip = strip

    def __call__(self, value: Any) -> list[Any]:
        if isinstance(value, (list, tuple)):
            return [self.cast(item) for item in value]
        if isinstance(value, dict):
            raise ValueError("Cannot cast table to list")

        parts = str(value).split(self.delimiter)
        if self.strip:
            parts = [p.strip() for p in parts]
        return [self.cast(p) for p in parts if p]
