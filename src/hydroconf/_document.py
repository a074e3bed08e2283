"""The merged configuration tree and its deep-merge rules.

Keys are stored lower-cased, which makes every lookup case-insensitive:
``HYDRO_PG__HOST`` and a ``[default] pg.host`` entry in a TOML file land
on the same node.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass
from typing import Any, Callable, Iterable, Iterator, Mapping, TypeVar

from pydantic import TypeAdapter, ValidationError

from ._casters import Csv, cast_bool, cast_float, cast_int, cast_str
from ._types import UNDEFINED, DeserializeError, UndefinedValueError, _Undefined

T = TypeVar("T")


@dataclass(frozen=True)
class Override:
    """A single dotted key and the value that replaces it."""

    key: str
    value: Any
    source: str = ""

    def __post_init__(self) -> None:
        object.__setattr__(self, "key", self.key.lower())


# ---------------------------------------------------------------------------
# Merge helpers
# ---------------------------------------------------------------------------


def normalize_keys(value: Any) -> Any:
    """Return a copy of *value* with every table key lower-cased."""
    if isinstance(value, Mapping):
        return {str(key).lower(): normalize_keys(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [normalize_keys(item) for item in value]
    return value


def deep_merge(base: Mapping[str, Any], incoming: Mapping[str, Any]) -> dict[str, Any]:
    """Merge *incoming* over *base* without mutating either.

    - table + table: merged key by key, recursively
    - anything else: the incoming value replaces the base value wholesale,
      even when the types differ
    """
    result: dict[str, Any] = copy.deepcopy(dict(base))
    for key, value in incoming.items():
        current = result.get(key)
        if isinstance(current, dict) and isinstance(value, Mapping):
            result[key] = deep_merge(current, value)
        else:
            result[key] = copy.deepcopy(value)
    return result


def expand_key(key: str, value: Any) -> dict[str, Any]:
    """Turn ``"pg.port", 1`` into ``{"pg": {"port": 1}}``."""
    node: Any = value
    for part in reversed(key.split(".")):
        node = {part: node}
    return node


def _flatten(prefix: str, value: Any, out: dict[str, Any]) -> None:
    if isinstance(value, dict) and value:
        for key, item in value.items():
            _flatten(f"{prefix}.{key}" if prefix else key, item, out)
    else:
        out[prefix] = value


# ---------------------------------------------------------------------------
# Document
# ---------------------------------------------------------------------------


class ConfigDocument:
    """Accumulating key/value tree built by successive merges.

    >>> doc = ConfigDocument({"pg": {"port": 5432}})
    >>> doc.merge({"PG": {"host": "db-0"}}).get("pg.host")
    'db-0'
    >>> doc.get_int("pg.port")
    5432
    """

    def __init__(self, data: Mapping[str, Any] | None = None) -> None:
        self._data: dict[str, Any] = normalize_keys(dict(data or {}))

    # -- Mutation -----------------------------------------------------------

    def merge(self, mapping: Mapping[str, Any]) -> ConfigDocument:
        """Deep-merge *mapping* on top of the current content."""
        self._data = deep_merge(self._data, normalize_keys(mapping))
        return self

    def set(self, key: str, value: Any) -> ConfigDocument:
        """Set a dotted *key*, replacing any scalar found along the way."""
        if not key:
            raise ValueError("Cannot set an empty key")
        return self.merge(expand_key(key.lower(), value))

    def apply(self, overrides: Iterable[Override]) -> ConfigDocument:
        for override in overrides:
            self.set(override.key, override.value)
        return self

    # -- Lookup -------------------------------------------------------------

    def _lookup(self, key: str) -> Any:
        current: Any = self._data
        if not key:
            return current
        for segment in key.lower().split("."):
            if not isinstance(current, dict) or segment not in current:
                return UNDEFINED
            current = current[segment]
        return current

    def get(self, key: str, default: Any = UNDEFINED) -> Any:
        """Return the raw value at dotted *key*.

        Raises ``UndefinedValueError`` when the key is missing and no
        *default* was given. The default is returned as-is.
        """
        value = self._lookup(key)
        if isinstance(value, _Undefined):
            if isinstance(default, _Undefined):
                raise UndefinedValueError(key)
            return default
        return copy.deepcopy(value)

    def _get_cast(self, key: str, caster: Callable[[Any], T], default: Any) -> T:
        value = self._lookup(key)
        if isinstance(value, _Undefined):
            if isinstance(default, _Undefined):
                raise UndefinedValueError(key)
            return default
        try:
            return caster(value)
        except (TypeError, ValueError) as exc:
            raise DeserializeError(key, str(exc)) from exc

    def get_str(self, key: str, default: Any = UNDEFINED) -> str:
        return self._get_cast(key, cast_str, default)

    def get_int(self, key: str, default: Any = UNDEFINED) -> int:
        return self._get_cast(key, cast_int, default)

    def get_float(self, key: str, default: Any = UNDEFINED) -> float:
        return self._get_cast(key, cast_float, default)

    def get_bool(self, key: str, default: Any = UNDEFINED) -> bool:
        return self._get_cast(key, cast_bool, default)

    def get_list(self, key: str, default: Any = UNDEFINED, cast: Callable[[Any], Any] = lambda v: v) -> list[Any]:
        """Return a list; comma-separated strings are split (see ``Csv``)."""
        return self._get_cast(key, Csv(cast=cast), default)

    def get_table(self, key: str, default: Any = UNDEFINED) -> dict[str, Any]:
        def _table(value: Any) -> dict[str, Any]:
            if not isinstance(value, dict):
                raise ValueError(f"Expected a table, got {type(value).__name__}")
            return copy.deepcopy(value)

        return self._get_cast(key, _table, default)

    # -- Export -------------------------------------------------------------

    def to_dict(self) -> dict[str, Any]:
        return copy.deepcopy(self._data)

    def flatten(self) -> dict[str, Any]:
        """Return ``{dotted_path: leaf_value}`` for every leaf."""
        out: dict[str, Any] = {}
        for key, value in self._data.items():
            _flatten(key, value, out)
        return out

    def decode(self, target: type[T], key: str = "") -> T:
        """Validate the document (or the sub-table at *key*) into *target*.

        *target* is anything pydantic's ``TypeAdapter`` accepts: a
        ``BaseModel`` subclass, a dataclass, a ``TypedDict``, ``dict[str, int]``...
        """
        data = self.get_table(key) if key else self.to_dict()
        try:
            return TypeAdapter(target).validate_python(data)
        except ValidationError as exc:
            first = exc.errors()[0]
            location = ".".join(str(part) for part in first.get("loc", ()))
            if key:
                location = f"{key}.{location}" if location else key
            raise DeserializeError(location, first.get("msg", str(exc))) from exc

    # -- Dunder -------------------------------------------------------------

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and not isinstance(self._lookup(key), _Undefined)

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, ConfigDocument):
            return self._data == other._data
        return NotImplemented

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"ConfigDocument({self._data!r})"
