"""Typed config groups using Pydantic BaseModel.

Subclass ``HydroModel`` and declare fields; an optional ``Meta`` inner
class selects the table to read::

    class PostgresConfig(HydroModel):
        class Meta:
            key = "pg"

        host: str = "localhost"
        port: int = 5432

    cfg = PostgresConfig.load()
    cfg.port            # from [default] pg.port, .env, or HYDRO_PG__PORT
"""

from __future__ import annotations

from typing import TypeVar

from pydantic import BaseModel, ConfigDict

from ._document import ConfigDocument
from ._hydro import Hydroconf

M = TypeVar("M", bound="HydroModel")


class HydroModel(BaseModel):
    """Base class for declarative, typed config groups."""

    model_config = ConfigDict(extra="ignore")

    class Meta:
        key: str = ""

    @classmethod
    def load(cls: type[M], hydro: Hydroconf | None = None) -> M:
        """Resolve configuration and return a validated instance.

        A missing ``Meta.key`` table behaves like an empty one, so every
        field falls back to its default. Raises ``DeserializeError`` on
        invalid or missing required values.
        """
        document = (hydro or Hydroconf()).resolve()
        key = getattr(cls.Meta, "key", "")
        if key and key not in document:
            document = ConfigDocument().set(key, {})
        return document.decode(cls, key=key)
