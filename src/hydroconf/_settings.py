"""How hydroconf itself is configured.

Every field can be set through a meta environment variable ending in
``_FOR_HYDRO``; anything not set there falls back to the defaults below::

    settings = (
        ResolutionSettings.default()
        .with_variable_prefix("MYAPP")
        .with_environment("staging")
    )
"""

from __future__ import annotations

import logging
import os
import sys
from pathlib import Path
from typing import Any, Mapping

from pydantic import BaseModel, ConfigDict, field_validator

from ._environ import snapshot_environ
from ._sources import NO_FILE, is_pure_filename

logger = logging.getLogger(__name__)

DEFAULT_ENVIRONMENT = "development"
DEFAULT_PREFIX = "HYDRO"
DEFAULT_NESTED_SEPARATOR = "__"
DEFAULT_ENCODING = "utf-8"
DEFAULT_SETTINGS_FILENAME = "settings.toml"
DEFAULT_SECRETS_FILENAME = ".secrets.toml"

META_SUFFIX = "_FOR_HYDRO"

# field name -> meta environment variable
META_VARIABLES: dict[str, str] = {
    "root_path": f"ROOT_PATH{META_SUFFIX}",
    "settings_filename": f"SETTINGS_FILE{META_SUFFIX}",
    "secrets_filename": f"SECRETS_FILE{META_SUFFIX}",
    "environment_name": f"ENV{META_SUFFIX}",
    "variable_prefix": f"ENVVAR_PREFIX{META_SUFFIX}",
    "nested_separator": f"ENVVAR_NESTED_SEP{META_SUFFIX}",
    "encoding": f"ENCODING{META_SUFFIX}",
}


def executable_dir() -> Path:
    """Directory of the running program, or the working directory."""
    script = sys.argv[0] if sys.argv and sys.argv[0] else ""
    if script and script not in ("-c", "-m") and os.path.exists(script):
        return Path(os.path.abspath(script)).parent
    return Path.cwd()


class ResolutionSettings(BaseModel):
    """Immutable configuration of the resolution pipeline."""

    model_config = ConfigDict(frozen=True)

    root_path: Path | None = None
    settings_filename: str | None = DEFAULT_SETTINGS_FILENAME
    secrets_filename: str | None = DEFAULT_SECRETS_FILENAME
    environment_name: str = DEFAULT_ENVIRONMENT
    variable_prefix: str = DEFAULT_PREFIX
    nested_separator: str = DEFAULT_NESTED_SEPARATOR
    encoding: str = DEFAULT_ENCODING

    @field_validator("settings_filename", "secrets_filename")
    @classmethod
    def _pure_filename(cls, value: str | None) -> str | None:
        if value is None or value == NO_FILE:
            return value
        if not is_pure_filename(value):
            logger.warning("Please pass a pure file name, not a path: %r (source disabled)", value)
            return NO_FILE
        return value

    @field_validator("variable_prefix")
    @classmethod
    def _strip_prefix_separator(cls, value: str) -> str:
        return value.rstrip("_")

    # -- Construction -------------------------------------------------------

    @classmethod
    def default(cls, environ: Mapping[str, str] | None = None) -> ResolutionSettings:
        """Build settings from the ``*_FOR_HYDRO`` meta variables.

        Unset variables keep the hardcoded defaults. *environ* defaults to a
        snapshot of the process environment.
        """
        env = snapshot_environ(environ)
        data: dict[str, Any] = {}
        for field_name, variable in META_VARIABLES.items():
            value = env.get(variable)
            if value:
                data[field_name] = value
        return cls.model_validate(data)

    def _with(self, **changes: Any) -> ResolutionSettings:
        # model_copy(update=...) skips validation.
        return type(self).model_validate({**self.model_dump(), **changes})

    def with_root_path(self, root_path: Path | str | None) -> ResolutionSettings:
        return self._with(root_path=root_path)

    def with_settings_filename(self, filename: str | None) -> ResolutionSettings:
        return self._with(settings_filename=filename)

    def with_secrets_filename(self, filename: str | None) -> ResolutionSettings:
        return self._with(secrets_filename=filename)

    def with_environment(self, environment_name: str) -> ResolutionSettings:
        return self._with(environment_name=environment_name)

    def with_variable_prefix(self, prefix: str) -> ResolutionSettings:
        return self._with(variable_prefix=prefix)

    def with_nested_separator(self, separator: str) -> ResolutionSettings:
        return self._with(nested_separator=separator)

    def with_encoding(self, encoding: str) -> ResolutionSettings:
        return self._with(encoding=encoding)

    # -- Resolution-time values ---------------------------------------------

    def resolved_root(self) -> Path:
        """``root_path``, or the running program's directory when unset."""
        return self.root_path if self.root_path is not None else executable_dir()
