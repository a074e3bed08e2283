"""The resolution pipeline.

Layers, lowest precedence first:

1. settings file: ``default`` section, then the selected environment
2. local settings file (same two sections)
3. secrets file (same two sections)
4. ``.env`` then ``.env.<environment>``
5. ``<PREFIX>_*`` process environment variables

Nothing is cached: every ``resolve()`` walks the filesystem again.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping, TypeVar

from ._document import ConfigDocument
from ._dotenv import dotenv_overrides
from ._environ import env_overrides, snapshot_environ
from ._formats import DEFAULT_FORMATS, FileFormat
from ._merge import LayerMerger
from ._settings import ResolutionSettings
from ._sources import DiscoveredSources, locate

logger = logging.getLogger(__name__)

T = TypeVar("T")


class Hydroconf:
    """Resolve configuration for one application.

    Parameters
    ----------
    settings:
        Resolution settings. Defaults to ``ResolutionSettings.default()``
        built from the same environment snapshot.
    environ:
        Environment mapping to read instead of the process environment.
        It is copied once, here; later changes are not seen.
    formats:
        Supported settings file formats, in priority order.
    """

    def __init__(
        self,
        settings: ResolutionSettings | None = None,
        *,
        environ: Mapping[str, str] | None = None,
        formats: tuple[FileFormat, ...] = DEFAULT_FORMATS,
    ) -> None:
        self.environ = snapshot_environ(environ)
        self.settings = settings if settings is not None else ResolutionSettings.default(self.environ)
        self.formats = formats
        self.sources: DiscoveredSources | None = None
        self.raw: dict[str, dict[str, Any]] = {}

    def discover(self) -> DiscoveredSources:
        s = self.settings
        return locate(
            s.resolved_root(),
            s.environment_name,
            settings_filename=s.settings_filename,
            secrets_filename=s.secrets_filename,
            formats=self.formats,
        )

    def resolve(self) -> ConfigDocument:
        """Run the whole pipeline and return the merged document.

        Raises ``FileReadError`` if a discovered file cannot be loaded.
        """
        s = self.settings
        sources = self.discover()

        merger = LayerMerger(s.environment_name, s.encoding, self.formats)
        raw = merger.load(sources)
        document = merger.merge(raw)

        document.apply(
            dotenv_overrides(sources.dotenv_paths, s.variable_prefix, s.nested_separator, s.encoding)
        )
        document.apply(env_overrides(self.environ, s.variable_prefix, s.nested_separator))

        self.sources = sources
        self.raw = raw
        if sources.is_empty:
            logger.debug("No configuration files found above %s", s.resolved_root())
        logger.debug("Resolved %d keys for environment %r", len(document.flatten()), s.environment_name)
        return document

    def hydrate(self, target: type[T]) -> T:
        """Resolve and decode into *target*.

        Raises ``DeserializeError`` when the document does not fit *target*.
        """
        return self.resolve().decode(target)


def hydrate(
    target: type[T],
    *,
    settings: ResolutionSettings | None = None,
    environ: Mapping[str, str] | None = None,
) -> T:
    """Resolve configuration and decode it into *target* in one call.

    Usage::

        class Config(BaseModel):
            debug: bool = False

        hydrate(Config, environ={"HYDRO_DEBUG": "1"})  # Config(debug=True)
    """
    return Hydroconf(settings, environ=environ).hydrate(target)
