"""Layered configuration for Python applications.

Resolves settings files, a secrets file, ``.env`` files and environment
variables into one typed configuration value with deterministic precedence.
"""

from ._casters import Csv
from ._document import ConfigDocument, Override, deep_merge
from ._dotenv import dotenv_overrides
from ._environ import env_overrides, snapshot_environ
from ._formats import DEFAULT_FORMATS, FileFormat
from ._hydro import Hydroconf, hydrate
from ._merge import LayerMerger, merge_sections
from ._model import HydroModel
from ._settings import ResolutionSettings
from ._sources import NO_FILE, DiscoveredSources, locate
from ._testing import override_environ
from ._types import DeserializeError, FileReadError, HydroError, UndefinedValueError
from ._walker import walk_to_root

__version__ = "0.1.0"

__all__ = [
    "__version__",
    # Core
    "Hydroconf",
    "hydrate",
    "ResolutionSettings",
    "ConfigDocument",
    "HydroModel",
    # Pipeline pieces
    "walk_to_root",
    "locate",
    "DiscoveredSources",
    "NO_FILE",
    "LayerMerger",
    "merge_sections",
    "deep_merge",
    "dotenv_overrides",
    "env_overrides",
    "snapshot_environ",
    "Override",
    "FileFormat",
    "DEFAULT_FORMATS",
    "Csv",
    # Errors
    "HydroError",
    "FileReadError",
    "DeserializeError",
    "UndefinedValueError",
    # Testing
    "override_environ",
]
