"""Shared fixtures: small configuration trees written under ``tmp_path``."""

from __future__ import annotations

import textwrap
from pathlib import Path

import pytest

SETTINGS_TOML = """
[default]
redis_url = 'redis://'
pg.port = 5432
pg.host = 'localhost'

[production]
pg.host = 'db-0'
"""

SECRETS_TOML = """
[default]
pg.password = 'a password'

[production]
pg.password = 'a strong password'
"""


def write_files(root: Path, files: dict[str, str]) -> Path:
    for name, content in files.items():
        path = root / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(textwrap.dedent(content).lstrip(), encoding="utf-8")
    return root


@pytest.fixture
def project(tmp_path: Path) -> Path:
    """Settings and secrets in ``config/``, a ``.env`` beside them."""
    return write_files(
        tmp_path / "app",
        {
            "config/settings.toml": SETTINGS_TOML,
            "config/.secrets.toml": SECRETS_TOML,
            ".env": "OTHER_VAR=ignored\n",
        },
    )


@pytest.fixture
def project_with_dotenvs(tmp_path: Path) -> Path:
    """Base ``.env`` plus an environment-specific ``.env.development``."""
    return write_files(
        tmp_path / "app",
        {
            "config/settings.toml": SETTINGS_TOML,
            "config/.secrets.toml": SECRETS_TOML,
            ".env": "HYDRO_PG__PORT=12329\n",
            ".env.development": "HYDRO_PG__PORT=15330\n",
        },
    )


@pytest.fixture
def project_with_local(tmp_path: Path) -> Path:
    """Flat layout with a ``settings.local.toml`` override."""
    return write_files(
        tmp_path / "app",
        {
            "settings.toml": SETTINGS_TOML,
            "settings.local.toml": "[production]\npg.port = 5555\n",
            ".secrets.toml": SECRETS_TOML,
        },
    )
