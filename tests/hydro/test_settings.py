"""Tests for _settings.py — ResolutionSettings."""

import logging
from pathlib import Path

import pytest
from pydantic import ValidationError

from hydroconf._settings import ResolutionSettings, executable_dir
from hydroconf._sources import NO_FILE


class TestDefaults:
    def test_hardcoded_defaults(self):
        s = ResolutionSettings.default(environ={})
        assert s.root_path is None
        assert s.settings_filename == "settings.toml"
        assert s.secrets_filename == ".secrets.toml"
        assert s.environment_name == "development"
        assert s.variable_prefix == "HYDRO"
        assert s.nested_separator == "__"
        assert s.encoding == "utf-8"

    def test_meta_variables_override_defaults(self):
        s = ResolutionSettings.default(
            environ={
                "ROOT_PATH_FOR_HYDRO": "/srv/app",
                "SETTINGS_FILE_FOR_HYDRO": "app.yaml",
                "SECRETS_FILE_FOR_HYDRO": "vault.json",
                "ENV_FOR_HYDRO": "production",
                "ENVVAR_PREFIX_FOR_HYDRO": "MYAPP",
                "ENVVAR_NESTED_SEP_FOR_HYDRO": "___",
                "ENCODING_FOR_HYDRO": "latin-1",
            }
        )
        assert s.root_path == Path("/srv/app")
        assert s.settings_filename == "app.yaml"
        assert s.secrets_filename == "vault.json"
        assert s.environment_name == "production"
        assert s.variable_prefix == "MYAPP"
        assert s.nested_separator == "___"
        assert s.encoding == "latin-1"

    def test_empty_meta_variable_ignored(self):
        assert ResolutionSettings.default(environ={"ENV_FOR_HYDRO": ""}).environment_name == "development"

    def test_prefix_trailing_underscore_dropped(self):
        s = ResolutionSettings.default(environ={"ENVVAR_PREFIX_FOR_HYDRO": "APP_"})
        assert s.variable_prefix == "APP"


class TestBuilder:
    def test_with_returns_new_instance(self):
        base = ResolutionSettings()
        changed = base.with_environment("production")
        assert changed is not base
        assert base.environment_name == "development"
        assert changed.environment_name == "production"

    def test_chained(self):
        s = (
            ResolutionSettings()
            .with_root_path("/srv/app")
            .with_variable_prefix("MYAPP")
            .with_nested_separator("___")
            .with_settings_filename("base_settings.toml")
            .with_secrets_filename(None)
            .with_encoding("utf-16")
        )
        assert s.root_path == Path("/srv/app")
        assert s.variable_prefix == "MYAPP"
        assert s.nested_separator == "___"
        assert s.settings_filename == "base_settings.toml"
        assert s.secrets_filename is None
        assert s.encoding == "utf-16"

    def test_frozen(self):
        with pytest.raises(ValidationError):
            ResolutionSettings().environment_name = "production"


class TestFilenameValidation:
    def test_path_bearing_filename_dropped_with_warning(self, caplog):
        with caplog.at_level(logging.WARNING, logger="hydroconf"):
            s = ResolutionSettings().with_settings_filename("config/settings.toml")
        assert s.settings_filename == NO_FILE
        assert "pure file name" in caplog.text

    def test_validated_on_construction_from_environment(self, caplog):
        with caplog.at_level(logging.WARNING, logger="hydroconf"):
            s = ResolutionSettings.default(environ={"SECRETS_FILE_FOR_HYDRO": "/etc/.secrets.toml"})
        assert s.secrets_filename == NO_FILE

    def test_none_keeps_conventional_search(self):
        assert ResolutionSettings().with_settings_filename(None).settings_filename is None


class TestRoot:
    def test_explicit_root(self):
        assert ResolutionSettings(root_path="/srv").resolved_root() == Path("/srv")

    def test_unset_root_is_executable_dir(self):
        assert ResolutionSettings().resolved_root() == executable_dir()

    def test_executable_dir_is_a_directory(self):
        assert executable_dir().is_dir()
