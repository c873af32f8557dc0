"""Unit tests for the settings configuration module."""

import logging
from pathlib import Path
from unittest.mock import patch

import pytest
import yaml

from rrulecodec.config.settings import (
    LoggingSettings,
    RRuleCodecSettings,
    get_settings,
    reset_settings,
)


@pytest.fixture
def mock_yaml_config():
    """YAML configuration data."""
    return {
        "strict_numbers": True,
        "allow_bare_rules": False,
        "logging": {
            "console_level": "DEBUG",
            "file_enabled": True,
            "file_prefix": "codec",
        },
    }


@pytest.fixture
def config_file(tmp_path, mock_yaml_config, monkeypatch):
    """Write the YAML configuration into a temporary config directory."""
    monkeypatch.chdir(tmp_path)
    path = tmp_path / "config.yaml"
    path.write_text(yaml.safe_dump(mock_yaml_config))
    return path


@pytest.fixture
def clean_settings(clean_env):
    """Clean up global settings state before and after tests."""
    reset_settings()
    with patch.object(RRuleCodecSettings, "_find_config_file", return_value=None):
        yield
    reset_settings()


class TestLoggingSettings:
    """Tests for the LoggingSettings class."""

    def test_logging_settings_defaults(self):
        settings = LoggingSettings()

        assert settings.console_level == "WARNING"
        assert settings.console_colors is True
        assert settings.file_enabled is False
        assert settings.file_directory is None
        assert settings.file_prefix == "rrulecodec"


class TestRRuleCodecSettings:
    """Tests for the RRuleCodecSettings class."""

    def test_defaults(self, clean_settings, tmp_path):
        settings = RRuleCodecSettings(config_dir=tmp_path)

        assert settings.strict_numbers is False
        assert settings.allow_bare_rules is True
        assert settings.allow_embedded_dtstart is True
        assert settings.config_file == tmp_path / "config.yaml"

    def test_environment_variables(self, clean_settings, monkeypatch):
        monkeypatch.setenv("RRULECODEC_STRICT_NUMBERS", "true")
        monkeypatch.setenv("RRULECODEC_LOGGING__CONSOLE_LEVEL", "INFO")

        settings = RRuleCodecSettings()

        assert settings.strict_numbers is True
        assert settings.logging.console_level == "INFO"

    def test_yaml_config_loaded(self, clean_env, tmp_path, config_file):
        settings = RRuleCodecSettings(config_dir=tmp_path)

        assert settings.strict_numbers is True
        assert settings.allow_bare_rules is False
        assert settings.allow_embedded_dtstart is True
        assert settings.logging.console_level == "DEBUG"
        assert settings.logging.file_enabled is True
        assert settings.logging.file_prefix == "codec"

    def test_explicit_args_override_yaml(self, clean_env, tmp_path, config_file):
        settings = RRuleCodecSettings(config_dir=tmp_path, strict_numbers=False)

        assert settings.strict_numbers is False
        assert settings.allow_bare_rules is False

    def test_env_vars_override_yaml(self, clean_env, tmp_path, config_file, monkeypatch):
        monkeypatch.setenv("RRULECODEC_ALLOW_BARE_RULES", "true")

        settings = RRuleCodecSettings(config_dir=tmp_path)

        assert settings.allow_bare_rules is True
        assert settings.strict_numbers is True

    def test_empty_yaml_file(self, clean_env, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        (tmp_path / "config.yaml").write_text("")

        settings = RRuleCodecSettings(config_dir=tmp_path)

        assert settings.strict_numbers is False

    def test_invalid_yaml_logs_warning(self, clean_env, tmp_path, caplog, monkeypatch):
        monkeypatch.chdir(tmp_path)
        (tmp_path / "config.yaml").write_text("strict_numbers: [unclosed")

        with caplog.at_level(logging.WARNING):
            settings = RRuleCodecSettings(config_dir=tmp_path)

        assert settings.strict_numbers is False
        assert "Could not load YAML config" in caplog.text

    def test_find_config_file_prefers_working_directory(self, clean_env, tmp_path, monkeypatch):
        project_dir = tmp_path / "project"
        (project_dir / "config").mkdir(parents=True)
        project_config = project_dir / "config" / "config.yaml"
        project_config.write_text("strict_numbers: true\n")
        (tmp_path / "config.yaml").write_text("strict_numbers: false\n")
        monkeypatch.chdir(project_dir)

        settings = RRuleCodecSettings(config_dir=tmp_path)

        assert settings._find_config_file().resolve() == project_config.resolve()
        assert settings.strict_numbers is True

    def test_find_config_file_missing(self, clean_env, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)

        settings = RRuleCodecSettings(config_dir=tmp_path / "nowhere")

        assert settings._find_config_file() is None


class TestGlobalSettings:
    """Tests for the global settings accessors."""

    def test_get_settings_is_cached(self, clean_settings):
        assert get_settings() is get_settings()

    def test_reset_settings(self, clean_settings):
        first = get_settings()
        reset_settings()

        assert get_settings() is not first

    def test_default_config_dir(self, clean_settings):
        assert get_settings().config_dir == Path.home() / ".config" / "rrulecodec"
