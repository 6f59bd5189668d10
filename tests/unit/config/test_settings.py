"""Unit tests for ServerSettings loading."""

from pathlib import Path

import pytest

from mcp_git_blame.config.defaults import (
    DEFAULT_GIT_TIMEOUT,
    DEFAULT_SHORT_HASH_LENGTH,
    ENV_CONFIG_FILE,
    ENV_GIT_TIMEOUT,
    ENV_LOG_DIR,
    ENV_LOG_LEVEL,
)
from mcp_git_blame.config.settings import ServerSettings
from mcp_git_blame.core.exceptions import ConfigError


class TestServerSettings:
    """Test cases for ServerSettings."""

    def test_defaults(self):
        settings = ServerSettings()

        assert settings.git_binary == "git"
        assert settings.git_timeout == DEFAULT_GIT_TIMEOUT
        assert settings.short_hash_length == DEFAULT_SHORT_HASH_LENGTH
        assert settings.log_level == "INFO"
        assert settings.log_to_stderr is False

    def test_log_level_is_normalised(self):
        assert ServerSettings(log_level="debug").log_level == "DEBUG"

    def test_invalid_log_level(self):
        with pytest.raises(ConfigError, match="Invalid log level"):
            ServerSettings(log_level="chatty")

    def test_invalid_timeout(self):
        with pytest.raises(ConfigError):
            ServerSettings(git_timeout=0)

    def test_invalid_short_hash_length(self):
        with pytest.raises(ConfigError):
            ServerSettings(short_hash_length=2)

    def test_load_missing_file_returns_defaults(self, tmp_path: Path):
        settings = ServerSettings.load(tmp_path / "missing.yaml")

        assert settings == ServerSettings()

    def test_load_yaml(self, tmp_path: Path):
        config_path = tmp_path / "config.yaml"
        config_path.write_text(
            "git_binary: /usr/local/bin/git\n"
            "git_timeout: 5\n"
            f"log_dir: {tmp_path / 'logs'}\n"
            "log_level: warning\n"
            "short_hash_length: 12\n"
            "unknown_key: ignored\n"
        )

        settings = ServerSettings.load(config_path)

        assert settings.git_binary == "/usr/local/bin/git"
        assert settings.git_timeout == 5.0
        assert settings.log_dir == tmp_path / "logs"
        assert settings.log_level == "WARNING"
        assert settings.short_hash_length == 12

    def test_load_empty_yaml(self, tmp_path: Path):
        config_path = tmp_path / "config.yaml"
        config_path.write_text("")

        assert ServerSettings.load(config_path) == ServerSettings()

    def test_load_non_mapping(self, tmp_path: Path):
        config_path = tmp_path / "config.yaml"
        config_path.write_text("- a\n- b\n")

        with pytest.raises(ConfigError, match="Expected a mapping"):
            ServerSettings.load(config_path)

    def test_load_invalid_yaml(self, tmp_path: Path):
        config_path = tmp_path / "config.yaml"
        config_path.write_text("git_timeout: [unclosed\n")

        with pytest.raises(ConfigError, match="Invalid YAML"):
            ServerSettings.load(config_path)

    def test_from_dict_bad_value(self):
        with pytest.raises(ConfigError):
            ServerSettings.from_dict({"git_timeout": "soon"})

    def test_round_trip_through_dict(self, tmp_path: Path):
        settings = ServerSettings(log_dir=tmp_path, log_level="DEBUG", git_timeout=3)

        assert ServerSettings.from_dict(settings.to_dict()) == settings


class TestFromEnv:
    """Environment overrides on top of the YAML file."""

    def test_no_environment(self):
        assert ServerSettings.from_env({}) == ServerSettings()

    def test_env_overrides_file(self, tmp_path: Path):
        config_path = tmp_path / "config.yaml"
        config_path.write_text("git_timeout: 5\nlog_level: DEBUG\n")

        settings = ServerSettings.from_env(
            {
                ENV_CONFIG_FILE: str(config_path),
                ENV_LOG_LEVEL: "error",
                ENV_LOG_DIR: str(tmp_path / "logs"),
            }
        )

        assert settings.git_timeout == 5.0
        assert settings.log_level == "ERROR"
        assert settings.log_dir == tmp_path / "logs"

    def test_bad_timeout(self):
        with pytest.raises(ConfigError, match=ENV_GIT_TIMEOUT):
            ServerSettings.from_env({ENV_GIT_TIMEOUT: "never"})

    def test_timeout_override(self):
        assert ServerSettings.from_env({ENV_GIT_TIMEOUT: "2.5"}).git_timeout == 2.5
