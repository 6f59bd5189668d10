"""Server settings loaded from YAML and environment variables.

Precedence, lowest to highest: built-in defaults, the YAML file named by
``MCP_GIT_BLAME_CONFIG``, individual ``MCP_GIT_BLAME_*`` variables.

Example YAML::

    git_binary: /usr/bin/git
    git_timeout: 60
    log_dir: /var/log/mcp-git-blame
    log_level: DEBUG
    log_to_stderr: false
    short_hash_length: 7
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any

import yaml

from ..core.exceptions import ConfigError
from .defaults import (
    DEFAULT_GIT_BINARY,
    DEFAULT_GIT_TIMEOUT,
    DEFAULT_LOG_DIR,
    DEFAULT_LOG_LEVEL,
    DEFAULT_SHORT_HASH_LENGTH,
    ENV_CONFIG_FILE,
    ENV_GIT_BINARY,
    ENV_GIT_TIMEOUT,
    ENV_LOG_DIR,
    ENV_LOG_LEVEL,
    VALID_LOG_LEVELS,
)


@dataclass
class ServerSettings:
    """Complete server configuration."""

    git_binary: str = DEFAULT_GIT_BINARY
    git_timeout: float = DEFAULT_GIT_TIMEOUT
    log_dir: Path = field(default_factory=lambda: DEFAULT_LOG_DIR)
    log_level: str = DEFAULT_LOG_LEVEL
    log_to_stderr: bool = False
    short_hash_length: int = DEFAULT_SHORT_HASH_LENGTH

    def __post_init__(self) -> None:
        self.log_dir = Path(self.log_dir).expanduser()
        self.log_level = str(self.log_level).upper()
        if self.log_level not in VALID_LOG_LEVELS:
            raise ConfigError(
                f"Invalid log level: {self.log_level}",
                context={"valid": sorted(VALID_LOG_LEVELS)},
            )
        if self.git_timeout <= 0:
            raise ConfigError(f"git_timeout must be positive, got {self.git_timeout}")
        if not 4 <= self.short_hash_length <= 40:
            raise ConfigError(
                f"short_hash_length must be between 4 and 40, got {self.short_hash_length}"
            )

    @classmethod
    def load(cls, path: Path) -> ServerSettings:
        """Load settings from a YAML file.

        Args:
            path: Path to YAML configuration file

        Returns:
            ServerSettings instance (defaults if the file does not exist)
        """
        if not path.exists():
            return cls()

        try:
            with open(path) as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {path}: {e}") from e

        if not isinstance(data, dict):
            raise ConfigError(f"Expected a mapping in {path}, got {type(data).__name__}")

        return cls.from_dict(data)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ServerSettings:
        """Create settings from a dictionary, ignoring unknown keys."""
        defaults = cls()
        try:
            return cls(
                git_binary=str(data.get("git_binary", defaults.git_binary)),
                git_timeout=float(data.get("git_timeout", defaults.git_timeout)),
                log_dir=Path(data.get("log_dir", defaults.log_dir)),
                log_level=str(data.get("log_level", defaults.log_level)),
                log_to_stderr=bool(data.get("log_to_stderr", defaults.log_to_stderr)),
                short_hash_length=int(
                    data.get("short_hash_length", defaults.short_hash_length)
                ),
            )
        except (TypeError, ValueError) as e:
            raise ConfigError(f"Invalid configuration value: {e}") from e

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> ServerSettings:
        """Build settings from the config file and ``MCP_GIT_BLAME_*`` variables."""
        env = os.environ if environ is None else environ

        config_file = env.get(ENV_CONFIG_FILE)
        settings = cls.load(Path(config_file).expanduser()) if config_file else cls()

        overrides: dict[str, Any] = {}
        if env.get(ENV_GIT_BINARY):
            overrides["git_binary"] = env[ENV_GIT_BINARY]
        if env.get(ENV_LOG_DIR):
            overrides["log_dir"] = Path(env[ENV_LOG_DIR])
        if env.get(ENV_LOG_LEVEL):
            overrides["log_level"] = env[ENV_LOG_LEVEL]
        if env.get(ENV_GIT_TIMEOUT):
            try:
                overrides["git_timeout"] = float(env[ENV_GIT_TIMEOUT])
            except ValueError as e:
                raise ConfigError(
                    f"{ENV_GIT_TIMEOUT} must be a number, got {env[ENV_GIT_TIMEOUT]!r}"
                ) from e

        return replace(settings, **overrides) if overrides else settings

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "git_binary": self.git_binary,
            "git_timeout": self.git_timeout,
            "log_dir": str(self.log_dir),
            "log_level": self.log_level,
            "log_to_stderr": self.log_to_stderr,
            "short_hash_length": self.short_hash_length,
        }
