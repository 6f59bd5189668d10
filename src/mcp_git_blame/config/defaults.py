"""Default configuration for mcp-git-blame."""

from pathlib import Path

# MCP server identity
SERVER_NAME = "mcp-git-blame"

# Git invocation
DEFAULT_GIT_BINARY = "git"
DEFAULT_GIT_TIMEOUT = 30.0  # seconds per git call

# Revision detail
DEFAULT_SHORT_HASH_LENGTH = 7

# Logging (stdout carries the MCP protocol, so the server logs to files)
DEFAULT_LOG_DIR = Path.home() / ".mcp-git-blame" / "logs"
DEFAULT_LOG_LEVEL = "INFO"
LOG_FILE_PATTERN = "server-{time:YYYY-MM-DD}.log"
LOG_RETENTION = "14 days"
LOG_FORMAT = "[{time:YYYY-MM-DD[T]HH:mm:ss.SSSZ}] [{level}] {message}"

# Environment overrides
ENV_CONFIG_FILE = "MCP_GIT_BLAME_CONFIG"
ENV_LOG_DIR = "MCP_GIT_BLAME_LOG_DIR"
ENV_LOG_LEVEL = "MCP_GIT_BLAME_LOG_LEVEL"
ENV_GIT_TIMEOUT = "MCP_GIT_BLAME_GIT_TIMEOUT"
ENV_GIT_BINARY = "MCP_GIT_BLAME_GIT_BINARY"

VALID_LOG_LEVELS = {"TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"}
