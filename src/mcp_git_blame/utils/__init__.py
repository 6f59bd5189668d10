"""Utility modules for MCP Git Blame."""

from .logging import configure_logging, log_tool_call, log_tool_error

__all__ = ["configure_logging", "log_tool_call", "log_tool_error"]
