"""Loguru setup for the MCP server.

The stdio transport owns stdout, and MCP hosts often surface stderr as noise, so
the server writes its log to a dated file instead.  ``log_to_stderr`` adds a
stderr sink for interactive CLI use.
"""

from __future__ import annotations

import json
import sys
from typing import Any

from loguru import logger

from ..config.defaults import LOG_FILE_PATTERN, LOG_FORMAT, LOG_RETENTION
from ..config.settings import ServerSettings


def configure_logging(settings: ServerSettings) -> None:
    """Replace loguru's default sink with the configured ones.

    Args:
        settings: Server settings (log directory, level, stderr flag)
    """
    logger.remove()

    settings.log_dir.mkdir(parents=True, exist_ok=True)
    logger.add(
        settings.log_dir / LOG_FILE_PATTERN,
        level=settings.log_level,
        format=LOG_FORMAT,
        rotation="00:00",
        retention=LOG_RETENTION,
        encoding="utf-8",
    )

    if settings.log_to_stderr:
        logger.add(sys.stderr, level="WARNING")

    logger.debug(f"Logging configured: {settings.to_dict()}")


def _render(data: Any) -> str:
    return json.dumps(data, indent=2, default=str)


def log_tool_call(tool_name: str, params: dict[str, Any]) -> None:
    """Record an incoming tool invocation."""
    logger.info(f"Tool called: {tool_name} {_render({'params': params})}")


def log_tool_error(
    tool_name: str, error: BaseException, context: dict[str, Any] | None = None
) -> None:
    """Record a failed tool invocation with its error context."""
    details: dict[str, Any] = {"error": str(error), "type": type(error).__name__}
    error_context = getattr(error, "context", None)
    if error_context:
        details["error_context"] = error_context
    if context:
        details["context"] = context
    logger.error(f"Tool error in {tool_name} {_render(details)}")
