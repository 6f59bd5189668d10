"""Blame and commit-detail handlers for the MCP git blame server."""

import json
import time
from typing import Any

from loguru import logger
from mcp.types import CallToolResult, TextContent
from pydantic import ValidationError as PydanticValidationError

from ..core.exceptions import GitBlameError, ValidationError
from ..core.models import BlameRequest, RevisionDetailRequest
from ..core.service import GitHistoryService
from ..utils.logging import log_tool_call, log_tool_error

BLAME_FAILURE_PREFIX = "Failed to get git blame information"
COMMIT_FAILURE_PREFIX = "Failed to get commit details"


def _json_result(payload: dict[str, Any]) -> CallToolResult:
    return CallToolResult(
        content=[TextContent(type="text", text=json.dumps(payload, indent=2))]
    )


def _error_result(prefix: str, error: BaseException) -> CallToolResult:
    return CallToolResult(
        content=[TextContent(type="text", text=f"{prefix}: {error}")],
        isError=True,
    )


def _describe_validation(error: PydanticValidationError) -> str:
    problems = []
    for detail in error.errors():
        location = ".".join(str(part) for part in detail.get("loc", ()))
        problems.append(f"{location}: {detail.get('msg', 'invalid value')}")
    return "; ".join(problems) or "invalid arguments"


class BlameHandlers:
    """Handlers for git_blame and git_commit_detail tool operations."""

    def __init__(self, service: GitHistoryService):
        """Initialize blame handlers.

        Args:
            service: Service that runs the git queries
        """
        self.service = service

    async def handle_git_blame(self, args: dict[str, Any]) -> CallToolResult:
        """Handle git_blame tool call.

        Args:
            args: Tool call arguments containing filePath, lineFrom, lineTo

        Returns:
            CallToolResult with the blame result as JSON, or an error
        """
        started = time.perf_counter()
        log_tool_call("git_blame", args)

        try:
            try:
                request = BlameRequest.model_validate(args)
            except PydanticValidationError as e:
                raise ValidationError(_describe_validation(e)) from e

            result = await self.service.get_blame_info(request)
        except GitBlameError as e:
            log_tool_error("git_blame", e, {**args, "duration": _elapsed(started)})
            return _error_result(BLAME_FAILURE_PREFIX, e)

        logger.info(
            f"git_blame completed for {result.file_path}: "
            f"{result.requested_lines}/{result.total_lines} lines in {_elapsed(started)}"
        )
        return _json_result(result.to_dict())

    async def handle_git_commit_detail(self, args: dict[str, Any]) -> CallToolResult:
        """Handle git_commit_detail tool call.

        Args:
            args: Tool call arguments containing commitHash, filePath,
                includeDiff, includeFileDiffs

        Returns:
            CallToolResult with the revision detail as JSON, or an error
        """
        started = time.perf_counter()
        log_tool_call("git_commit_detail", args)

        try:
            try:
                request = RevisionDetailRequest.model_validate(args)
            except PydanticValidationError as e:
                raise ValidationError(_describe_validation(e)) from e

            result = await self.service.get_commit_detail(request)
        except GitBlameError as e:
            log_tool_error(
                "git_commit_detail", e, {**args, "duration": _elapsed(started)}
            )
            return _error_result(COMMIT_FAILURE_PREFIX, e)

        logger.info(
            f"git_commit_detail completed for {result.hash}: "
            f"{result.files_changed} files changed in {_elapsed(started)}"
        )
        return _json_result(result.to_dict())


def _elapsed(started: float) -> str:
    return f"{(time.perf_counter() - started) * 1000:.0f}ms"
