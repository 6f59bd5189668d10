"""Unit tests for the MCP blame handlers and server dispatch."""

import json
from unittest.mock import AsyncMock, MagicMock

import pytest
from mcp.types import CallToolResult, TextContent

from mcp_git_blame.core.exceptions import RepositoryError, RevisionNotFoundError
from mcp_git_blame.core.models import (
    AttributionLine,
    BlameRequest,
    BlameResult,
    ChangedFile,
    LineRange,
    RevisionDetail,
    RevisionDetailRequest,
)
from mcp_git_blame.mcp.blame_handlers import BlameHandlers
from mcp_git_blame.mcp.server import GitBlameMCPServer
from mcp_git_blame.mcp.tool_schemas import get_tool_schemas


@pytest.fixture
def blame_result():
    return BlameResult(
        file_path="/repo/app.py",
        total_lines=2,
        requested_lines=1,
        line_range=LineRange(start=2, end=2),
        blame=[AttributionLine(line_number=2, revision_hash="b" * 40, content="bar")],
    )


@pytest.fixture
def revision_detail():
    return RevisionDetail(
        hash="a" * 40,
        short_hash="a" * 7,
        summary="Change",
        files_changed=1,
        insertions=2,
        deletions=1,
        changed_files=[ChangedFile(status="M", path="app.py", insertions=2, deletions=1)],
    )


@pytest.fixture
def mock_service(blame_result, revision_detail):
    service = MagicMock()
    service.get_blame_info = AsyncMock(return_value=blame_result)
    service.get_commit_detail = AsyncMock(return_value=revision_detail)
    return service


@pytest.fixture
def handlers(mock_service):
    return BlameHandlers(mock_service)


def _text(result) -> str:
    return result.content[0].text


class TestHandleGitBlame:
    @pytest.mark.asyncio
    async def test_returns_pretty_json(self, handlers, mock_service):
        result = await handlers.handle_git_blame(
            {"filePath": "/repo/app.py", "lineFrom": 2, "lineTo": 2}
        )

        assert not result.isError
        payload = json.loads(_text(result))
        assert payload["totalLines"] == 2
        assert payload["lineRange"] == {"from": 2, "to": 2}
        assert payload["blame"][0]["revisionHash"] == "b" * 40
        assert _text(result).startswith("{\n  ")

        request = mock_service.get_blame_info.await_args.args[0]
        assert request == BlameRequest(file_path="/repo/app.py", line_from=2, line_to=2)

    @pytest.mark.asyncio
    async def test_service_error_becomes_error_result(self, handlers, mock_service):
        mock_service.get_blame_info = AsyncMock(
            side_effect=RepositoryError("Not in a git repository")
        )

        result = await handlers.handle_git_blame({"filePath": "/tmp/x.py"})

        assert result.isError
        assert _text(result) == (
            "Failed to get git blame information: Not in a git repository"
        )

    @pytest.mark.asyncio
    async def test_invalid_arguments(self, handlers, mock_service):
        result = await handlers.handle_git_blame({"filePath": "/repo/a.py", "lineFrom": 0})

        assert result.isError
        assert "lineFrom" in _text(result)
        mock_service.get_blame_info.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_missing_file_path(self, handlers):
        result = await handlers.handle_git_blame({})

        assert result.isError
        assert "filePath" in _text(result)


class TestHandleGitCommitDetail:
    @pytest.mark.asyncio
    async def test_returns_detail_json(self, handlers, mock_service):
        result = await handlers.handle_git_commit_detail(
            {"commitHash": "HEAD", "filePath": "/repo/app.py", "includeFileDiffs": True}
        )

        assert not result.isError
        payload = json.loads(_text(result))
        assert payload["shortHash"] == "a" * 7
        assert payload["changedFiles"] == [
            {"status": "M", "path": "app.py", "insertions": 2, "deletions": 1}
        ]
        assert "diff" not in payload

        request = mock_service.get_commit_detail.await_args.args[0]
        assert request == RevisionDetailRequest(
            commit_hash="HEAD", file_path="/repo/app.py", include_file_diffs=True
        )

    @pytest.mark.asyncio
    async def test_not_found(self, handlers, mock_service):
        mock_service.get_commit_detail = AsyncMock(
            side_effect=RevisionNotFoundError("Commit not found in repository at /repo: f00")
        )

        result = await handlers.handle_git_commit_detail(
            {"commitHash": "f00", "filePath": "/repo/app.py"}
        )

        assert result.isError
        assert _text(result).startswith("Failed to get commit details: Commit not found")

    @pytest.mark.asyncio
    async def test_missing_commit_hash(self, handlers, mock_service):
        result = await handlers.handle_git_commit_detail({"filePath": "/repo/app.py"})

        assert result.isError
        assert "commitHash" in _text(result)
        mock_service.get_commit_detail.assert_not_awaited()


class TestServerDispatch:
    @pytest.fixture
    def server(self, mock_service):
        return GitBlameMCPServer(service=mock_service)

    def test_tools_listed(self, server):
        names = [tool.name for tool in server.get_tools()]

        assert names == ["git_blame", "git_commit_detail"]

    @pytest.mark.asyncio
    async def test_routes_git_blame(self, server, mock_service):
        result = await server.call_tool("git_blame", {"filePath": "/repo/app.py"})

        assert not result.isError
        mock_service.get_blame_info.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_routes_git_commit_detail(self, server, mock_service):
        await server.call_tool(
            "git_commit_detail", {"commitHash": "HEAD", "filePath": "/repo/app.py"}
        )

        mock_service.get_commit_detail.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_unknown_tool(self, server):
        result = await server.call_tool("git_log", {})

        assert result.isError
        assert _text(result) == "Unknown tool: git_log"

    @pytest.mark.asyncio
    async def test_none_arguments(self, server):
        result = await server.call_tool("git_blame", None)

        assert result.isError


class TestToolSchemas:
    def test_required_fields(self):
        schemas = {tool.name: tool for tool in get_tool_schemas()}

        assert schemas["git_blame"].inputSchema["required"] == ["filePath"]
        assert schemas["git_commit_detail"].inputSchema["required"] == [
            "commitHash",
            "filePath",
        ]

    def test_line_bounds_are_one_based(self):
        blame = next(t for t in get_tool_schemas() if t.name == "git_blame")
        properties = blame.inputSchema["properties"]

        assert properties["lineFrom"]["minimum"] == 1
        assert properties["lineTo"]["minimum"] == 1

    def test_diff_flags_default_false(self):
        detail = next(t for t in get_tool_schemas() if t.name == "git_commit_detail")
        properties = detail.inputSchema["properties"]

        assert properties["includeDiff"]["default"] is False
        assert properties["includeFileDiffs"]["default"] is False

    def test_error_flag_wire_name(self):
        result = CallToolResult(
            content=[TextContent(type="text", text="boom")], isError=True
        )

        assert result.model_dump(by_alias=True)["isError"] is True
