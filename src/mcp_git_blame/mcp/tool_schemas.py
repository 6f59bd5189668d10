"""MCP tool schema definitions for git blame functionality."""

from mcp.types import Tool


def get_tool_schemas() -> list[Tool]:
    """Get all MCP tool schema definitions.

    Returns:
        List of Tool objects defining available MCP tools
    """
    return [
        _get_git_blame_schema(),
        _get_git_commit_detail_schema(),
    ]


def _get_git_blame_schema() -> Tool:
    """Get git_blame tool schema."""
    return Tool(
        name="git_blame",
        description="Get git blame information for a file or specific lines. Returns, per line, the commit that last changed it with author, committer, timestamps, summary and the exact line content.",
        inputSchema={
            "type": "object",
            "properties": {
                "filePath": {
                    "type": "string",
                    "description": "Absolute path to a readable file (directories or relative path are not allowed)",
                },
                "lineFrom": {
                    "type": "integer",
                    "description": "Starting line number (1-based, optional)",
                    "minimum": 1,
                },
                "lineTo": {
                    "type": "integer",
                    "description": "Ending line number (1-based, inclusive, optional)",
                    "minimum": 1,
                },
            },
            "required": ["filePath"],
        },
    )


def _get_git_commit_detail_schema() -> Tool:
    """Get git_commit_detail tool schema."""
    return Tool(
        name="git_commit_detail",
        description="Get detailed information about a specific commit: author, committer, message, parents, changed files with insertion/deletion counts, and optionally the diff. Pair with git_blame to inspect the commit behind a line.",
        inputSchema={
            "type": "object",
            "properties": {
                "commitHash": {
                    "type": "string",
                    "description": "The commit hash to get details for",
                },
                "filePath": {
                    "type": "string",
                    "description": "Absolute path to a file within the repository (directories or relative path are not allowed)",
                },
                "includeDiff": {
                    "type": "boolean",
                    "description": "Whether to include the full diff in the response (optional, defaults to false)",
                    "default": False,
                },
                "includeFileDiffs": {
                    "type": "boolean",
                    "description": "Whether to include per-file unified diffs in changedFiles[].patch (optional, defaults to false)",
                    "default": False,
                },
            },
            "required": ["commitHash", "filePath"],
        },
    )
