"""Command line entry point for MCP Git Blame."""

import asyncio
from pathlib import Path

import typer
from loguru import logger

from .. import __version__
from ..config.settings import ServerSettings
from ..core.exceptions import GitBlameError
from ..core.models import BlameRequest, RevisionDetailRequest
from ..core.service import GitHistoryService
from .output import print_error, print_json

app = typer.Typer(
    name="mcp-git-blame",
    help="🔎 Git blame and commit detail, as an MCP server or from the shell",
    no_args_is_help=True,
)


def _load_settings() -> ServerSettings:
    try:
        return ServerSettings.from_env()
    except GitBlameError as e:
        print_error(str(e))
        raise typer.Exit(1) from e


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"mcp-git-blame {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False,
        "--version",
        "-v",
        help="Show version and exit",
        callback=_version_callback,
        is_eager=True,
    ),
) -> None:
    """MCP Git Blame command line."""


@app.command("serve")
def serve() -> None:
    """Run the MCP server on stdio."""
    from ..mcp.server import run_mcp_server

    asyncio.run(run_mcp_server(_load_settings()))


@app.command("blame")
def blame(
    file_path: Path = typer.Argument(
        ...,
        help="File to blame",
        exists=True,
        file_okay=True,
        dir_okay=False,
        readable=True,
        resolve_path=True,
    ),
    line_from: int | None = typer.Option(
        None, "--from", min=1, help="First line (1-based, inclusive)"
    ),
    line_to: int | None = typer.Option(
        None, "--to", min=1, help="Last line (1-based, inclusive)"
    ),
) -> None:
    """Show per-line authorship for a file."""
    logger.remove()
    service = GitHistoryService(_load_settings())
    request = BlameRequest(file_path=str(file_path), line_from=line_from, line_to=line_to)

    try:
        result = asyncio.run(service.get_blame_info(request))
    except GitBlameError as e:
        print_error(f"Failed to get git blame information: {e}")
        raise typer.Exit(1) from e

    print_json(result.to_dict())


@app.command("commit")
def commit(
    commit_hash: str = typer.Argument(..., help="Commit hash or ref to describe"),
    file_path: Path = typer.Option(
        ...,
        "--file",
        "-f",
        help="Any file inside the repository",
        exists=True,
        file_okay=True,
        dir_okay=False,
        resolve_path=True,
    ),
    include_diff: bool = typer.Option(
        False, "--diff", help="Include the full diff"
    ),
    include_file_diffs: bool = typer.Option(
        False, "--file-diffs", help="Include per-file patches"
    ),
) -> None:
    """Show details for one commit."""
    logger.remove()
    service = GitHistoryService(_load_settings())
    request = RevisionDetailRequest(
        commit_hash=commit_hash,
        file_path=str(file_path),
        include_diff=include_diff,
        include_file_diffs=include_file_diffs,
    )

    try:
        result = asyncio.run(service.get_commit_detail(request))
    except GitBlameError as e:
        print_error(f"Failed to get commit details: {e}")
        raise typer.Exit(1) from e

    print_json(result.to_dict())


if __name__ == "__main__":
    app()
