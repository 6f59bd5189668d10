"""Git gateway: runs git subcommands and returns their raw text.

Design Decisions:
    - One ``GitRepository`` per request, scoped to the directory that contains
      the requested file.  Nothing depends on the process working directory, so
      one server can answer queries for any number of repositories.
    - Commands run as asyncio subprocesses; output is returned unmodified (never
      stripped) because blame content lines must survive byte for byte.
    - Every failure is raised as an ``UpstreamError`` subclass; the only
      not-found signal is ``RevisionNotFoundError`` from ``resolve_revision``.

Error Handling:
    - GitNotAvailableError: git binary not found
    - GitCommandError: git exited non-zero (stderr attached)
    - GitTimeoutError: git exceeded the configured timeout
    - RevisionNotFoundError: ref does not name a commit in this repository
"""

from __future__ import annotations

import asyncio
import time
from pathlib import Path
from typing import TYPE_CHECKING

from loguru import logger

from ..config.defaults import DEFAULT_GIT_BINARY, DEFAULT_GIT_TIMEOUT
from .exceptions import (
    GitCommandError,
    GitNotAvailableError,
    GitTimeoutError,
    RevisionNotFoundError,
)

# Prepended to every call: paths come back unquoted, non-ASCII included.
CONFIG_OVERRIDES = ("-c", "core.quotePath=false")
# Patch headers read "diff --git a/... b/..." whatever diff.noprefix says.
DIFF_PREFIXES = ("--src-prefix=a/", "--dst-prefix=b/")

if TYPE_CHECKING:
    from loguru import Logger


class GitRepository:
    """Read-only access to the repository containing ``base_dir``.

    Example:
        >>> repo = GitRepository(Path("/path/to/repo/src"))
        >>> if await repo.is_repository():
        ...     raw = await repo.raw_blame(Path("/path/to/repo/src/app.py"))
    """

    def __init__(
        self,
        base_dir: Path,
        git_binary: str = DEFAULT_GIT_BINARY,
        timeout: float = DEFAULT_GIT_TIMEOUT,
        log: Logger | None = None,
    ):
        """Initialize the gateway.

        Args:
            base_dir: Directory git runs in (the requested file's directory)
            git_binary: Git executable name or path
            timeout: Seconds allowed per git invocation
            log: Logger for command tracing
        """
        self.base_dir = base_dir
        self.git_binary = git_binary
        self.timeout = timeout
        self.log = log or logger.bind(component="git")

    async def _run(self, *args: str) -> str:
        """Run ``git <args>`` in ``base_dir`` and return stdout.

        Raises:
            GitNotAvailableError: If the git binary cannot be executed
            GitTimeoutError: If git does not finish in time
            GitCommandError: If git exits non-zero
        """
        started = time.perf_counter()
        try:
            process = await asyncio.create_subprocess_exec(
                self.git_binary,
                *CONFIG_OVERRIDES,
                *args,
                cwd=self.base_dir,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except FileNotFoundError as e:
            raise GitNotAvailableError(
                f"Git binary not found: {self.git_binary}"
            ) from e
        except NotADirectoryError as e:
            raise GitCommandError(
                f"Not a directory: {self.base_dir}", args_list=list(args)
            ) from e

        try:
            stdout, stderr = await asyncio.wait_for(
                process.communicate(), timeout=self.timeout
            )
        except TimeoutError as e:
            process.kill()
            await process.wait()
            raise GitTimeoutError(
                f"git {args[0]} timed out after {self.timeout:g} seconds",
                context={"args": list(args), "base_dir": str(self.base_dir)},
            ) from e

        duration_ms = (time.perf_counter() - started) * 1000
        self.log.debug(
            f"git {' '.join(args)} exited {process.returncode} in {duration_ms:.1f}ms"
        )

        if process.returncode != 0:
            error_msg = stderr.decode("utf-8", errors="replace").strip()
            raise GitCommandError(
                f"git {args[0]} failed: {error_msg or 'unknown error'}",
                args_list=list(args),
                returncode=process.returncode,
                stderr=error_msg,
            )

        return stdout.decode("utf-8", errors="replace")

    async def is_repository(self) -> bool:
        """Check whether ``base_dir`` is inside a git work tree."""
        try:
            output = await self._run("rev-parse", "--is-inside-work-tree")
        except GitCommandError:
            return False
        return output.strip() == "true"

    async def raw_blame(self, file_path: Path) -> str:
        """Return ``git blame --porcelain --line-porcelain`` output for a file.

        Args:
            file_path: Absolute path of the file; passed with forward slashes
        """
        return await self._run(
            "blame", "--porcelain", "--line-porcelain", "--", file_path.as_posix()
        )

    async def resolve_revision(self, ref: str) -> str:
        """Resolve ``ref`` to a full commit hash.

        Raises:
            RevisionNotFoundError: If ``ref`` does not name a commit here
        """
        try:
            output = await self._run(
                "rev-parse", "--verify", "--quiet", f"{ref}^{{commit}}"
            )
        except GitCommandError as e:
            raise RevisionNotFoundError(
                f"Commit not found in repository at {self.base_dir}: {ref}",
                context={"commit_hash": ref, "base_dir": str(self.base_dir)},
            ) from e

        resolved = output.strip()
        if not resolved:
            raise RevisionNotFoundError(
                f"Commit not found in repository at {self.base_dir}: {ref}",
                context={"commit_hash": ref, "base_dir": str(self.base_dir)},
            )
        return resolved

    async def show_header(self, commit_hash: str) -> str:
        """Return the ``fuller`` header and message, without the patch."""
        return await self._run(
            "show",
            "--no-patch",
            "--no-color",
            "--no-decorate",
            "--format=fuller",
            commit_hash,
        )

    async def show_name_status(self, commit_hash: str) -> str:
        """Return the per-file change kinds for a commit."""
        return await self._run(
            "show", "--name-status", "--no-color", "--pretty=format:", commit_hash
        )

    async def show_numstat(self, commit_hash: str) -> str:
        """Return the per-file added/removed line counts for a commit."""
        return await self._run(
            "show", "--numstat", "--no-color", "--pretty=format:", commit_hash
        )

    async def show_full_diff(self, commit_hash: str) -> str:
        """Return ``git show`` output: header, message and full patch."""
        return await self._run("show", "--no-color", *DIFF_PREFIXES, commit_hash)

    async def show_patches(self, commit_hash: str) -> str:
        """Return only the patch text of a commit."""
        return await self._run(
            "show",
            "--pretty=format:",
            "--patch",
            "--no-color",
            *DIFF_PREFIXES,
            commit_hash,
        )
