"""Blame and revision-detail queries.

``GitHistoryService`` validates a request, scopes a ``GitRepository`` to the
requested file's directory, fetches raw git output and hands it to the parsers.
It keeps no state between requests, so concurrent calls need no coordination.
"""

from __future__ import annotations

import os
import time
from collections.abc import Callable
from pathlib import Path
from typing import TYPE_CHECKING

from loguru import logger

from ..config.settings import ServerSettings
from .blame_parser import parse_blame_porcelain
from .commit_detail import CommitDetailAssembler, DiffOptions
from .exceptions import PathNotFoundError, RepositoryError, ValidationError
from .git import GitRepository
from .line_range import filter_line_range
from .models import BlameRequest, BlameResult, RevisionDetail, RevisionDetailRequest

if TYPE_CHECKING:
    from loguru import Logger

RepositoryFactory = Callable[[Path], GitRepository]


class GitHistoryService:
    """Answers ``git_blame`` and ``git_commit_detail`` requests."""

    def __init__(
        self,
        settings: ServerSettings | None = None,
        log: Logger | None = None,
        repository_factory: RepositoryFactory | None = None,
    ):
        """Initialize the service.

        Args:
            settings: Server settings (git binary, timeout, short hash length)
            log: Logger passed down to the gateway and assembler
            repository_factory: Builds a gateway for a directory; defaults to
                ``GitRepository`` configured from ``settings``
        """
        self.settings = settings or ServerSettings()
        self.log = log or logger.bind(component="service")
        self.repository_factory = repository_factory or self._default_repository

    def _default_repository(self, base_dir: Path) -> GitRepository:
        return GitRepository(
            base_dir,
            git_binary=self.settings.git_binary,
            timeout=self.settings.git_timeout,
            log=self.log,
        )

    @staticmethod
    def _resolve_file(file_path: str) -> Path:
        """Validate ``file_path`` and return it as an absolute Path.

        Raises:
            ValidationError: If the path is empty, relative, a directory or unreadable
            PathNotFoundError: If nothing exists at the path
        """
        if not file_path or not file_path.strip():
            raise ValidationError("File path is required")

        path = Path(file_path)
        if not path.is_absolute():
            raise ValidationError(
                f"File path must be absolute: {file_path}",
                context={"file_path": file_path},
            )

        path = Path(os.path.normpath(path))
        if not path.exists():
            raise PathNotFoundError(
                f"File does not exist: {path}", context={"file_path": str(path)}
            )
        if not path.is_file():
            raise ValidationError(
                f"Path is not a file: {path}", context={"file_path": str(path)}
            )
        if not os.access(path, os.R_OK):
            raise ValidationError(
                f"File is not readable: {path}", context={"file_path": str(path)}
            )
        return path

    async def _open_repository(self, path: Path) -> GitRepository:
        repository = self.repository_factory(path.parent)
        if not await repository.is_repository():
            raise RepositoryError(
                "Not in a git repository", context={"base_dir": str(path.parent)}
            )
        return repository

    async def get_blame_info(self, request: BlameRequest) -> BlameResult:
        """Blame a file, optionally restricted to a line window.

        Args:
            request: File path and optional inclusive line bounds

        Returns:
            BlameResult with counts, the effective window and the records

        Raises:
            ValidationError: Missing/invalid path or line bounds
            PathNotFoundError: File does not exist
            RepositoryError: File is not inside a git work tree
            UpstreamError: git blame failed
        """
        for name, bound in (("lineFrom", request.line_from), ("lineTo", request.line_to)):
            if bound is not None and bound < 1:
                raise ValidationError(f"{name} must be >= 1, got {bound}")

        path = self._resolve_file(request.file_path)
        repository = await self._open_repository(path)

        raw = await repository.raw_blame(path)
        lines = parse_blame_porcelain(raw)
        window = filter_line_range(lines, request.line_from, request.line_to)

        self.log.info(
            f"Blamed {path}: {window.requested}/{window.total} lines "
            f"in range {window.effective_from}-{window.effective_to}"
        )

        return BlameResult(
            file_path=str(path),
            total_lines=window.total,
            requested_lines=window.requested,
            line_range=window.as_line_range(),
            blame=window.lines,
        )

    async def get_commit_detail(self, request: RevisionDetailRequest) -> RevisionDetail:
        """Describe one commit of the repository containing ``request.file_path``.

        Args:
            request: Commit hash, scoping file path and diff options

        Returns:
            RevisionDetail for the resolved commit

        Raises:
            ValidationError: Missing commit hash or file path
            PathNotFoundError: File does not exist
            RepositoryError: File is not inside a git work tree
            RevisionNotFoundError: Commit cannot be resolved in that repository
            UpstreamError: A mandatory git call failed
        """
        started = time.perf_counter()
        commit_hash = (request.commit_hash or "").strip()

        self.log.info(
            f"Starting commit detail for {commit_hash or '<missing>'} "
            f"(includeDiff={request.include_diff}, filePath={request.file_path})"
        )

        if not commit_hash:
            raise ValidationError("Commit hash is required")
        if commit_hash.startswith("-"):
            raise ValidationError(
                f"Invalid commit hash: {commit_hash}", context={"commit_hash": commit_hash}
            )

        path = self._resolve_file(request.file_path)
        repository = await self._open_repository(path)
        self.log.info(f"Git repository scoped to {path.parent}")

        resolved = await repository.resolve_revision(commit_hash)
        self.log.info(f"Commit {commit_hash} verified as {resolved}")

        header_text = await repository.show_header(resolved)
        status_text = await repository.show_name_status(resolved)
        numstat_text = await repository.show_numstat(resolved)

        self.log.debug(
            f"git show completed: header={len(header_text)} "
            f"nameStatus={len(status_text)} numstat={len(numstat_text)} chars"
        )

        assembler = CommitDetailAssembler(
            repository,
            log=self.log,
            short_hash_length=self.settings.short_hash_length,
        )
        detail = await assembler.assemble(
            resolved,
            header_text,
            status_text,
            numstat_text,
            DiffOptions(
                include_diff=request.include_diff,
                include_file_diffs=request.include_file_diffs,
            ),
        )

        duration_ms = (time.perf_counter() - started) * 1000
        self.log.info(
            f"getCommitDetail completed for {detail.hash}: "
            f"{detail.files_changed} files, +{detail.insertions}/-{detail.deletions} "
            f"in {duration_ms:.0f}ms"
        )
        return detail
