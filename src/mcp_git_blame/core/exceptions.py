"""Typed exception hierarchy for mcp-git-blame.

Hierarchy
---------
GitBlameError (base)
├── ValidationError        – missing / empty / malformed request fields
├── NotFoundError          – something the request names does not exist
│   ├── PathNotFoundError
│   └── RevisionNotFoundError
├── RepositoryError        – target directory is not under version control
├── UpstreamError          – a mandatory git call failed
│   ├── GitNotAvailableError
│   ├── GitCommandError
│   └── GitTimeoutError
└── ConfigError            – configuration loading / validation errors

Every request-level failure raised by the service derives from ``GitBlameError``
so the MCP layer can turn it into a single descriptive error result.  The
underlying cause is chained with ``raise ... from``.
"""

from typing import Any


class GitBlameError(Exception):
    """Base exception for mcp-git-blame."""

    def __init__(self, message: str, context: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.context = context or {}


# ── Request layer ───────────────────────────────────────────────────────


class ValidationError(GitBlameError):
    """A required request field is missing, empty or malformed."""

    pass


# ── Lookup layer ────────────────────────────────────────────────────────


class NotFoundError(GitBlameError):
    """A file or revision named by the request does not exist."""

    pass


class PathNotFoundError(NotFoundError):
    """The requested file does not exist on disk."""

    pass


class RevisionNotFoundError(NotFoundError):
    """The revision cannot be resolved inside the scoped repository."""

    pass


# ── Repository layer ────────────────────────────────────────────────────


class RepositoryError(GitBlameError):
    """The target directory is not inside a git work tree."""

    pass


# ── Upstream (git process) layer ────────────────────────────────────────


class UpstreamError(GitBlameError):
    """A mandatory git invocation failed."""

    pass


class GitNotAvailableError(UpstreamError):
    """Git binary is not available in PATH."""

    pass


class GitCommandError(UpstreamError):
    """Git exited with a non-zero status.

    Attributes:
        args_list: The git arguments (without the binary name)
        returncode: Process exit status
        stderr: Captured standard error, stripped
    """

    def __init__(
        self,
        message: str,
        args_list: list[str] | None = None,
        returncode: int | None = None,
        stderr: str = "",
    ) -> None:
        super().__init__(
            message,
            context={
                "args": args_list or [],
                "returncode": returncode,
                "stderr": stderr,
            },
        )
        self.args_list = args_list or []
        self.returncode = returncode
        self.stderr = stderr


class GitTimeoutError(UpstreamError):
    """Git did not finish within the configured timeout."""

    pass


# ── Configuration layer ─────────────────────────────────────────────────


class ConfigError(GitBlameError):
    """Configuration / validation errors."""

    pass
