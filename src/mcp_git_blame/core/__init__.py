"""Core functionality for MCP Git Blame."""

from .exceptions import (
    ConfigError,
    GitBlameError,
    GitCommandError,
    GitNotAvailableError,
    GitTimeoutError,
    NotFoundError,
    PathNotFoundError,
    RepositoryError,
    RevisionNotFoundError,
    UpstreamError,
    ValidationError,
)
from .git import GitRepository
from .models import (
    AttributionLine,
    BlameRequest,
    BlameResult,
    ChangedFile,
    LineRange,
    RevisionDetail,
    RevisionDetailRequest,
)

__all__ = [
    # Exceptions
    "ConfigError",
    "GitBlameError",
    "GitCommandError",
    "GitNotAvailableError",
    "GitTimeoutError",
    "NotFoundError",
    "PathNotFoundError",
    "RepositoryError",
    "RevisionNotFoundError",
    "UpstreamError",
    "ValidationError",
    # Git
    "GitRepository",
    # Models
    "AttributionLine",
    "BlameRequest",
    "BlameResult",
    "ChangedFile",
    "LineRange",
    "RevisionDetail",
    "RevisionDetailRequest",
]
