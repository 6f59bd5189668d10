"""MCP Git Blame - line attribution and commit detail over MCP."""

__version__ = "1.0.0"

from .core.exceptions import GitBlameError

__all__ = ["GitBlameError", "__version__"]
