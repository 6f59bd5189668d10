"""Allow ``python -m mcp_git_blame``."""

from .cli.main import app

if __name__ == "__main__":
    app()
