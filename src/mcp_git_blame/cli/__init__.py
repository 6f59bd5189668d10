"""CLI for MCP Git Blame."""
