"""MCP server integration for MCP Git Blame."""
