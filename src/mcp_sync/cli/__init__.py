"""Command-line interface for MCP Sync."""
