"""Core reconciliation, sync and backup engine for MCP Sync."""
