"""
MCP Sync - keep MCP configurations reconciled across OpenCode and Claude Code.

Provides normalization, drift detection, synchronization and per-source
backup/restore of MCP items, with a CLI built on Click and Rich.
"""

__version__ = "1.0.0"
__description__ = "Reconcile, sync and back up MCP configurations across OpenCode and Claude Code"

# Public API
from mcp_sync.core.exceptions import MCPSyncError
from mcp_sync.core.models import MCPItem, Source, SkillConfig, SkillPartition

__all__ = [
    "__version__",
    "__description__",
    "MCPSyncError",
    "MCPItem",
    "Source",
    "SkillConfig",
    "SkillPartition",
]
