"""
Drift detection between the two sources.

Drift is computed by name only: a name present on both sides counts as
synchronized even when its configuration differs. Passing
``compare_content=True`` additionally reports such names as ``diverged``.
"""

import hashlib
import json
from typing import Any, Dict, Iterable

from mcp_sync.core.models import DiffResult, MCPItem


def content_hash(raw_config: Dict[str, Any]) -> str:
    """Stable hash of a configuration document, independent of key order."""
    canonical = json.dumps(raw_config, sort_keys=True, separators=(",", ":"), default=str)
    return hashlib.sha256(canonical.encode("utf-8")).hexdigest()


def compute_diff(
    opencode_items: Iterable[MCPItem],
    claude_items: Iterable[MCPItem],
    compare_content: bool = False,
) -> DiffResult:
    """
    Compute name-level drift.

    Args:
        opencode_items: Items of the OpenCode source
        claude_items: Items of the Claude Code source
        compare_content: Also report shared names with different content

    Returns:
        DiffResult with every list sorted by name
    """
    opencode_by_name = {item.name: item for item in opencode_items}
    claude_by_name = {item.name: item for item in claude_items}

    opencode_names = set(opencode_by_name)
    claude_names = set(claude_by_name)

    diverged = []
    if compare_content:
        diverged = [
            name for name in opencode_names & claude_names
            if content_hash(opencode_by_name[name].raw_config)
            != content_hash(claude_by_name[name].raw_config)
        ]

    return DiffResult(
        only_in_opencode=sorted(opencode_names - claude_names),
        only_in_claude=sorted(claude_names - opencode_names),
        diverged=sorted(diverged),
    )
