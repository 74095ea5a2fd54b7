"""
Format conversion between OpenCode and Claude Code MCP entries.

OpenCode keeps the whole command line in a ``command`` list and the
environment under ``environment``; Claude Code splits ``command``/``args``
and uses ``env``.
"""

from typing import Any, Dict, List

from mcp_sync.core.models import Source
from mcp_sync.utils.logging import get_logger

logger = get_logger(__name__)

SHARED_FIELDS = ("url", "headers", "transport", "timeout")


def opencode_to_claude(config: Dict[str, Any]) -> Dict[str, Any]:
    """
    Convert an OpenCode entry to the Claude Code format.

    ``enabled`` and ``description`` have no Claude Code equivalent and
    are dropped.
    """
    result: Dict[str, Any] = {}

    command = config.get("command")
    if isinstance(command, list):
        if command:
            result["command"] = command[0]
            if len(command) > 1:
                result["args"] = list(command[1:])
    elif command is not None:
        result["command"] = command

    if "environment" in config:
        result["env"] = config["environment"]

    for key in SHARED_FIELDS:
        if key in config:
            result[key] = config[key]

    if "url" in config:
        result["type"] = "http"
    elif "command" in config:
        result["type"] = "stdio"

    return result


def claude_to_opencode(config: Dict[str, Any]) -> Dict[str, Any]:
    """Convert a Claude Code entry to the OpenCode format."""
    result: Dict[str, Any] = {
        "type": "remote" if "url" in config else "local",
        "enabled": True,
    }

    merged_command: List[Any] = []
    command = config.get("command")
    if isinstance(command, str):
        merged_command.append(command)
    elif isinstance(command, list):
        merged_command.extend(command)

    args = config.get("args")
    if isinstance(args, list):
        merged_command.extend(args)

    if merged_command:
        result["command"] = merged_command

    if "env" in config:
        result["environment"] = config["env"]

    for key in (*SHARED_FIELDS, "description"):
        if key in config:
            result[key] = config[key]

    return result


def convert(config: Dict[str, Any], from_source: Source, to_source: Source) -> Dict[str, Any]:
    """
    Convert an entry for storage in ``to_source``.

    Args:
        config: Entry in the ``from_source`` format
        from_source: Ecosystem the entry comes from
        to_source: Ecosystem the entry is written to

    Returns:
        A new document; the input is never modified
    """
    if from_source == to_source:
        return dict(config)

    if to_source is Source.OPENCODE:
        logger.debug("Converting Claude Code format to OpenCode format")
        return claude_to_opencode(config)

    logger.debug("Converting OpenCode format to Claude Code format")
    return opencode_to_claude(config)
