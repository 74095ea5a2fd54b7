"""
Config normalization for MCP items.

Parses opaque configuration documents into the tagged ``ParsedConfig``
union and derives the display classification and description. Parsing is
lenient and never raises; submissions go through
``mcp_sync.utils.validators.validate_config_document`` instead.
"""

import json
from typing import Any, Dict, Optional, Union

from pydantic import ValidationError as PydanticValidationError

from mcp_sync.core.models import (
    LOCAL_TYPE_TAGS,
    ConfigKind,
    LocalConfig,
    MCPItem,
    ParsedConfig,
    RemoteConfig,
    UnknownConfig,
)
from mcp_sync.utils.logging import get_logger

logger = get_logger(__name__)

REMOTE_FIELDS = ("url", "headers")
LOCAL_FIELDS = ("command", "args", "env")


def parse(raw: Union[str, Dict[str, Any], None]) -> ParsedConfig:
    """
    Parse a configuration document.

    Args:
        raw: JSON text or a decoded document

    Returns:
        ``LocalConfig`` or ``RemoteConfig`` for well-formed documents,
        ``UnknownConfig`` for objects with unexpected field shapes and
        an empty ``RemoteConfig`` for anything malformed.
    """
    document = _decode(raw)
    if document is None:
        return RemoteConfig(url="", headers={})

    probe = UnknownConfig(raw=document)
    is_local = probe.has_command or probe.type_tag in LOCAL_TYPE_TAGS
    fields = LOCAL_FIELDS if is_local else REMOTE_FIELDS
    model = LocalConfig if is_local else RemoteConfig

    payload = {key: document[key] for key in fields if key in document}
    payload["extra"] = {key: value for key, value in document.items() if key not in fields}

    try:
        return model.model_validate(payload)
    except PydanticValidationError as e:
        logger.debug(f"Config fields have unexpected shapes, keeping raw document: {e}")
        return probe


def classify(parsed: ParsedConfig) -> ConfigKind:
    """
    Classify a parsed configuration as local or remote.

    A command always wins, then a ``stdio``/``local`` type tag; anything
    else is remote.
    """
    if parsed.has_command:
        return ConfigKind.LOCAL
    if parsed.type_tag in LOCAL_TYPE_TAGS:
        return ConfigKind.LOCAL
    return ConfigKind.REMOTE


def describe(item: MCPItem, parsed: Optional[ParsedConfig] = None) -> str:
    """
    Get the display description of an item.

    An explicit description wins, then the remote URL, then the command
    joined with its arguments.
    """
    if item.description:
        return item.description

    if parsed is None:
        parsed = parse(item.raw_config)
    document = parsed.to_raw()

    url = document.get("url")
    if isinstance(url, str) and url:
        return url

    command = document.get("command")
    if isinstance(command, list):
        return " ".join(str(part) for part in command)
    if isinstance(command, str) and command:
        args = document.get("args")
        args = args if isinstance(args, list) else []
        return " ".join([command, *(str(arg) for arg in args)])

    return ""


def _decode(raw: Union[str, Dict[str, Any], None]) -> Optional[Dict[str, Any]]:
    if isinstance(raw, str):
        try:
            raw = json.loads(raw)
        except (ValueError, RecursionError) as e:
            logger.warning(f"Malformed MCP config, treating as remote: {e}")
            return None
    if not isinstance(raw, dict):
        return None
    if any(not isinstance(key, str) for key in raw):
        logger.warning("MCP config has non-string keys, treating as remote")
        return None
    return raw
