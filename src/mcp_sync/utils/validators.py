"""
Validation utilities for MCP Sync.

Strict checks applied to user submissions before any backend call.
"""

import json
from typing import Any, Dict, Union

from mcp_sync.core.exceptions import ParseError, ValidationError
from mcp_sync.utils.logging import get_logger

logger = get_logger(__name__)

MAX_NAME_LENGTH = 100


def validate_item_name(name: str) -> str:
    """
    Validate an MCP item name.

    Args:
        name: Item name to validate

    Returns:
        The name, unchanged

    Raises:
        ValidationError: If name is invalid
    """
    if not name or not name.strip():
        raise ValidationError("MCP name cannot be empty")

    if len(name) > MAX_NAME_LENGTH:
        raise ValidationError(f"MCP name too long (max {MAX_NAME_LENGTH} characters)")

    if name != name.strip():
        raise ValidationError("MCP name cannot start or end with whitespace")

    return name


def validate_skill_name(name: str) -> str:
    """Validate a skill name."""
    if not name or not name.strip():
        raise ValidationError("Skill name cannot be empty")
    return name.strip()


def validate_config_document(raw: Union[str, Dict[str, Any]]) -> Dict[str, Any]:
    """
    Strictly validate an MCP configuration document for submission.

    Unlike display-time parsing this never falls back to a default.

    Args:
        raw: JSON text or an already decoded document

    Returns:
        The decoded document

    Raises:
        ParseError: If the text is not valid JSON
        ValidationError: If the document is not a JSON object
    """
    if isinstance(raw, str):
        try:
            document = json.loads(raw)
        except json.JSONDecodeError as e:
            raise ParseError(f"Invalid JSON config: {e}") from e
    else:
        document = raw

    if not isinstance(document, dict):
        raise ValidationError(
            f"MCP config must be a JSON object, got {type(document).__name__}"
        )

    return document
