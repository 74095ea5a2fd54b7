"""Utility modules for MCP Sync."""

from mcp_sync.utils.logging import configure_logging, get_logger, setup_logging
from mcp_sync.utils.config import Config, get_config, load_config
from mcp_sync.utils.validators import (
    validate_config_document,
    validate_item_name,
    validate_skill_name,
)

__all__ = [
    "get_logger",
    "setup_logging",
    "configure_logging",
    "Config",
    "get_config",
    "load_config",
    "validate_config_document",
    "validate_item_name",
    "validate_skill_name",
]
