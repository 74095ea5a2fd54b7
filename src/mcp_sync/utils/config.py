"""
Configuration management for MCP Sync.

Provides hierarchical configuration loading with validation using Pydantic.
Supports TOML configuration files and environment variable overrides.
"""

import os
from pathlib import Path
from typing import TYPE_CHECKING, Any, Dict, List, Optional, Union

import toml
from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from mcp_sync.core.exceptions import ConfigError
from mcp_sync.utils.logging import get_logger

if TYPE_CHECKING:
    from mcp_sync.backend.filesystem import FileBackend

logger = get_logger(__name__)

DEFAULT_CONFIG_FILES = [
    "~/.config/mcp-sync/config.toml",
    "./.mcp-sync.toml",
]


class LoggingConfig(BaseModel):
    """Logging configuration."""

    enabled: bool = Field(default=True, description="Enable logging completely")
    level: str = Field(default="INFO", description="File logging level")
    console_level: str = Field(default="WARNING", description="Console logging level")
    format_type: str = Field(default="text", description="Log format (text/json)")
    file: Optional[str] = Field(default=None, description="Log file path")
    enable_rich: bool = Field(default=True, description="Enable Rich console output")

    @field_validator("level", "console_level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        """Validate logging level."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"Invalid log level: {v}")
        return v.upper()

    @field_validator("format_type")
    @classmethod
    def validate_format_type(cls, v: str) -> str:
        """Validate format type."""
        if v not in ["text", "json"]:
            raise ValueError(f"Invalid format type: {v}")
        return v


class PathsConfig(BaseModel):
    """Locations of the files owned by the filesystem backend."""

    opencode_config: str = Field(
        default="~/.config/opencode/opencode.json",
        description="OpenCode configuration file"
    )
    claude_config: str = Field(
        default="~/.claude.json",
        description="Claude Code configuration file"
    )
    skills_config: str = Field(
        default="~/.config/opencode/oh-my-opencode.json",
        description="Skills configuration file"
    )
    backup_dir: str = Field(
        default="~/.config/openclaude-tools/.openclaudesync",
        description="Directory holding one MCP backup per source"
    )


class Config(BaseSettings):
    """Main configuration class."""

    model_config = SettingsConfigDict(
        env_prefix="MCP_SYNC_",
        env_nested_delimiter="__",
        case_sensitive=False,
    )

    debug: bool = Field(default=False, description="Enable debug mode")
    config_dir: str = Field(
        default="~/.config/mcp-sync",
        description="Configuration directory"
    )

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    paths: PathsConfig = Field(default_factory=PathsConfig)

    def get_config_dir(self) -> Path:
        """Get configuration directory path."""
        return Path(os.path.expanduser(self.config_dir))

    def get_log_file(self) -> Optional[Path]:
        """Get log file path."""
        if self.logging.file:
            log_path = Path(os.path.expanduser(self.logging.file))
            if not log_path.is_absolute():
                log_path = self.get_config_dir() / log_path
            return log_path
        return None

    def resolve_path(self, key: str) -> Path:
        """Expand one of the ``paths`` entries."""
        return Path(os.path.expanduser(getattr(self.paths, key)))

    def build_backend(self) -> "FileBackend":
        """Create the filesystem backend for the configured paths."""
        from mcp_sync.backend.filesystem import FileBackend

        return FileBackend(
            opencode_path=self.resolve_path("opencode_config"),
            claude_path=self.resolve_path("claude_config"),
            skills_path=self.resolve_path("skills_config"),
            backup_dir=self.resolve_path("backup_dir"),
        )


class ConfigManager:
    """Configuration manager with hierarchical loading."""

    def __init__(self):
        self._config: Optional[Config] = None

    def load_config(
        self,
        config_files: Optional[List[Union[str, Path]]] = None,
        **overrides: Any,
    ) -> Config:
        """
        Load configuration from multiple sources.

        Later files win over earlier ones; keyword overrides win over files.

        Args:
            config_files: List of configuration files to load
            **overrides: Configuration overrides

        Returns:
            Loaded configuration

        Raises:
            ConfigError: If the merged configuration is invalid
        """
        if self._config is not None and config_files is None and not overrides:
            return self._config

        if config_files is None:
            config_files = DEFAULT_CONFIG_FILES

        config_data: Dict[str, Any] = {}
        for config_file in config_files:
            file_path = Path(os.path.expanduser(str(config_file)))
            if file_path.exists():
                try:
                    _deep_update(config_data, toml.load(file_path))
                    logger.debug(f"Loaded configuration from {file_path}")
                except (toml.TomlDecodeError, OSError) as e:
                    logger.warning(f"Failed to load config from {file_path}: {e}")

        _deep_update(config_data, overrides)

        try:
            self._config = Config(**config_data)
        except ValueError as e:
            raise ConfigError(f"Invalid configuration: {e}")

        return self._config

    def get_config(self) -> Config:
        """Get current configuration."""
        if self._config is None:
            return self.load_config()
        return self._config

    def reload_config(self, **overrides: Any) -> Config:
        """Reload configuration."""
        self._config = None
        return self.load_config(**overrides)


def _deep_update(target: Dict[str, Any], updates: Dict[str, Any]) -> None:
    for key, value in updates.items():
        if isinstance(value, dict) and isinstance(target.get(key), dict):
            _deep_update(target[key], value)
        else:
            target[key] = value


_config_manager = ConfigManager()

load_config = _config_manager.load_config
get_config = _config_manager.get_config
reload_config = _config_manager.reload_config
