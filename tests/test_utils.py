"""
Test utility functions of MCP Sync.
"""

import json
import logging

import pytest

from mcp_sync.core.exceptions import (
    ConfigError,
    MCPSyncError,
    NotFoundError,
    OperationInProgressError,
    ParseError,
    ValidationError,
)
from mcp_sync.core.models import Source
from mcp_sync.core.single_flight import SingleFlight
from mcp_sync.utils.config import Config, ConfigManager
from mcp_sync.utils.logging import JSONFormatter, SyncLogger
from mcp_sync.utils.validators import (
    validate_config_document,
    validate_item_name,
    validate_skill_name,
)


class TestValidators:
    """Test validation functions."""

    def test_validate_item_name(self):
        """Test item name validation."""
        assert validate_item_name("weather") == "weather"
        assert validate_item_name("my server.v2") == "my server.v2"

        with pytest.raises(ValidationError):
            validate_item_name("")
        with pytest.raises(ValidationError):
            validate_item_name("   ")
        with pytest.raises(ValidationError):
            validate_item_name(" padded")
        with pytest.raises(ValidationError):
            validate_item_name("a" * 101)

    def test_validate_skill_name(self):
        """Test skill names are stripped."""
        assert validate_skill_name(" review ") == "review"

        with pytest.raises(ValidationError):
            validate_skill_name("")

    def test_validate_config_document(self):
        """Test strict document validation."""
        assert validate_config_document('{"url": "https://x"}') == {"url": "https://x"}
        assert validate_config_document({"command": "npx"}) == {"command": "npx"}

        with pytest.raises(ParseError) as exc_info:
            validate_config_document("{oops")
        assert "Invalid JSON config" in exc_info.value.message
        assert isinstance(exc_info.value.__cause__, json.JSONDecodeError)

        with pytest.raises(ValidationError):
            validate_config_document("[]")
        with pytest.raises(ValidationError):
            validate_config_document('"text"')


class TestExceptions:
    """Test the error hierarchy."""

    def test_codes_and_str(self):
        """Test default codes appear in the string form."""
        error = NotFoundError("MCP 'x' not found", details={"name": "x"})

        assert isinstance(error, MCPSyncError)
        assert str(error) == "[NOT_FOUND] MCP 'x' not found"
        assert error.to_dict() == {
            "error": "NotFoundError",
            "message": "MCP 'x' not found",
            "error_code": "NOT_FOUND",
            "details": {"name": "x"},
        }

    def test_explicit_code(self):
        """Test an explicit code overrides the default."""
        assert ParseError("bad", error_code="JSON").error_code == "JSON"


class TestSingleFlight:
    """Test the keyed in-flight guard."""

    def setup_method(self):
        """Set up test fixtures."""
        self.single_flight = SingleFlight()

    def test_acquire_and_release(self):
        """Test a key can only be held once."""
        key = ("backup", Source.CLAUDE)

        assert self.single_flight.try_acquire(key)
        assert not self.single_flight.try_acquire(key)
        assert self.single_flight.is_running(key)

        self.single_flight.release(key)
        assert not self.single_flight.is_running(key)

    def test_guard_rejects_reentry(self):
        """Test the guard raises while the key is held."""
        key = ("restore", Source.OPENCODE)

        with self.single_flight.guard(key):
            with pytest.raises(OperationInProgressError) as exc_info:
                with self.single_flight.guard(key):
                    pass

        assert "restore opencode" in exc_info.value.message
        assert not self.single_flight.is_running(key)

    def test_guard_releases_on_error(self):
        """Test the key is released when the block raises."""
        key = ("sync", Source.CLAUDE)

        with pytest.raises(RuntimeError):
            with self.single_flight.guard(key):
                raise RuntimeError("boom")

        assert not self.single_flight.is_running(key)


class TestConfig:
    """Test configuration loading."""

    def test_defaults(self):
        """Test default paths point at the tools' files."""
        config = Config()

        assert config.paths.claude_config == "~/.claude.json"
        assert config.paths.opencode_config.endswith("opencode/opencode.json")
        assert config.logging.console_level == "WARNING"
        assert config.resolve_path("claude_config").name == ".claude.json"

    def test_env_override(self, monkeypatch):
        """Test nested settings can be set from the environment."""
        monkeypatch.setenv("MCP_SYNC_PATHS__BACKUP_DIR", "/tmp/mcp-backups")
        monkeypatch.setenv("MCP_SYNC_DEBUG", "true")

        config = Config()

        assert config.paths.backup_dir == "/tmp/mcp-backups"
        assert config.debug is True

    def test_load_toml_files(self, tmp_path):
        """Test later files override earlier ones."""
        base = tmp_path / "base.toml"
        base.write_text('[paths]\nclaude_config = "/a/claude.json"\nskills_config = "/a/skills.json"\n')
        local = tmp_path / "local.toml"
        local.write_text('[paths]\nclaude_config = "/b/claude.json"\n')

        config = ConfigManager().load_config(config_files=[base, local])

        assert config.paths.claude_config == "/b/claude.json"
        assert config.paths.skills_config == "/a/skills.json"

    def test_overrides_win(self, tmp_path):
        """Test keyword overrides win over files."""
        path = tmp_path / "config.toml"
        path.write_text('[logging]\nlevel = "DEBUG"\n')

        config = ConfigManager().load_config(config_files=[path], logging={"level": "ERROR"})

        assert config.logging.level == "ERROR"

    def test_invalid_config(self, tmp_path):
        """Test invalid values raise ConfigError."""
        path = tmp_path / "config.toml"
        path.write_text('[logging]\nlevel = "LOUD"\n')

        with pytest.raises(ConfigError):
            ConfigManager().load_config(config_files=[path])

    def test_log_file_relative_to_config_dir(self, tmp_path):
        """Test relative log files live in the config directory."""
        config = Config(config_dir=str(tmp_path), logging={"file": "mcp-sync.log"})

        assert config.get_log_file() == tmp_path / "mcp-sync.log"


class TestLogging:
    """Test logging setup."""

    def test_json_formatter(self):
        """Test records are rendered as JSON with extra fields."""
        record = logging.LogRecord("mcp_sync.test", logging.INFO, __file__, 10, "hello %s", ("world",), None)
        record.source = "claude"

        data = json.loads(JSONFormatter().format(record))

        assert data["message"] == "hello world"
        assert data["level"] == "INFO"
        assert data["source"] == "claude"

    def test_file_logging(self, tmp_path):
        """Test a rotating log file receives records."""
        log_file = tmp_path / "logs" / "mcp-sync.log"
        manager = SyncLogger()
        manager.setup_logging(level="DEBUG", console_level="ERROR", log_file=log_file, force=True)

        manager.get_logger("mcp_sync.test").info("synced weather")
        for handler in logging.getLogger().handlers:
            handler.flush()

        assert "synced weather" in log_file.read_text()
        logging.getLogger().handlers.clear()

    def test_configure_from_config(self):
        """Test a logging section and a console override are applied."""
        from mcp_sync.utils.config import LoggingConfig

        manager = SyncLogger()
        manager.configure(LoggingConfig(enable_rich=False), console_level="DEBUG")

        root = logging.getLogger()
        assert root.level == logging.DEBUG
        assert isinstance(root.handlers[0], logging.StreamHandler)
        root.handlers.clear()

    def test_disabled(self):
        """Test disabled logging only lets critical records through."""
        manager = SyncLogger()
        manager.setup_logging(enabled=False, force=True)

        assert logging.getLogger().level == logging.CRITICAL
        assert logging.getLogger().handlers == []
