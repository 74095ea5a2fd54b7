"""
Test format conversion between OpenCode and Claude Code entries.
"""

import pytest

from mcp_sync.core.conversion import claude_to_opencode, convert, opencode_to_claude
from mcp_sync.core.models import Source


@pytest.mark.unit
class TestOpenCodeToClaude:
    """Test OpenCode to Claude Code conversion."""

    def test_local_command_list_is_split(self):
        """Test the command list becomes command plus args."""
        result = opencode_to_claude({
            "type": "local",
            "command": ["npx", "-y", "server"],
            "environment": {"KEY": "value"},
            "enabled": False,
            "description": "dropped",
        })

        assert result == {
            "command": "npx",
            "args": ["-y", "server"],
            "env": {"KEY": "value"},
            "type": "stdio",
        }

    def test_remote(self):
        """Test remote entries keep url and headers."""
        result = opencode_to_claude({
            "type": "remote",
            "url": "https://x/mcp",
            "headers": {"X-Key": "1"},
        })

        assert result == {"url": "https://x/mcp", "headers": {"X-Key": "1"}, "type": "http"}

    def test_single_element_command(self):
        """Test no args key is produced for a bare command."""
        assert opencode_to_claude({"command": ["uvx"]}) == {"command": "uvx", "type": "stdio"}


@pytest.mark.unit
class TestClaudeToOpenCode:
    """Test Claude Code to OpenCode conversion."""

    def test_local(self):
        """Test command and args merge into one list."""
        result = claude_to_opencode({
            "type": "stdio",
            "command": "npx",
            "args": ["-y", "server"],
            "env": {"KEY": "value"},
        })

        assert result == {
            "type": "local",
            "enabled": True,
            "command": ["npx", "-y", "server"],
            "environment": {"KEY": "value"},
        }

    def test_remote(self):
        """Test remote entries are enabled and typed remote."""
        result = claude_to_opencode({"type": "http", "url": "https://x/mcp", "timeout": 10})

        assert result == {"type": "remote", "enabled": True, "url": "https://x/mcp", "timeout": 10}


@pytest.mark.unit
class TestConvert:
    """Test direction dispatch."""

    def test_same_source_is_a_copy(self):
        """Test converting within a source returns an equal new dict."""
        config = {"url": "https://x"}
        result = convert(config, Source.CLAUDE, Source.CLAUDE)

        assert result == config
        assert result is not config

    def test_does_not_modify_input(self):
        """Test the input document is untouched."""
        config = {"command": ["npx", "server"]}
        convert(config, Source.OPENCODE, Source.CLAUDE)

        assert config == {"command": ["npx", "server"]}

    def test_round_trip_local(self):
        """Test a Claude entry survives a round trip through OpenCode."""
        config = {"command": "npx", "args": ["server"], "env": {"A": "1"}, "type": "stdio"}
        there = convert(config, Source.CLAUDE, Source.OPENCODE)

        assert convert(there, Source.OPENCODE, Source.CLAUDE) == config
