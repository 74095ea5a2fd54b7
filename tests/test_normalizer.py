"""
Test config normalization of MCP items.
"""

import json

import pytest

from mcp_sync.core import normalizer
from mcp_sync.core.models import (
    ConfigKind,
    LocalConfig,
    MCPItem,
    RemoteConfig,
    Source,
    UnknownConfig,
)


def _item(raw_config, description=None, source=Source.CLAUDE):
    return MCPItem(name="item", raw_config=raw_config, source=source, description=description)


@pytest.mark.unit
class TestParse:
    """Test lenient parsing into the tagged union."""

    def test_remote_document(self):
        """Test a URL document parses as remote."""
        parsed = normalizer.parse({"type": "remote", "url": "https://x/mcp"})

        assert isinstance(parsed, RemoteConfig)
        assert parsed.url == "https://x/mcp"
        assert parsed.extra == {"type": "remote"}

    def test_local_document_from_json_text(self):
        """Test JSON text with a command parses as local."""
        parsed = normalizer.parse('{"command": "npx", "args": ["-y", "server"]}')

        assert isinstance(parsed, LocalConfig)
        assert parsed.command == "npx"
        assert parsed.args == ["-y", "server"]

    @pytest.mark.parametrize("raw", ["{not json", "[1, 2]", "42", "null", None])
    def test_malformed_input_yields_empty_remote(self, raw):
        """Test parse never raises on malformed input."""
        parsed = normalizer.parse(raw)

        assert isinstance(parsed, RemoteConfig)
        assert parsed.url == ""
        assert parsed.headers == {}

    def test_non_string_keys_yield_empty_remote(self):
        """Test a decoded object with non-string keys does not raise."""
        parsed = normalizer.parse({1: "x", "url": "https://x/mcp"})

        assert isinstance(parsed, RemoteConfig)
        assert parsed.url == ""
        assert parsed.extra == {}

    def test_deeply_nested_json_yields_empty_remote(self):
        """Test JSON text nested past the decoder's recursion limit does not raise."""
        parsed = normalizer.parse("[" * 100000 + "]" * 100000)

        assert isinstance(parsed, RemoteConfig)
        assert parsed.url == ""

    def test_unexpected_field_shapes_keep_raw_document(self):
        """Test objects with odd field types become UnknownConfig."""
        document = {"url": 123, "headers": "nope"}
        parsed = normalizer.parse(document)

        assert isinstance(parsed, UnknownConfig)
        assert parsed.to_raw() == document

    def test_round_trip_preserves_unknown_fields(self):
        """Test unmodeled fields survive in the passthrough bag."""
        document = {
            "type": "http",
            "url": "https://api.example.com/mcp",
            "headers": {"Authorization": "Bearer x"},
            "timeout": 30,
            "transport": {"retries": 2},
        }

        assert normalizer.parse(document).to_raw() == document

    def test_round_trip_does_not_add_defaults(self):
        """Test absent modeled fields stay absent."""
        document = {"command": "uvx", "cwd": "/srv"}

        assert normalizer.parse(json.dumps(document)).to_raw() == document


@pytest.mark.unit
class TestClassify:
    """Test local/remote classification."""

    def test_command_wins_over_remote_tag(self):
        """Test a command makes any document local."""
        parsed = normalizer.parse({"type": "remote", "url": "https://x", "command": "node"})
        assert normalizer.classify(parsed) is ConfigKind.LOCAL

    @pytest.mark.parametrize("tag", ["stdio", "local"])
    def test_local_type_tags(self, tag):
        """Test stdio and local tags classify as local without a command."""
        assert normalizer.classify(normalizer.parse({"type": tag})) is ConfigKind.LOCAL

    def test_mcp_type_fallback(self):
        """Test mcp_type is consulted when type is missing."""
        assert normalizer.classify(normalizer.parse({"mcp_type": "stdio"})) is ConfigKind.LOCAL

    @pytest.mark.parametrize("document", [
        {"type": "http", "url": "https://x"},
        {"type": "sse", "url": "https://x"},
        {"url": "https://x"},
        {},
    ])
    def test_remote_by_default(self, document):
        """Test everything else is remote."""
        assert normalizer.classify(normalizer.parse(document)) is ConfigKind.REMOTE

    def test_empty_command_is_not_a_command(self):
        """Test an empty string command does not force local."""
        assert normalizer.classify(normalizer.parse({"command": ""})) is ConfigKind.REMOTE

    def test_unknown_variant_with_command(self):
        """Test classification works on UnknownConfig."""
        parsed = normalizer.parse({"command": "node", "args": "not-a-list"})

        assert isinstance(parsed, UnknownConfig)
        assert normalizer.classify(parsed) is ConfigKind.LOCAL


@pytest.mark.unit
class TestDescribe:
    """Test display descriptions."""

    def test_explicit_description_wins(self):
        """Test the item's description is used first."""
        item = _item({"url": "https://x"}, description="Weather lookup")
        assert normalizer.describe(item) == "Weather lookup"

    def test_url(self):
        """Test remote items describe as their URL."""
        assert normalizer.describe(_item({"type": "remote", "url": "https://x/mcp"})) == "https://x/mcp"

    def test_command_with_args(self):
        """Test Claude style command and args are joined."""
        item = _item({"command": "npx", "args": ["-y", "server-github"]})
        assert normalizer.describe(item) == "npx -y server-github"

    def test_command_list(self):
        """Test OpenCode style command lists are joined."""
        item = _item({"type": "local", "command": ["bunx", "server"]}, source=Source.OPENCODE)
        assert normalizer.describe(item) == "bunx server"

    def test_nothing_to_describe(self):
        """Test an empty description when no source of text exists."""
        assert normalizer.describe(_item({"type": "stdio"})) == ""

    def test_reuses_given_parse(self):
        """Test an already parsed config is used as is."""
        item = _item({"url": "https://ignored"})
        parsed = normalizer.parse({"url": "https://used"})

        assert normalizer.describe(item, parsed) == "https://used"
