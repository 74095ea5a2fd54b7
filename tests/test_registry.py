"""
Test the source registry.
"""

import pytest
from unittest.mock import AsyncMock

from mcp_sync.backend import MemoryBackend
from mcp_sync.core.exceptions import (
    BackendError,
    DuplicateNameError,
    NotFoundError,
    ParseError,
    ValidationError,
)
from mcp_sync.core.models import Source
from mcp_sync.core.registry import SourceRegistry

from conftest import FILESYSTEM_CONFIG, GITHUB_CONFIG, WEATHER_CONFIG


@pytest.mark.unit
class TestSourceRegistry:
    """Test SourceRegistry reads and mutations."""

    def setup_method(self):
        """Set up test fixtures."""
        self.backend = MemoryBackend(entries={
            Source.OPENCODE: {"filesystem": FILESYSTEM_CONFIG},
            Source.CLAUDE: {"github": GITHUB_CONFIG},
        })
        self.registry = SourceRegistry(self.backend)

    @pytest.mark.asyncio
    async def test_load_all(self):
        """Test loading replaces state from the backend."""
        collections = await self.registry.load_all()

        assert [item.name for item in collections.opencode] == ["filesystem"]
        assert self.registry.names(Source.CLAUDE) == ["github"]
        assert self.registry.loaded
        assert not self.registry.loading
        assert self.registry.error is None

    @pytest.mark.asyncio
    async def test_opencode_items_carry_enabled_and_description(self):
        """Test OpenCode items read enabled and description from their config."""
        self.backend.entries[Source.OPENCODE]["off"] = {"url": "https://x", "enabled": False, "description": "Off"}
        await self.registry.load_all()

        item = self.registry.get("off", Source.OPENCODE)
        assert item.enabled is False
        assert item.description == "Off"

    @pytest.mark.asyncio
    async def test_add_reloads(self):
        """Test a successful add is visible after the implicit reload."""
        await self.registry.load_all()
        item = await self.registry.add("weather", WEATHER_CONFIG, Source.CLAUDE)

        assert item is not None
        assert item.raw_config == WEATHER_CONFIG
        assert "weather" in self.registry.names(Source.CLAUDE)

    @pytest.mark.asyncio
    async def test_add_opencode_sets_description(self):
        """Test the description is stored in OpenCode entries."""
        item = await self.registry.add("weather", WEATHER_CONFIG, Source.OPENCODE, "Weather")

        assert item.description == "Weather"
        assert item.raw_config["enabled"] is True

    @pytest.mark.asyncio
    async def test_add_duplicate(self):
        """Test adding an existing name fails and records the error."""
        await self.registry.load_all()

        with pytest.raises(DuplicateNameError):
            await self.registry.add("github", WEATHER_CONFIG, Source.CLAUDE)

        assert self.registry.error is not None
        assert not self.registry.loading
        assert self.registry.get("github", Source.CLAUDE).raw_config == GITHUB_CONFIG

    @pytest.mark.asyncio
    async def test_invalid_json_is_rejected_before_backend(self):
        """Test malformed submissions never reach the backend."""
        with pytest.raises(ParseError):
            await self.registry.add("bad", "{not json", Source.CLAUDE)

        assert "save_entries" not in self.backend.calls

    @pytest.mark.asyncio
    async def test_non_object_is_rejected(self):
        """Test a JSON array is not a valid config."""
        with pytest.raises(ValidationError):
            await self.registry.add("bad", "[]", Source.CLAUDE)

    @pytest.mark.asyncio
    async def test_empty_name_is_rejected(self):
        """Test empty names are rejected."""
        with pytest.raises(ValidationError):
            await self.registry.add("", WEATHER_CONFIG, Source.CLAUDE)

    @pytest.mark.asyncio
    async def test_update(self):
        """Test update overwrites the config."""
        await self.registry.update("github", WEATHER_CONFIG, Source.CLAUDE)

        assert self.registry.get("github", Source.CLAUDE).raw_config == WEATHER_CONFIG

    @pytest.mark.asyncio
    async def test_update_missing(self):
        """Test updating an unknown name fails."""
        with pytest.raises(NotFoundError):
            await self.registry.update("missing", WEATHER_CONFIG, Source.CLAUDE)

    @pytest.mark.asyncio
    async def test_delete(self):
        """Test delete removes the item."""
        await self.registry.delete("github", Source.CLAUDE)

        assert self.registry.names(Source.CLAUDE) == []

    @pytest.mark.asyncio
    async def test_delete_missing(self):
        """Test deleting an unknown name fails."""
        with pytest.raises(NotFoundError):
            await self.registry.delete("missing", Source.CLAUDE)

    @pytest.mark.asyncio
    async def test_failed_mutation_does_not_reload(self):
        """Test a failing backend call skips the reload and keeps state."""
        await self.registry.load_all()
        self.backend.delete_item = AsyncMock(side_effect=RuntimeError("disk full"))
        self.backend.list_configs = AsyncMock()

        with pytest.raises(BackendError) as exc_info:
            await self.registry.delete("github", Source.CLAUDE)

        assert "disk full" in str(exc_info.value)
        self.backend.list_configs.assert_not_called()
        assert self.registry.names(Source.CLAUDE) == ["github"]
        assert self.registry.error is not None

    @pytest.mark.asyncio
    async def test_failed_load_keeps_previous_state(self):
        """Test a failing reload leaves the prior collections in place."""
        await self.registry.load_all()
        self.backend.list_configs = AsyncMock(side_effect=OSError("unreadable"))

        with pytest.raises(BackendError):
            await self.registry.load_all()

        assert self.registry.names(Source.OPENCODE) == ["filesystem"]
        assert not self.registry.loading
        assert "unreadable" in self.registry.error

    @pytest.mark.asyncio
    async def test_clear_error(self):
        """Test the error slot can be cleared."""
        with pytest.raises(NotFoundError):
            await self.registry.delete("missing", Source.CLAUDE)

        self.registry.clear_error()
        assert self.registry.error is None
