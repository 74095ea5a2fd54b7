"""
Source registry.

In-memory, backend-authoritative view of the OpenCode and Claude Code item
collections. State is always replaced wholesale by ``load_all``; every
successful mutation is followed by a full reload. A failed mutation does
not reload, so callers must treat state as unknown until the next reload.
"""

from typing import Any, Awaitable, Callable, Dict, List, Optional, TypeVar, Union

from mcp_sync.backend.base import Backend
from mcp_sync.core.exceptions import BackendError, MCPSyncError
from mcp_sync.core.models import MCPItem, MCPList, Source
from mcp_sync.utils.logging import get_logger
from mcp_sync.utils.validators import validate_config_document, validate_item_name

logger = get_logger(__name__)

T = TypeVar("T")


class SourceRegistry:
    """Authoritative in-memory view of both item collections."""

    def __init__(self, backend: Backend):
        """
        Initialize source registry.

        Args:
            backend: Backend the registry reads from and writes through
        """
        self.backend = backend
        self._items: Dict[Source, List[MCPItem]] = {source: [] for source in Source}
        self.loading = False
        self.error: Optional[str] = None
        self.loaded = False

    # Reads

    def items(self, source: Source) -> List[MCPItem]:
        """Items of one source as of the last reload."""
        return list(self._items[source])

    def names(self, source: Source) -> List[str]:
        return [item.name for item in self._items[source]]

    def get(self, name: str, source: Source) -> Optional[MCPItem]:
        for item in self._items[source]:
            if item.name == name:
                return item
        return None

    def snapshot(self) -> MCPList:
        """Both collections as an ``MCPList``."""
        return MCPList(
            opencode=self.items(Source.OPENCODE),
            claude=self.items(Source.CLAUDE),
        )

    def clear_error(self) -> None:
        self.error = None

    # Reload

    async def load_all(self) -> MCPList:
        """
        Replace in-memory state with the backend's.

        On failure the previous state is kept, ``loading`` is cleared and
        ``error`` holds the backend's message.

        Returns:
            The freshly loaded collections

        Raises:
            BackendError: If the backend cannot list a source
        """
        self.loading = True
        self.error = None
        logger.debug("Loading MCP list...")

        try:
            fresh = {source: await self.backend.list_configs(source) for source in Source}
        except MCPSyncError as e:
            self._fail(e, "Failed to load MCP list")
            raise
        except Exception as e:
            error = BackendError(f"Failed to load MCP list: {e}")
            self._fail(error, "Failed to load MCP list")
            raise error from e

        self._items = fresh
        self.loading = False
        self.loaded = True
        logger.debug(
            f"MCP list loaded: {len(fresh[Source.OPENCODE])} OpenCode, "
            f"{len(fresh[Source.CLAUDE])} Claude Code"
        )
        return self.snapshot()

    # Mutations

    async def add(
        self,
        name: str,
        raw_config: Union[str, Dict[str, Any]],
        source: Source,
        description: Optional[str] = None,
    ) -> Optional[MCPItem]:
        """
        Add a new item to ``source``.

        Raises:
            ValidationError: If the name or document is invalid
            ParseError: If the document is not valid JSON
            DuplicateNameError: If ``name`` already exists in ``source``
        """
        validate_item_name(name)
        document = validate_config_document(raw_config)
        logger.info(f"Adding MCP '{name}' to {source.display_name}")

        await self._mutate(
            f"Failed to add MCP '{name}'",
            lambda: self.backend.add_item(name, document, source, description or None),
        )
        return self.get(name, source)

    async def update(
        self,
        name: str,
        raw_config: Union[str, Dict[str, Any]],
        source: Source,
        description: Optional[str] = None,
    ) -> Optional[MCPItem]:
        """
        Overwrite an existing item in ``source``.

        Raises:
            ValidationError: If the name or document is invalid
            ParseError: If the document is not valid JSON
            NotFoundError: If ``name`` does not exist in ``source``
        """
        validate_item_name(name)
        document = validate_config_document(raw_config)
        logger.info(f"Updating MCP '{name}' in {source.display_name}")

        await self._mutate(
            f"Failed to update MCP '{name}'",
            lambda: self.backend.update_item(name, document, source, description or None),
        )
        return self.get(name, source)

    async def delete(self, name: str, source: Source) -> None:
        """
        Permanently delete an item from ``source``.

        Raises:
            NotFoundError: If ``name`` does not exist in ``source``
        """
        logger.info(f"Deleting MCP '{name}' from {source.display_name}")
        await self._mutate(
            f"Failed to delete MCP '{name}'",
            lambda: self.backend.delete_item(name, source),
        )

    async def run_mutation(self, label: str, call: Callable[[], Awaitable[T]]) -> T:
        """Run a backend mutation with the registry's failure and reload contract."""
        return await self._mutate(label, call)

    async def _mutate(self, label: str, call: Callable[[], Awaitable[T]]) -> T:
        self.loading = True
        self.error = None
        try:
            result = await call()
        except MCPSyncError as e:
            self._fail(e, label)
            raise
        except Exception as e:
            error = BackendError(f"{label}: {e}")
            self._fail(error, label)
            raise error from e

        await self.load_all()
        return result

    def _fail(self, error: MCPSyncError, label: str) -> None:
        self.loading = False
        self.error = error.message
        logger.error(f"{label}: {error}")
