"""
Sync orchestration between OpenCode and Claude Code.

Items are copied with upsert semantics. Batches are NOT transactional:
a failed item neither rolls back the items synced before it nor stops the
items after it. The ``BatchSyncResult`` names the first failure and counts
what completed, so callers can report partial progress.
"""

from typing import Any, Dict, Iterable, Union

from mcp_sync.core.diff import compute_diff
from mcp_sync.core.exceptions import MCPSyncError, NotFoundError, ValidationError
from mcp_sync.core.models import BatchSyncResult, Source
from mcp_sync.core.registry import SourceRegistry
from mcp_sync.core.single_flight import SingleFlight
from mcp_sync.utils.logging import get_logger
from mcp_sync.utils.validators import validate_config_document, validate_item_name

logger = get_logger(__name__)


class SyncOrchestrator:
    """Copies items from one source to the other."""

    def __init__(self, registry: SourceRegistry, single_flight: SingleFlight):
        """
        Initialize sync orchestrator.

        Args:
            registry: Registry whose backend receives the writes
            single_flight: Guard shared with the rest of the application
        """
        self.registry = registry
        self.single_flight = single_flight

    async def sync_item(
        self,
        name: str,
        from_source: Source,
        to_source: Source,
        raw_config: Union[str, Dict[str, Any]],
    ) -> None:
        """
        Upsert ``name`` into ``to_source``.

        Overwrites an existing item of the same name, otherwise creates it.
        Repeating the call with the same arguments leaves the target unchanged.

        Raises:
            ValidationError: If the name or document is invalid
            ParseError: If the document is not valid JSON
            BackendError: If the backend write fails
        """
        validate_item_name(name)
        document = validate_config_document(raw_config)
        logger.info(
            f"Syncing MCP '{name}' from {from_source.display_name} to {to_source.display_name}"
        )

        await self.registry.run_mutation(
            f"Failed to sync MCP '{name}'",
            lambda: self.registry.backend.sync_item(name, from_source, to_source, document),
        )

    async def sync_batch(
        self,
        names: Iterable[str],
        from_source: Source,
        to_source: Source,
    ) -> BatchSyncResult:
        """
        Sync several items in order, taking each config from ``from_source``.

        Every name is attempted even after a failure.

        Raises:
            OperationInProgressError: If a batch into ``to_source`` is running
        """
        requested = list(names)
        result = BatchSyncResult(from_source=from_source, to_source=to_source, requested=requested)

        with self.single_flight.guard(("sync", to_source)):
            if not self.registry.loaded:
                await self.registry.load_all()

            for name in requested:
                item = self.registry.get(name, from_source)
                try:
                    if item is None:
                        raise NotFoundError(
                            f"MCP '{name}' not found in {from_source.display_name}",
                            details={"name": name, "source": from_source.value},
                        )
                    await self.sync_item(name, from_source, to_source, item.raw_config)
                except MCPSyncError as e:
                    logger.warning(f"Sync of '{name}' failed, continuing: {e}")
                    result.failures[name] = str(e)
                    if result.first_failure is None:
                        result.first_failure = name
                    continue
                result.completed.append(name)

        logger.info(
            f"Batch sync to {to_source.display_name}: "
            f"{result.completed_count}/{len(requested)} completed"
        )
        return result

    async def sync_missing(self, from_source: Source) -> BatchSyncResult:
        """Sync every item that exists only in ``from_source`` to the other source."""
        await self.registry.load_all()
        diff = compute_diff(
            self.registry.items(Source.OPENCODE),
            self.registry.items(Source.CLAUDE),
        )
        return await self.sync_batch(diff.only_in(from_source), from_source, from_source.other())

    async def move_item(
        self,
        name: str,
        from_source: Source,
        to_source: Source,
        delete_origin: bool = False,
    ) -> None:
        """
        Create ``name`` in ``to_source`` and optionally delete it from ``from_source``.

        Items never change source in place. If the delete fails the copy in
        ``to_source`` remains.
        """
        if from_source == to_source:
            raise ValidationError("Source and target must differ")

        if not self.registry.loaded:
            await self.registry.load_all()

        item = self.registry.get(name, from_source)
        if item is None:
            raise NotFoundError(
                f"MCP '{name}' not found in {from_source.display_name}",
                details={"name": name, "source": from_source.value},
            )

        await self.sync_item(name, from_source, to_source, item.raw_config)
        if delete_origin:
            await self.registry.delete(name, from_source)
