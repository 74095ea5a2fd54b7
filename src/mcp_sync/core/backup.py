"""
Per-source backup and restore of MCP items.

Each source has at most one retained snapshot; a new backup replaces the
previous one. Restores are additive: snapshot items are upserted into the
live source and live items missing from the snapshot are left alone.

Full-configuration archives are kept alongside: every archive is a
timestamped copy of both configuration files and the skills document, and
restoring one writes those documents back whole.
"""

from typing import Any, Dict, List, Optional

from mcp_sync.core.exceptions import NoBackupError, NotFoundError
from mcp_sync.core.models import ArchiveMetadata, BackupState, SnapshotMetadata, Source
from mcp_sync.core.registry import SourceRegistry
from mcp_sync.core.single_flight import SingleFlight
from mcp_sync.utils.logging import get_logger

logger = get_logger(__name__)


class BackupManager:
    """Creates, inspects and restores per-source snapshots and archives."""

    def __init__(self, registry: SourceRegistry, single_flight: SingleFlight):
        """
        Initialize backup manager.

        Args:
            registry: Registry refreshed after every backup and restore
            single_flight: Guard rejecting re-entrant backups and restores
        """
        self.registry = registry
        self.single_flight = single_flight
        self._latest: Dict[Source, Optional[SnapshotMetadata]] = {}

    @property
    def backend(self):
        return self.registry.backend

    async def backup(self, source: Source) -> SnapshotMetadata:
        """
        Snapshot every live item of ``source`` and reload the registry.

        Raises:
            OperationInProgressError: If a backup of ``source`` is already running
            BackendError: If the snapshot cannot be written
        """
        with self.single_flight.guard(("backup", source)):
            logger.info(f"Starting {source.display_name} MCP backup...")
            metadata = await self.backend.backup_source(source)
            self._latest[source] = metadata
            logger.info(
                f"Backed up {metadata.item_count} {source.display_name} MCPs to {metadata.filename}"
            )
            await self.registry.load_all()
            return metadata

    async def get_latest_backup(self, source: Source) -> Optional[SnapshotMetadata]:
        """Metadata of the retained snapshot of ``source``, or None."""
        metadata = await self.backend.get_latest_backup(source)
        self._latest[source] = metadata
        return metadata

    async def state(self, source: Source) -> BackupState:
        if await self.get_latest_backup(source) is None:
            return BackupState.NO_BACKUP
        return BackupState.BACKUP_AVAILABLE

    def cached_state(self, source: Source) -> BackupState:
        """State as of the last backup or lookup, without a backend call."""
        if self._latest.get(source) is None:
            return BackupState.NO_BACKUP
        return BackupState.BACKUP_AVAILABLE

    async def read_backup_content(self, source: Source) -> Dict[str, Dict[str, Any]]:
        """
        Items of the retained snapshot.

        Raises:
            NoBackupError: If ``source`` has no backup
        """
        return await self.backend.read_backup_content(source)

    async def restore_all(self, source: Source) -> str:
        """
        Upsert every snapshot item into the live ``source``.

        Raises:
            NoBackupError: If ``source`` has no backup
            OperationInProgressError: If a restore of ``source`` is running
        """
        with self.single_flight.guard(("restore", source)):
            await self._require_backup(source)
            logger.info(f"Restoring MCP backup for: {source.value}")
            return await self.registry.run_mutation(
                f"Failed to restore {source.display_name} backup",
                lambda: self.backend.restore_all(source),
            )

    async def restore_one(self, source: Source, name: str) -> str:
        """
        Upsert a single snapshot item into the live ``source``.

        Live state is untouched when ``name`` is not in the snapshot.

        Raises:
            NoBackupError: If ``source`` has no backup
            NotFoundError: If ``name`` is not in the snapshot
        """
        with self.single_flight.guard(("restore", source)):
            content = await self.read_backup_content(source)
            if name not in content:
                raise NotFoundError(
                    f"MCP '{name}' not found in backup",
                    details={"name": name, "source": source.value},
                )

            logger.info(f"Restoring single MCP '{name}' from backup")
            return await self.registry.run_mutation(
                f"Failed to restore MCP '{name}'",
                lambda: self.backend.restore_one(source, name),
            )

    # Full-configuration archives

    async def create_archive(self) -> ArchiveMetadata:
        """
        Archive both configuration files and the skills document.

        Raises:
            OperationInProgressError: If an archive is already being written
            BackendError: If a document cannot be read or the archive written
        """
        with self.single_flight.guard(("archive", "create")):
            logger.info("Creating configuration archive...")
            metadata = await self.backend.create_archive()
            logger.info(f"Configuration archive created: {metadata.filename}")
            return metadata

    async def list_archives(self) -> List[ArchiveMetadata]:
        """Metadata of every archive, newest first."""
        return await self.backend.list_archives()

    async def restore_archive(self, filename: str) -> str:
        """
        Overwrite the configuration files and skills document from an archive.

        Documents absent from the archive are left untouched.

        Raises:
            ValidationError: If ``filename`` is not an archive file name
            NoBackupError: If the archive does not exist
            OperationInProgressError: If an archive restore is running
        """
        with self.single_flight.guard(("archive", "restore")):
            logger.info(f"Restoring configuration archive {filename}")
            return await self.registry.run_mutation(
                f"Failed to restore backup {filename}",
                lambda: self.backend.restore_archive(filename),
            )

    async def _require_backup(self, source: Source) -> SnapshotMetadata:
        metadata = await self.get_latest_backup(source)
        if metadata is None:
            raise NoBackupError(
                f"Backup file not found for {source.value}",
                details={"source": source.value},
            )
        return metadata
