"""
Backend contract consumed by the MCP Sync core.

``Backend`` is the abstract request/response interface. ``DocumentBackend``
implements the whole contract on top of a handful of storage primitives so
concrete backends only decide where documents live.
"""

import copy
from abc import ABC, abstractmethod
from datetime import datetime
from pathlib import PurePath
from typing import Any, Dict, List, Optional

from pydantic import ValidationError as PydanticValidationError

from mcp_sync import __version__
from mcp_sync.core import conversion
from mcp_sync.core.exceptions import (
    BackendError,
    DuplicateNameError,
    NoBackupError,
    NotFoundError,
    ValidationError,
)
from mcp_sync.core.models import (
    ArchiveMetadata,
    BackupSnapshot,
    ConfigArchive,
    MCPItem,
    SkillsDocument,
    SnapshotMetadata,
    Source,
)
from mcp_sync.utils.logging import get_logger

logger = get_logger(__name__)

TIMESTAMP_FORMAT = "%Y%m%d_%H%M%S"
CREATED_AT_FORMAT = "%Y-%m-%d %H:%M:%S"

ARCHIVE_PREFIX = "backup_"
ARCHIVE_SUFFIX = ".json"

# Key holding the MCP entries in each source's configuration document
SECTION_KEYS = {
    Source.OPENCODE: "mcp",
    Source.CLAUDE: "mcpServers",
}


def backup_filename(source: Source) -> str:
    """Fixed snapshot name; one retained backup per source."""
    return f"{source.value}_mcps.json"


def archive_filename(timestamp: str) -> str:
    return f"{ARCHIVE_PREFIX}{timestamp}{ARCHIVE_SUFFIX}"


def is_archive_filename(filename: str) -> bool:
    """Whether ``filename`` is a bare archive file name."""
    return (
        PurePath(filename).name == filename
        and filename.startswith(ARCHIVE_PREFIX)
        and filename.endswith(ARCHIVE_SUFFIX)
    )


def archive_timestamp(filename: str) -> str:
    return filename[len(ARCHIVE_PREFIX):-len(ARCHIVE_SUFFIX)]


class Backend(ABC):
    """
    Abstract persistent backend.

    The contract methods are coroutines, but the bundled backends do their
    file I/O synchronously inside them and block the event loop for the
    duration of each call.
    """

    @abstractmethod
    async def list_configs(self, source: Source) -> List[MCPItem]:
        """List the items of one source in backend order."""

    @abstractmethod
    async def add_item(
        self,
        name: str,
        raw_config: Dict[str, Any],
        source: Source,
        description: Optional[str] = None,
    ) -> None:
        """Create an item; ``DuplicateNameError`` if the name exists."""

    @abstractmethod
    async def update_item(
        self,
        name: str,
        raw_config: Dict[str, Any],
        source: Source,
        description: Optional[str] = None,
    ) -> None:
        """Overwrite an item; ``NotFoundError`` if absent."""

    @abstractmethod
    async def delete_item(self, name: str, source: Source) -> None:
        """Delete an item; ``NotFoundError`` if absent."""

    @abstractmethod
    async def sync_item(
        self,
        name: str,
        from_source: Source,
        to_source: Source,
        raw_config: Dict[str, Any],
    ) -> None:
        """Upsert an item into ``to_source``."""

    @abstractmethod
    async def backup_source(self, source: Source) -> SnapshotMetadata:
        """Snapshot every item of ``source``, replacing the prior snapshot."""

    @abstractmethod
    async def get_latest_backup(self, source: Source) -> Optional[SnapshotMetadata]:
        """Metadata of the retained snapshot, or None."""

    @abstractmethod
    async def read_backup_content(self, source: Source) -> Dict[str, Dict[str, Any]]:
        """Items of the retained snapshot; ``NoBackupError`` if none."""

    @abstractmethod
    async def restore_all(self, source: Source) -> str:
        """Upsert every snapshot item; ``NoBackupError`` if none."""

    @abstractmethod
    async def restore_one(self, source: Source, name: str) -> str:
        """Upsert one snapshot item; ``NoBackupError`` or ``NotFoundError``."""

    @abstractmethod
    async def create_archive(self) -> ArchiveMetadata:
        """Archive both configuration documents and the skills document."""

    @abstractmethod
    async def list_archives(self) -> List[ArchiveMetadata]:
        """Metadata of every archive, newest first."""

    @abstractmethod
    async def restore_archive(self, filename: str) -> str:
        """Write an archive's documents back; ``NoBackupError`` if unknown."""

    @abstractmethod
    async def load_skills(self) -> SkillsDocument:
        """Load the skills document."""

    @abstractmethod
    async def save_skills(self, document: SkillsDocument) -> None:
        """Persist the skills document."""

    def config_paths(self) -> Dict[str, str]:
        """Human readable locations of the backend's documents."""
        return {}


class DocumentBackend(Backend):
    """
    Contract implementation over per-source entry documents.

    Subclasses provide the storage primitives below. Entries are keyed by
    item name and hold the raw configuration exactly as stored.

    Args:
        convert_formats: Convert entries between the OpenCode and Claude Code
            shapes when syncing across sources
    """

    def __init__(self, convert_formats: bool = True):
        self.convert_formats = convert_formats

    # Storage primitives

    @abstractmethod
    def _load_entries(self, source: Source) -> Dict[str, Dict[str, Any]]:
        """Read the entries of one source."""

    @abstractmethod
    def _save_entries(self, source: Source, entries: Dict[str, Dict[str, Any]]) -> None:
        """Replace the entries of one source."""

    @abstractmethod
    def _load_snapshot(self, source: Source) -> Optional[BackupSnapshot]:
        """Read the retained snapshot of one source."""

    @abstractmethod
    def _save_snapshot(self, snapshot: BackupSnapshot) -> BackupSnapshot:
        """Persist a snapshot, replacing any previous one for its source."""

    @abstractmethod
    def _load_skills_document(self) -> Optional[Dict[str, Any]]:
        """Read the raw skills document, None if it does not exist."""

    @abstractmethod
    def _save_skills_document(self, document: Dict[str, Any]) -> None:
        """Write the raw skills document."""

    @abstractmethod
    def _load_config_document(self, source: Source) -> Optional[Dict[str, Any]]:
        """Read the whole configuration document of one source."""

    @abstractmethod
    def _save_config_document(self, source: Source, document: Dict[str, Any]) -> None:
        """Replace the whole configuration document of one source."""

    @abstractmethod
    def _load_archive(self, filename: str) -> Optional[ConfigArchive]:
        """Read an archive, None if it does not exist."""

    @abstractmethod
    def _save_archive(self, archive: ConfigArchive) -> ConfigArchive:
        """Persist an archive."""

    @abstractmethod
    def _list_archives(self) -> List[ArchiveMetadata]:
        """Metadata of every stored archive, in any order."""

    # Contract

    async def list_configs(self, source: Source) -> List[MCPItem]:
        entries = self._load_entries(source)
        items = [self._to_item(name, config, source) for name, config in entries.items()]
        logger.debug(f"Found {len(items)} {source.display_name} MCPs")
        return items

    async def add_item(
        self,
        name: str,
        raw_config: Dict[str, Any],
        source: Source,
        description: Optional[str] = None,
    ) -> None:
        self._check_document(raw_config)
        entries = self._load_entries(source)
        if name in entries:
            raise DuplicateNameError(
                f"MCP '{name}' already exists in {source.display_name} config",
                details={"name": name, "source": source.value},
            )

        entry = copy.deepcopy(raw_config)
        if source is Source.OPENCODE:
            entry.setdefault("enabled", True)
            if description:
                entry["description"] = description

        entries[name] = entry
        self._save_entries(source, entries)
        logger.info(f"Added MCP '{name}' to {source.display_name}")

    async def update_item(
        self,
        name: str,
        raw_config: Dict[str, Any],
        source: Source,
        description: Optional[str] = None,
    ) -> None:
        self._check_document(raw_config)
        entries = self._load_entries(source)
        if name not in entries:
            raise self._not_found(name, source)

        entry = copy.deepcopy(raw_config)
        if source is Source.OPENCODE and description:
            entry["description"] = description

        entries[name] = entry
        self._save_entries(source, entries)
        logger.info(f"Updated MCP '{name}' in {source.display_name}")

    async def delete_item(self, name: str, source: Source) -> None:
        entries = self._load_entries(source)
        if entries.pop(name, None) is None:
            raise self._not_found(name, source)

        self._save_entries(source, entries)
        logger.info(f"Deleted MCP '{name}' from {source.display_name}")

    async def sync_item(
        self,
        name: str,
        from_source: Source,
        to_source: Source,
        raw_config: Dict[str, Any],
    ) -> None:
        if self.convert_formats:
            entry = conversion.convert(raw_config, from_source, to_source)
        else:
            entry = copy.deepcopy(raw_config)

        entries = self._load_entries(to_source)
        entries[name] = entry
        self._save_entries(to_source, entries)
        logger.info(
            f"Synced MCP '{name}' from {from_source.display_name} to {to_source.display_name}"
        )

    async def backup_source(self, source: Source) -> SnapshotMetadata:
        entries = self._load_entries(source)
        now = datetime.now()
        snapshot = BackupSnapshot(
            filename=backup_filename(source),
            timestamp=now.strftime(TIMESTAMP_FORMAT),
            source=source,
            item_count=len(entries),
            created_at=now.strftime(CREATED_AT_FORMAT),
            items={name: self._as_document(config) for name, config in entries.items()},
        )
        saved = self._save_snapshot(snapshot)
        logger.info(f"MCP backup saved for {source.display_name}: {saved.item_count} items")
        return saved.metadata()

    async def get_latest_backup(self, source: Source) -> Optional[SnapshotMetadata]:
        snapshot = self._load_snapshot(source)
        return snapshot.metadata() if snapshot else None

    async def read_backup_content(self, source: Source) -> Dict[str, Dict[str, Any]]:
        return copy.deepcopy(self._require_snapshot(source).items)

    async def restore_all(self, source: Source) -> str:
        snapshot = self._require_snapshot(source)
        entries = self._load_entries(source)
        for name, config in snapshot.items.items():
            entries[name] = copy.deepcopy(config)
        self._save_entries(source, entries)

        logger.info(f"Restored {len(snapshot.items)} MCPs from backup")
        return f"Successfully restored {len(snapshot.items)} MCPs to {source.display_name}"

    async def restore_one(self, source: Source, name: str) -> str:
        snapshot = self._require_snapshot(source)
        if name not in snapshot.items:
            raise NotFoundError(
                f"MCP '{name}' not found in backup",
                details={"name": name, "source": source.value},
            )

        entries = self._load_entries(source)
        entries[name] = copy.deepcopy(snapshot.items[name])
        self._save_entries(source, entries)

        logger.info(f"Restored MCP '{name}' from backup")
        return f"Successfully restored '{name}' to {source.display_name}"

    async def create_archive(self) -> ArchiveMetadata:
        now = datetime.now()
        timestamp = now.strftime(TIMESTAMP_FORMAT)
        archive = ConfigArchive(
            filename=archive_filename(timestamp),
            timestamp=timestamp,
            created_at=now.strftime(CREATED_AT_FORMAT),
            version=__version__,
            opencode_config=self._load_config_document(Source.OPENCODE),
            claude_config=self._load_config_document(Source.CLAUDE),
            skills_config=self._load_skills_document(),
        )
        saved = self._save_archive(archive)
        logger.info(f"Configuration archive saved: {saved.filename}")
        return saved.metadata()

    async def list_archives(self) -> List[ArchiveMetadata]:
        return sorted(self._list_archives(), key=lambda archive: archive.filename, reverse=True)

    async def restore_archive(self, filename: str) -> str:
        if not is_archive_filename(filename):
            raise ValidationError(
                f"Invalid backup name: {filename}",
                details={"filename": filename},
            )

        archive = self._load_archive(filename)
        if archive is None:
            raise NoBackupError(f"Backup not found: {filename}", details={"filename": filename})

        for source in Source:
            document = archive.document(source)
            if document is not None and not isinstance(document.get(SECTION_KEYS[source]) or {}, dict):
                raise BackendError(
                    f"Invalid backup format: '{SECTION_KEYS[source]}' of {source.value} is not an object",
                    details={"filename": filename},
                )

        restored = []
        for source in Source:
            document = archive.document(source)
            if document is not None:
                self._save_config_document(source, copy.deepcopy(document))
                restored.append(source.display_name)
        if archive.skills_config is not None:
            self._save_skills_document(copy.deepcopy(archive.skills_config))
            restored.append("skills")

        logger.info(f"Restored configuration archive {filename}: {', '.join(restored) or 'nothing'}")
        if not restored:
            return f"Backup {filename} holds no configuration"
        return f"Successfully restored {', '.join(restored)} from {filename}"

    async def load_skills(self) -> SkillsDocument:
        document = self._load_skills_document()
        if document is None:
            return SkillsDocument()
        try:
            return SkillsDocument.model_validate(document)
        except PydanticValidationError as e:
            raise BackendError(f"Failed to parse skills config: {e}") from e

    async def save_skills(self, document: SkillsDocument) -> None:
        self._save_skills_document(document.to_document())

    # Helpers

    @staticmethod
    def _as_document(config: Any) -> Dict[str, Any]:
        if not isinstance(config, dict):
            return {"raw": copy.deepcopy(config)}
        return copy.deepcopy(config)

    def _require_snapshot(self, source: Source) -> BackupSnapshot:
        snapshot = self._load_snapshot(source)
        if snapshot is None:
            raise NoBackupError(
                f"Backup file not found for {source.value}",
                details={"source": source.value},
            )
        return snapshot

    @classmethod
    def _to_item(cls, name: str, config: Any, source: Source) -> MCPItem:
        config = cls._as_document(config)

        enabled = True
        description = None
        if source is Source.OPENCODE:
            if isinstance(config.get("enabled"), bool):
                enabled = config["enabled"]
            if isinstance(config.get("description"), str):
                description = config["description"]

        return MCPItem(
            name=name,
            raw_config=config,
            source=source,
            enabled=enabled,
            description=description,
        )

    @staticmethod
    def _check_document(raw_config: Any) -> None:
        if not isinstance(raw_config, dict):
            raise ValidationError("MCP config must be a JSON object")

    @staticmethod
    def _not_found(name: str, source: Source) -> NotFoundError:
        return NotFoundError(
            f"MCP '{name}' not found in {source.display_name} config",
            details={"name": name, "source": source.value},
        )
