"""
Filesystem backend.

Reads and writes the OpenCode and Claude Code configuration files directly,
keeps one MCP backup file per source plus timestamped full-configuration
archives, and stores the skills document. Everything outside the MCP
section of each configuration file is preserved on write.
"""

import json
import os
import tempfile
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional

from mcp_sync.backend.base import (
    ARCHIVE_PREFIX,
    ARCHIVE_SUFFIX,
    CREATED_AT_FORMAT,
    SECTION_KEYS,
    TIMESTAMP_FORMAT,
    DocumentBackend,
    archive_timestamp,
    backup_filename,
)
from mcp_sync.core.exceptions import BackendError
from mcp_sync.core.models import ArchiveMetadata, BackupSnapshot, ConfigArchive, Source
from mcp_sync.utils.logging import get_logger

logger = get_logger(__name__)

ARCHIVE_DOCUMENT_KEYS = ("opencode_config", "claude_config", "skills_config")


class FileBackend(DocumentBackend):
    """Backend over JSON files on the local filesystem."""

    def __init__(
        self,
        opencode_path: Path,
        claude_path: Path,
        skills_path: Path,
        backup_dir: Path,
        convert_formats: bool = True,
    ):
        """
        Initialize file backend.

        Args:
            opencode_path: OpenCode configuration file
            claude_path: Claude Code configuration file
            skills_path: Skills configuration file
            backup_dir: Directory holding the per-source backups and archives
            convert_formats: Convert entry shapes when syncing across sources
        """
        super().__init__(convert_formats=convert_formats)
        self.config_files = {
            Source.OPENCODE: Path(opencode_path),
            Source.CLAUDE: Path(claude_path),
        }
        self.skills_path = Path(skills_path)
        self.backup_dir = Path(backup_dir)

    def config_paths(self) -> Dict[str, str]:
        return {
            "opencode": str(self.config_files[Source.OPENCODE]),
            "claude": str(self.config_files[Source.CLAUDE]),
            "skills": str(self.skills_path),
            "backup": str(self.backup_dir),
        }

    def backup_path(self, source: Source) -> Path:
        return self.backup_dir / backup_filename(source)

    # Entries

    def _load_entries(self, source: Source) -> Dict[str, Dict[str, Any]]:
        document = self._read_json(self.config_files[source]) or {}
        entries = document.get(SECTION_KEYS[source]) or {}
        if not isinstance(entries, dict):
            raise BackendError(
                f"Invalid {source.display_name} config: '{SECTION_KEYS[source]}' is not an object"
            )
        return entries

    def _save_entries(self, source: Source, entries: Dict[str, Dict[str, Any]]) -> None:
        path = self.config_files[source]
        document = self._read_json(path) or {}
        document[SECTION_KEYS[source]] = entries
        self._write_json(path, document)

    def _load_config_document(self, source: Source) -> Optional[Dict[str, Any]]:
        return self._read_json(self.config_files[source])

    def _save_config_document(self, source: Source, document: Dict[str, Any]) -> None:
        self._write_json(self.config_files[source], document)

    # Snapshots

    def _load_snapshot(self, source: Source) -> Optional[BackupSnapshot]:
        path = self.backup_path(source)
        data = self._read_json(path)
        if data is None:
            return None

        items = data.get("mcps")
        if not isinstance(items, dict):
            raise BackendError("Invalid backup format: missing mcps object")
        malformed = sorted(name for name, config in items.items() if not isinstance(config, dict))
        if malformed:
            raise BackendError(
                f"Invalid backup format: entries are not objects: {', '.join(malformed)}",
                details={"path": str(path)},
            )

        stored_source = data.get("source", source.value)
        if stored_source != source.value:
            raise BackendError(f"Unknown backup source: {stored_source}")

        created_at = data.get("created_at") or _modified_at(path)

        return BackupSnapshot(
            filename=path.name,
            timestamp=data.get("timestamp", ""),
            source=source,
            item_count=len(items),
            path=str(path),
            created_at=created_at,
            items=items,
        )

    def _save_snapshot(self, snapshot: BackupSnapshot) -> BackupSnapshot:
        path = self.backup_path(snapshot.source)
        self._write_json(path, {
            "source": snapshot.source.value,
            "timestamp": snapshot.timestamp,
            "created_at": snapshot.created_at,
            "mcps": snapshot.items,
        })
        logger.debug(f"Wrote backup file {path}")
        return snapshot.model_copy(update={"path": str(path)})

    # Archives

    def _load_archive(self, filename: str) -> Optional[ConfigArchive]:
        path = self.backup_dir / filename
        data = self._read_json(path)
        if data is None:
            return None

        for key in ARCHIVE_DOCUMENT_KEYS:
            if data.get(key) is not None and not isinstance(data[key], dict):
                raise BackendError(
                    f"Invalid backup format: {key} is not an object",
                    details={"path": str(path)},
                )

        timestamp = data.get("timestamp") or archive_timestamp(filename)
        return ConfigArchive(
            filename=filename,
            timestamp=timestamp,
            path=str(path),
            created_at=_archive_created_at(timestamp, path),
            version=data.get("version") or "",
            **{key: data.get(key) for key in ARCHIVE_DOCUMENT_KEYS},
        )

    def _save_archive(self, archive: ConfigArchive) -> ConfigArchive:
        path = self.backup_dir / archive.filename
        self._write_json(path, archive.model_dump(
            include={"timestamp", "version", *ARCHIVE_DOCUMENT_KEYS},
        ))
        logger.debug(f"Wrote archive file {path}")
        return archive.model_copy(update={"path": str(path)})

    def _list_archives(self) -> List[ArchiveMetadata]:
        if not self.backup_dir.exists():
            return []

        archives = []
        for path in self.backup_dir.glob(f"{ARCHIVE_PREFIX}*{ARCHIVE_SUFFIX}"):
            if not path.is_file():
                continue
            timestamp = archive_timestamp(path.name)
            archives.append(ArchiveMetadata(
                filename=path.name,
                timestamp=timestamp,
                path=str(path),
                created_at=_archive_created_at(timestamp, path),
            ))
        return archives

    # Skills

    def _load_skills_document(self) -> Optional[Dict[str, Any]]:
        return self._read_json(self.skills_path)

    def _save_skills_document(self, document: Dict[str, Any]) -> None:
        self._write_json(self.skills_path, document)

    # JSON I/O

    def _read_json(self, path: Path) -> Optional[Dict[str, Any]]:
        if not path.exists():
            logger.debug(f"Config not found: {path}")
            return None

        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise BackendError(f"Failed to parse {path}: {e}", details={"path": str(path)})
        except OSError as e:
            raise BackendError(f"Failed to read {path}: {e}", details={"path": str(path)})

        if not isinstance(data, dict):
            raise BackendError(f"Failed to parse {path}: expected a JSON object")
        return data

    def _write_json(self, path: Path, data: Dict[str, Any]) -> None:
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    json.dump(data, f, indent=2, ensure_ascii=False)
                    f.write("\n")
                os.replace(tmp_name, path)
            except BaseException:
                if os.path.exists(tmp_name):
                    os.unlink(tmp_name)
                raise
        except OSError as e:
            logger.error(f"Failed to write {path}: {e}")
            raise BackendError(f"Failed to write {path}: {e}", details={"path": str(path)})

        logger.debug(f"Saved {path}")


def _modified_at(path: Path) -> str:
    return datetime.fromtimestamp(path.stat().st_mtime).strftime(CREATED_AT_FORMAT)


def _archive_created_at(timestamp: str, path: Path) -> str:
    try:
        return datetime.strptime(timestamp, TIMESTAMP_FORMAT).strftime(CREATED_AT_FORMAT)
    except ValueError:
        return _modified_at(path)
