"""
In-memory backend.

Holds every document in process memory. Used for isolated test instances
and dry runs; entries are stored verbatim unless ``convert_formats`` is set.
"""

import copy
from typing import Any, Dict, List, Optional

from mcp_sync.backend.base import SECTION_KEYS, DocumentBackend
from mcp_sync.core.models import ArchiveMetadata, BackupSnapshot, ConfigArchive, Source


class MemoryBackend(DocumentBackend):
    """Backend whose documents live in dictionaries."""

    def __init__(
        self,
        entries: Optional[Dict[Source, Dict[str, Dict[str, Any]]]] = None,
        skills: Optional[Dict[str, Any]] = None,
        convert_formats: bool = False,
    ):
        super().__init__(convert_formats=convert_formats)
        self.entries: Dict[Source, Dict[str, Dict[str, Any]]] = {
            source: copy.deepcopy((entries or {}).get(source, {})) for source in Source
        }
        self.snapshots: Dict[Source, BackupSnapshot] = {}
        self.archives: Dict[str, ConfigArchive] = {}
        self.skills_document: Optional[Dict[str, Any]] = copy.deepcopy(skills)
        self.calls: Dict[str, int] = {}

    def config_paths(self) -> Dict[str, str]:
        return {source.value: f"memory://{source.value}" for source in Source}

    def _count(self, operation: str) -> None:
        self.calls[operation] = self.calls.get(operation, 0) + 1

    def _load_entries(self, source: Source) -> Dict[str, Dict[str, Any]]:
        self._count("load_entries")
        return copy.deepcopy(self.entries[source])

    def _save_entries(self, source: Source, entries: Dict[str, Dict[str, Any]]) -> None:
        self._count("save_entries")
        self.entries[source] = copy.deepcopy(entries)

    def _load_config_document(self, source: Source) -> Optional[Dict[str, Any]]:
        return {SECTION_KEYS[source]: copy.deepcopy(self.entries[source])}

    def _save_config_document(self, source: Source, document: Dict[str, Any]) -> None:
        self._save_entries(source, document.get(SECTION_KEYS[source]) or {})

    def _load_snapshot(self, source: Source) -> Optional[BackupSnapshot]:
        return self.snapshots.get(source)

    def _save_snapshot(self, snapshot: BackupSnapshot) -> BackupSnapshot:
        self._count("save_snapshot")
        stored = snapshot.model_copy(update={"path": f"memory://backups/{snapshot.filename}"})
        self.snapshots[snapshot.source] = stored
        return stored

    def _load_archive(self, filename: str) -> Optional[ConfigArchive]:
        return self.archives.get(filename)

    def _save_archive(self, archive: ConfigArchive) -> ConfigArchive:
        self._count("save_archive")
        stored = archive.model_copy(update={"path": f"memory://backups/{archive.filename}"}, deep=True)
        self.archives[archive.filename] = stored
        return stored

    def _list_archives(self) -> List[ArchiveMetadata]:
        return [archive.metadata() for archive in self.archives.values()]

    def _load_skills_document(self) -> Optional[Dict[str, Any]]:
        return copy.deepcopy(self.skills_document)

    def _save_skills_document(self, document: Dict[str, Any]) -> None:
        self._count("save_skills")
        self.skills_document = copy.deepcopy(document)
