"""
Data models for MCP Sync.

Defines Pydantic models for MCP items, parsed configurations, backup
snapshots and skills, with validation and serialization support.
"""

from enum import Enum
from typing import Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Source(str, Enum):
    """Host ecosystem an MCP item belongs to."""

    OPENCODE = "opencode"
    CLAUDE = "claude"

    @property
    def display_name(self) -> str:
        """Human readable ecosystem name."""
        return "OpenCode" if self is Source.OPENCODE else "Claude Code"

    def other(self) -> "Source":
        """Return the opposite ecosystem."""
        return Source.CLAUDE if self is Source.OPENCODE else Source.OPENCODE


class ConfigKind(str, Enum):
    """Display classification of an MCP configuration."""

    LOCAL = "local"    # Command-invoked
    REMOTE = "remote"  # URL-addressable


class BackupState(str, Enum):
    """Backup availability for a single source."""

    NO_BACKUP = "no_backup"
    BACKUP_AVAILABLE = "backup_available"


class SkillPartition(str, Enum):
    """Skill configuration partition."""

    GLOBAL = "global"
    PROJECT = "project"


class MCPItem(BaseModel):
    """A named MCP configuration owned by one source."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(description="Item name, unique within its source")
    raw_config: Dict[str, Any] = Field(default_factory=dict, description="Opaque configuration document")
    source: Source = Field(description="Owning ecosystem")
    enabled: bool = Field(default=True, description="Whether the item is enabled")
    description: Optional[str] = Field(default=None, description="Optional description")

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        """Validate item name."""
        if not v.strip():
            raise ValueError("MCP name cannot be empty")
        return v

    def __str__(self) -> str:
        """String representation."""
        return f"{self.name} ({self.source.value})"


class MCPList(BaseModel):
    """Both item collections as returned by a full reload."""

    opencode: List[MCPItem] = Field(default_factory=list)
    claude: List[MCPItem] = Field(default_factory=list)

    def for_source(self, source: Source) -> List[MCPItem]:
        """Get the items of one source."""
        return self.opencode if source is Source.OPENCODE else self.claude


# Parsed configuration variants. Every variant keeps the fields it does not
# model in ``extra`` so ``to_raw`` reproduces the original document.

LOCAL_TYPE_TAGS = frozenset({"stdio", "local"})
REMOTE_TYPE_ALIASES = frozenset({"http", "sse"})


def _normalized_type(document: Dict[str, Any]) -> str:
    tag = document.get("type") or document.get("mcp_type") or "remote"
    if not isinstance(tag, str):
        return "remote"
    if tag in REMOTE_TYPE_ALIASES:
        return "remote"
    return tag


def _command_present(command: Any) -> bool:
    return command is not None and command != ""


class RemoteConfig(BaseModel):
    """URL-addressable MCP configuration."""

    kind: Literal["remote"] = "remote"
    url: str = ""
    headers: Dict[str, str] = Field(default_factory=dict)
    extra: Dict[str, Any] = Field(default_factory=dict)

    @property
    def type_tag(self) -> str:
        return _normalized_type(self.extra)

    @property
    def has_command(self) -> bool:
        return False

    def to_raw(self) -> Dict[str, Any]:
        raw = dict(self.extra)
        raw.update(self.model_dump(include={"url", "headers"}, exclude_unset=True))
        return raw


class LocalConfig(BaseModel):
    """Command-invoked MCP configuration."""

    kind: Literal["local"] = "local"
    command: Optional[Union[str, List[str]]] = None
    args: List[str] = Field(default_factory=list)
    env: Dict[str, str] = Field(default_factory=dict)
    extra: Dict[str, Any] = Field(default_factory=dict)

    @property
    def type_tag(self) -> str:
        return _normalized_type(self.extra)

    @property
    def has_command(self) -> bool:
        return _command_present(self.command)

    def command_line(self) -> str:
        """Command joined with its arguments."""
        if isinstance(self.command, list):
            return " ".join(self.command)
        if not self.command:
            return ""
        return " ".join([self.command, *self.args])

    def to_raw(self) -> Dict[str, Any]:
        raw = dict(self.extra)
        raw.update(self.model_dump(include={"command", "args", "env"}, exclude_unset=True))
        return raw


class UnknownConfig(BaseModel):
    """Object document whose known fields have unexpected shapes."""

    kind: Literal["unknown"] = "unknown"
    raw: Dict[str, Any] = Field(default_factory=dict)

    @property
    def type_tag(self) -> str:
        return _normalized_type(self.raw)

    @property
    def has_command(self) -> bool:
        return _command_present(self.raw.get("command"))

    def to_raw(self) -> Dict[str, Any]:
        return dict(self.raw)


ParsedConfig = Union[RemoteConfig, LocalConfig, UnknownConfig]


class SnapshotMetadata(BaseModel):
    """Summary of the retained backup of one source."""

    model_config = ConfigDict(frozen=True)

    filename: str = Field(description="Backup file name")
    timestamp: str = Field(default="", description="Compact timestamp (YYYYMMDD_HHMMSS)")
    source: Source = Field(description="Backed up ecosystem")
    item_count: int = Field(default=0, description="Number of items in the snapshot")
    path: Optional[str] = Field(default=None, description="Backend location of the snapshot")
    created_at: str = Field(default="", description="Human readable creation time")


class BackupSnapshot(SnapshotMetadata):
    """Immutable point-in-time copy of one source's items."""

    items: Dict[str, Dict[str, Any]] = Field(default_factory=dict, description="Name to raw config")

    def metadata(self) -> SnapshotMetadata:
        """Metadata view without item content."""
        return SnapshotMetadata(**self.model_dump(exclude={"items"}))


class ArchiveMetadata(BaseModel):
    """Summary of a full-configuration archive."""

    model_config = ConfigDict(frozen=True)

    filename: str = Field(description="Archive file name (backup_<timestamp>.json)")
    timestamp: str = Field(default="", description="Compact timestamp (YYYYMMDD_HHMMSS)")
    path: Optional[str] = Field(default=None, description="Backend location of the archive")
    created_at: str = Field(default="", description="Human readable creation time")


class ConfigArchive(ArchiveMetadata):
    """
    Copy of both configuration files and the skills document.

    A document that did not exist when the archive was taken is None and is
    left untouched on restore.
    """

    version: str = Field(default="", description="Version of the tool that wrote the archive")
    opencode_config: Optional[Dict[str, Any]] = None
    claude_config: Optional[Dict[str, Any]] = None
    skills_config: Optional[Dict[str, Any]] = None

    def document(self, source: Source) -> Optional[Dict[str, Any]]:
        """Archived configuration file of ``source``."""
        return self.opencode_config if source is Source.OPENCODE else self.claude_config

    def metadata(self) -> ArchiveMetadata:
        """Metadata view without document content."""
        return ArchiveMetadata(**self.model_dump(include=set(ArchiveMetadata.model_fields)))


class SkillConfig(BaseModel):
    """A skill entry of the skills document."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    name: str = Field(description="Skill name, unique per partition")
    description: Optional[str] = Field(default=None, description="Skill description")
    enabled: bool = Field(default=True, description="Whether the skill is enabled")
    partition: SkillPartition = Field(
        default=SkillPartition.GLOBAL,
        alias="source",
        description="Global or project partition",
    )

    @field_validator("enabled", mode="before")
    @classmethod
    def default_enabled(cls, v: Any) -> Any:
        """Treat a missing enabled flag as enabled."""
        return True if v is None else v

    @field_validator("partition", mode="before")
    @classmethod
    def default_partition(cls, v: Any) -> Any:
        """Treat a missing partition as global."""
        return SkillPartition.GLOBAL if v is None else v


class SkillsDocument(BaseModel):
    """The skills configuration file."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    schema_url: Optional[str] = Field(default=None, alias="$schema")
    skills: List[SkillConfig] = Field(default_factory=list)
    agents: List[SkillConfig] = Field(default_factory=list)
    plugins: List[str] = Field(default_factory=list)

    def to_document(self) -> Dict[str, Any]:
        """Serialize with on-disk field names."""
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")


class DiffResult(BaseModel):
    """Name-level drift between the two sources."""

    only_in_opencode: List[str] = Field(default_factory=list)
    only_in_claude: List[str] = Field(default_factory=list)
    diverged: List[str] = Field(default_factory=list, description="Filled only when content is compared")

    @property
    def in_sync(self) -> bool:
        return not (self.only_in_opencode or self.only_in_claude or self.diverged)

    def only_in(self, source: Source) -> List[str]:
        """Names present only in the given source."""
        return self.only_in_opencode if source is Source.OPENCODE else self.only_in_claude


class BatchSyncResult(BaseModel):
    """Outcome of a non-transactional batch sync."""

    from_source: Source
    to_source: Source
    requested: List[str] = Field(default_factory=list)
    completed: List[str] = Field(default_factory=list)
    failures: Dict[str, str] = Field(default_factory=dict)
    first_failure: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.first_failure is None

    @property
    def completed_count(self) -> int:
        return len(self.completed)
