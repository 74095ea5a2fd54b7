"""
Application context.

The entry point builds one ``AppContext`` and hands it to every command.
Each context owns its backend, registries and single-flight guard, so
separate instances never share mutable state.
"""

from typing import Optional

from mcp_sync.backend.base import Backend
from mcp_sync.core.backup import BackupManager
from mcp_sync.core.diff import compute_diff
from mcp_sync.core.models import DiffResult, Source
from mcp_sync.core.registry import SourceRegistry
from mcp_sync.core.single_flight import SingleFlight
from mcp_sync.core.skills import SkillRegistry
from mcp_sync.core.sync import SyncOrchestrator
from mcp_sync.utils.config import Config


class AppContext:
    """Owned container of the core components."""

    def __init__(self, backend: Backend, config: Optional[Config] = None):
        self.config = config
        self.backend = backend
        self.single_flight = SingleFlight()
        self.registry = SourceRegistry(backend)
        self.sync = SyncOrchestrator(self.registry, self.single_flight)
        self.backups = BackupManager(self.registry, self.single_flight)
        self.skills = SkillRegistry(backend)

    @classmethod
    def from_config(cls, config: Config) -> "AppContext":
        """Build a context backed by the configured files."""
        return cls(config.build_backend(), config=config)

    async def diff(self, compare_content: bool = False) -> DiffResult:
        """Reload and compute drift between the two sources."""
        await self.registry.load_all()
        return compute_diff(
            self.registry.items(Source.OPENCODE),
            self.registry.items(Source.CLAUDE),
            compare_content=compare_content,
        )
