"""
Skill registry.

CRUD over the skills document. Names are unique per partition (global or
project); agents and plugins in the document are carried through untouched.
"""

from typing import List, Optional

from mcp_sync.backend.base import Backend
from mcp_sync.core.exceptions import DuplicateNameError, NotFoundError
from mcp_sync.core.models import SkillConfig, SkillPartition, SkillsDocument
from mcp_sync.utils.logging import get_logger
from mcp_sync.utils.validators import validate_skill_name

logger = get_logger(__name__)


class SkillRegistry:
    """Manages skills stored in the skills document."""

    def __init__(self, backend: Backend):
        self.backend = backend
        self.document = SkillsDocument()

    async def load(self) -> SkillsDocument:
        self.document = await self.backend.load_skills()
        logger.debug(f"Skills config loaded: {len(self.document.skills)} skills")
        return self.document

    async def list(self, partition: Optional[SkillPartition] = None) -> List[SkillConfig]:
        await self.load()
        return [
            skill for skill in self.document.skills
            if partition is None or skill.partition == partition
        ]

    async def add(
        self,
        name: str,
        description: Optional[str] = None,
        partition: SkillPartition = SkillPartition.GLOBAL,
    ) -> SkillConfig:
        """
        Add an enabled skill.

        Raises:
            ValidationError: If the name is empty
            DuplicateNameError: If the name exists in ``partition``
        """
        name = validate_skill_name(name)
        document = await self.load()

        if self._find(document, name, partition) is not None:
            raise DuplicateNameError(
                f"Skill '{name}' already exists in {partition.value} skills",
                details={"name": name, "partition": partition.value},
            )

        skill = SkillConfig(name=name, description=description, enabled=True, partition=partition)
        document.skills.append(skill)
        await self._save(document)
        logger.info(f"Added skill '{name}' ({partition.value})")
        return skill

    async def update(
        self,
        name: str,
        description: Optional[str] = None,
        enabled: Optional[bool] = None,
        partition: Optional[SkillPartition] = None,
    ) -> SkillConfig:
        """
        Update description and/or enabled flag; None leaves a field as is.

        Raises:
            NotFoundError: If no matching skill exists
        """
        document = await self.load()
        skill = self._require(document, name, partition)

        changes = {}
        if description is not None:
            changes["description"] = description
        if enabled is not None:
            changes["enabled"] = enabled

        updated = skill.model_copy(update=changes)
        document.skills[document.skills.index(skill)] = updated
        await self._save(document)
        logger.info(f"Updated skill '{name}'")
        return updated

    async def toggle(self, name: str, enabled: bool, partition: Optional[SkillPartition] = None) -> SkillConfig:
        return await self.update(name, enabled=enabled, partition=partition)

    async def remove(self, name: str, partition: Optional[SkillPartition] = None) -> None:
        """
        Remove a skill. Without ``partition`` every partition's entry is removed.

        Raises:
            NotFoundError: If no matching skill exists
        """
        document = await self.load()
        self._require(document, name, partition)

        document.skills = [
            skill for skill in document.skills
            if not (skill.name == name and (partition is None or skill.partition == partition))
        ]
        await self._save(document)
        logger.info(f"Removed skill '{name}'")

    async def _save(self, document: SkillsDocument) -> None:
        await self.backend.save_skills(document)
        self.document = document

    @staticmethod
    def _find(
        document: SkillsDocument,
        name: str,
        partition: Optional[SkillPartition],
    ) -> Optional[SkillConfig]:
        for skill in document.skills:
            if skill.name == name and (partition is None or skill.partition == partition):
                return skill
        return None

    def _require(
        self,
        document: SkillsDocument,
        name: str,
        partition: Optional[SkillPartition],
    ) -> SkillConfig:
        skill = self._find(document, name, partition)
        if skill is None:
            where = f" in {partition.value} skills" if partition else ""
            raise NotFoundError(
                f"Skill '{name}' not found{where}",
                details={"name": name},
            )
        return skill
