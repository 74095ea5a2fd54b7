"""
Export of MCP items and skills to standalone JSON files.
"""

import json
from pathlib import Path
from typing import Union

from mcp_sync.core.exceptions import BackendError
from mcp_sync.core.registry import SourceRegistry
from mcp_sync.core.skills import SkillRegistry
from mcp_sync.utils.logging import get_logger

logger = get_logger(__name__)


async def export_items(registry: SourceRegistry, path: Union[str, Path]) -> Path:
    """Write both item collections to ``path`` as ``{"opencode": [...], "claude": [...]}``."""
    collections = await registry.load_all()
    data = collections.model_dump(mode="json")
    return _write(Path(path), data)


async def export_skills(skills: SkillRegistry, path: Union[str, Path]) -> Path:
    """Write the skills document to ``path``."""
    document = await skills.load()
    return _write(Path(path), document.to_document())


def _write(path: Path, data) -> Path:
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(data, indent=2, ensure_ascii=False), encoding="utf-8")
    except OSError as e:
        raise BackendError(f"Failed to write export: {e}", details={"path": str(path)})

    logger.info(f"Exported to {path}")
    return path
