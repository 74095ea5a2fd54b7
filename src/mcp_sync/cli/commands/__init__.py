"""
Modular command groups for MCP Sync CLI.
"""

from .backup import backup_commands
from .export import export_commands
from .skills import skills_commands

__all__ = [
    'backup_commands',
    'export_commands',
    'skills_commands',
]
