"""
Export commands for MCP Sync CLI.
"""

import asyncio
from pathlib import Path

import click
from rich.console import Console

from mcp_sync.cli.helpers import handle_errors
from mcp_sync.core.export import export_items, export_skills

console = Console()


def export_commands():
    """Build the ``export`` command group."""

    @click.group(name="export")
    def export():
        """Export MCPs or skills to a JSON file."""

    @export.command(name="mcp")
    @click.argument("path", type=click.Path(dir_okay=False, path_type=Path))
    @click.pass_obj
    @handle_errors
    def export_mcp(obj, path: Path):
        """Export both MCP collections to PATH."""
        written = asyncio.run(export_items(obj.get_app().registry, path))
        console.print(f"[green]✅ Exported MCPs to {written}[/green]")

    @export.command(name="skills")
    @click.argument("path", type=click.Path(dir_okay=False, path_type=Path))
    @click.pass_obj
    @handle_errors
    def export_skills_cmd(obj, path: Path):
        """Export the skills document to PATH."""
        written = asyncio.run(export_skills(obj.get_app().skills, path))
        console.print(f"[green]✅ Exported skills to {written}[/green]")

    return [export]
