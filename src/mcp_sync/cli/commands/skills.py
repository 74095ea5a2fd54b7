"""
Skill management commands for MCP Sync CLI.
"""

import asyncio
import json
from typing import Optional

import click
from rich.console import Console

from mcp_sync.cli.helpers import handle_errors, show_skills_table
from mcp_sync.core.models import SkillPartition

console = Console()

PARTITION_CHOICE = click.Choice([p.value for p in SkillPartition], case_sensitive=False)


def _partition(value: Optional[str]) -> Optional[SkillPartition]:
    return SkillPartition(value) if value else None


def skills_commands():
    """Build the ``skills`` command group."""

    @click.group(name="skills")
    def skills():
        """Manage skills (global and project)."""

    @skills.command(name="list")
    @click.option("--scope", "scope", type=PARTITION_CHOICE, help="Only show one scope")
    @click.option(
        "--output-format", "-o",
        type=click.Choice(["table", "json"], case_sensitive=False),
        default="table",
        help="Output format"
    )
    @click.pass_obj
    @handle_errors
    def list_cmd(obj, scope: Optional[str], output_format: str):
        """List configured skills."""
        app = obj.get_app()
        entries = asyncio.run(app.skills.list(_partition(scope)))
        if output_format == "json":
            click.echo(json.dumps(
                [skill.model_dump(by_alias=True, mode="json") for skill in entries],
                indent=2,
            ))
            return
        show_skills_table(entries)

    @skills.command(name="add")
    @click.argument("name")
    @click.option("--description", "-d", help="Skill description")
    @click.option("--scope", "scope", type=PARTITION_CHOICE, default="global", help="Skill scope")
    @click.pass_obj
    @handle_errors
    def add(obj, name: str, description: Optional[str], scope: str):
        """Add a skill."""
        app = obj.get_app()
        skill = asyncio.run(app.skills.add(name, description, SkillPartition(scope)))
        console.print(f"[green]✅ Added skill '{skill.name}' ({skill.partition.value})[/green]")

    @skills.command(name="update")
    @click.argument("name")
    @click.option("--description", "-d", help="New description")
    @click.option("--enable/--disable", "enabled", default=None, help="Enable or disable the skill")
    @click.option("--scope", "scope", type=PARTITION_CHOICE, help="Scope of the skill to update")
    @click.pass_obj
    @handle_errors
    def update(obj, name: str, description: Optional[str], enabled: Optional[bool], scope: Optional[str]):
        """Update a skill's description or status."""
        app = obj.get_app()
        asyncio.run(app.skills.update(name, description, enabled, _partition(scope)))
        console.print(f"[green]✅ Updated skill '{name}'[/green]")

    @skills.command(name="toggle")
    @click.argument("name")
    @click.argument("state", type=click.Choice(["on", "off"]))
    @click.pass_obj
    @handle_errors
    def toggle(obj, name: str, state: str):
        """Turn a skill on or off."""
        app = obj.get_app()
        asyncio.run(app.skills.toggle(name, state == "on"))
        console.print(f"[green]✅ Skill '{name}' {'enabled' if state == 'on' else 'disabled'}[/green]")

    @skills.command(name="remove")
    @click.argument("name")
    @click.option("--scope", "scope", type=PARTITION_CHOICE, help="Only remove from one scope")
    @click.pass_obj
    @handle_errors
    def remove(obj, name: str, scope: Optional[str]):
        """Remove a skill."""
        app = obj.get_app()
        asyncio.run(app.skills.remove(name, _partition(scope)))
        console.print(f"[green]✅ Removed skill '{name}'[/green]")

    return [skills]
