"""
Backup and restore commands for MCP Sync CLI.
"""

import asyncio
import json

import click
from rich.console import Console
from rich.prompt import Confirm
from rich.syntax import Syntax

from mcp_sync.cli.helpers import handle_errors, show_archives_table, show_snapshot
from mcp_sync.core.models import Source

console = Console()

SOURCE_CHOICE = click.Choice([s.value for s in Source], case_sensitive=False)


def backup_commands():
    """Build the ``backup`` command group."""

    @click.group(name="backup")
    def backup():
        """Create, inspect and restore MCP backups and configuration archives."""

    @backup.command(name="create")
    @click.argument("source", type=SOURCE_CHOICE)
    @click.pass_obj
    @handle_errors
    def create(obj, source: str):
        """Back up every MCP of SOURCE, replacing its previous backup."""
        app = obj.get_app()
        metadata = asyncio.run(app.backups.backup(Source(source)))
        console.print(f"[green]✅ Backed up {metadata.item_count} MCPs[/green]")
        show_snapshot(metadata)

    @backup.command(name="show")
    @click.argument("source", type=SOURCE_CHOICE)
    @click.pass_obj
    @handle_errors
    def show(obj, source: str):
        """Show the retained backup of SOURCE."""
        app = obj.get_app()
        metadata = asyncio.run(app.backups.get_latest_backup(Source(source)))
        if metadata is None:
            console.print(f"[yellow]No backup for {Source(source).display_name}[/yellow]")
            return
        show_snapshot(metadata)

    @backup.command(name="content")
    @click.argument("source", type=SOURCE_CHOICE)
    @click.pass_obj
    @handle_errors
    def content(obj, source: str):
        """Print the MCP configs stored in the backup of SOURCE."""
        app = obj.get_app()
        items = asyncio.run(app.backups.read_backup_content(Source(source)))
        console.print(Syntax(json.dumps(items, indent=2, ensure_ascii=False), "json"))

    @backup.command(name="restore")
    @click.argument("source", type=SOURCE_CHOICE)
    @click.option("--force", "-f", is_flag=True, help="Skip confirmation prompt")
    @click.pass_obj
    @handle_errors
    def restore(obj, source: str, force: bool):
        """Restore every MCP of the SOURCE backup (existing MCPs are kept)."""
        source_enum = Source(source)
        if not force and not Confirm.ask(f"Restore all {source_enum.display_name} MCPs from backup?"):
            console.print("[dim]Restore cancelled[/dim]")
            return

        app = obj.get_app()
        message = asyncio.run(app.backups.restore_all(source_enum))
        console.print(f"[green]✅ {message}[/green]")

    @backup.command(name="restore-one")
    @click.argument("source", type=SOURCE_CHOICE)
    @click.argument("name")
    @click.pass_obj
    @handle_errors
    def restore_one(obj, source: str, name: str):
        """Restore the single MCP NAME from the SOURCE backup."""
        app = obj.get_app()
        message = asyncio.run(app.backups.restore_one(Source(source), name))
        console.print(f"[green]✅ {message}[/green]")

    @backup.command(name="archive")
    @click.pass_obj
    @handle_errors
    def archive(obj):
        """Archive both configuration files and the skills document."""
        app = obj.get_app()
        metadata = asyncio.run(app.backups.create_archive())
        console.print(f"[green]✅ Configuration archived to {metadata.path or metadata.filename}[/green]")

    @backup.command(name="archives")
    @click.pass_obj
    @handle_errors
    def archives(obj):
        """List configuration archives, newest first."""
        app = obj.get_app()
        show_archives_table(asyncio.run(app.backups.list_archives()))

    @backup.command(name="restore-archive")
    @click.argument("filename")
    @click.option("--force", "-f", is_flag=True, help="Skip confirmation prompt")
    @click.pass_obj
    @handle_errors
    def restore_archive(obj, filename: str, force: bool):
        """Overwrite both configuration files and the skills document from FILENAME."""
        if not force and not Confirm.ask(f"Overwrite current configuration with {filename}?"):
            console.print("[dim]Restore cancelled[/dim]")
            return

        app = obj.get_app()
        message = asyncio.run(app.backups.restore_archive(filename))
        console.print(f"[green]✅ {message}[/green]")

    return [backup]
