"""
Main CLI interface for MCP Sync.

Manage and synchronize MCP configurations between OpenCode and Claude Code
from the command line, using Click for commands and Rich for output.
"""

import asyncio
import json
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.prompt import Confirm
from rich.table import Table

from mcp_sync import __version__
from mcp_sync.cli.commands.backup import backup_commands
from mcp_sync.cli.commands.export import export_commands
from mcp_sync.cli.commands.skills import skills_commands
from mcp_sync.cli.helpers import (
    handle_errors,
    item_to_dict,
    read_config_option,
    show_batch_result,
    show_diff,
    show_item_details,
    show_items_table,
)
from mcp_sync.core.context import AppContext
from mcp_sync.core.exceptions import NotFoundError
from mcp_sync.core.models import Source
from mcp_sync.utils.config import Config, ConfigManager
from mcp_sync.utils.logging import configure_logging, get_logger

console = Console()
logger = get_logger(__name__)

SOURCE_CHOICE = click.Choice([s.value for s in Source], case_sensitive=False)


class CLIContext:
    """CLI context for passing state between commands."""

    def __init__(self, app: Optional[AppContext] = None, config: Optional[Config] = None):
        self.app = app
        self.config = config
        self.config_file: Optional[Path] = None

    def get_config(self) -> Config:
        """Get configuration, loading it on first use."""
        if self.config is None:
            if self.app is not None and self.app.config is not None:
                self.config = self.app.config
            else:
                files = [self.config_file] if self.config_file else None
                self.config = ConfigManager().load_config(config_files=files)
        return self.config

    def get_app(self) -> AppContext:
        """Get the application context, building it on first use."""
        if self.app is None:
            config = self.get_config()
            logger.debug(f"Building application context for {config.paths.opencode_config} and {config.paths.claude_config}")
            self.app = AppContext.from_config(config)
        return self.app


@click.group()
@click.option(
    "--debug", "-d",
    is_flag=True,
    help="Enable debug logging"
)
@click.option(
    "--verbose", "-v",
    is_flag=True,
    help="Enable verbose output"
)
@click.option(
    "--config", "config_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Configuration file (TOML)"
)
@click.version_option(version=__version__, prog_name="MCP Sync")
@click.pass_context
def cli(ctx: click.Context, debug: bool, verbose: bool, config_file: Optional[Path]):
    """
    Keep OpenCode and Claude Code MCP configurations in sync.

    List, edit, diff, sync, back up and restore MCP server entries of both
    tools, and manage OpenCode skills.
    """
    if ctx.obj is None:
        ctx.obj = CLIContext()
    cli_context: CLIContext = ctx.obj
    if config_file:
        cli_context.config_file = config_file

    config = cli_context.get_config()
    if debug or config.debug:
        console_level = "DEBUG"
    elif verbose:
        console_level = "INFO"
    else:
        console_level = None

    configure_logging(config.logging, log_file=config.get_log_file(), console_level=console_level)


@cli.command("list")
@click.option(
    "--source", "-s",
    type=SOURCE_CHOICE,
    help="Only list one source"
)
@click.option(
    "--output-format", "-o",
    type=click.Choice(["table", "json"], case_sensitive=False),
    default="table",
    help="Output format"
)
@click.pass_obj
@handle_errors
def list_cmd(obj: CLIContext, source: Optional[str], output_format: str):
    """List configured MCPs of both sources."""
    app = obj.get_app()
    asyncio.run(app.registry.load_all())

    sources = [Source(source)] if source else list(Source)
    if output_format == "json":
        data = {s.value: [item_to_dict(item) for item in app.registry.items(s)] for s in sources}
        click.echo(json.dumps(data, indent=2, ensure_ascii=False))
        return

    for s in sources:
        show_items_table(app.registry.items(s), s)


@cli.command()
@click.argument("name")
@click.option("--source", "-s", type=SOURCE_CHOICE, required=True, help="Source of the MCP")
@click.pass_obj
@handle_errors
def show(obj: CLIContext, name: str, source: str):
    """Show one MCP and its raw configuration."""
    app = obj.get_app()
    source_enum = Source(source)
    asyncio.run(app.registry.load_all())

    item = app.registry.get(name, source_enum)
    if item is None:
        raise NotFoundError(f"MCP '{name}' not found in {source_enum.display_name}")
    show_item_details(item)


@cli.command()
@click.argument("name")
@click.option("--source", "-s", type=SOURCE_CHOICE, required=True, help="Source to add to")
@click.option("--config", "config_json", help="MCP configuration as JSON")
@click.option(
    "--config-file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Read MCP configuration from a JSON file"
)
@click.option("--description", help="Description (OpenCode only)")
@click.pass_obj
@handle_errors
def add(
    obj: CLIContext,
    name: str,
    source: str,
    config_json: Optional[str],
    config_file: Optional[Path],
    description: Optional[str],
):
    """Add a new MCP."""
    document = read_config_option(config_json, config_file)
    source_enum = Source(source)

    app = obj.get_app()
    asyncio.run(app.registry.add(name, document, source_enum, description))
    console.print(f"[green]✅ Added MCP '{name}' to {source_enum.display_name}[/green]")


@cli.command()
@click.argument("name")
@click.option("--source", "-s", type=SOURCE_CHOICE, required=True, help="Source of the MCP")
@click.option("--config", "config_json", help="New MCP configuration as JSON")
@click.option(
    "--config-file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Read MCP configuration from a JSON file"
)
@click.option("--description", help="Description (OpenCode only)")
@click.pass_obj
@handle_errors
def update(
    obj: CLIContext,
    name: str,
    source: str,
    config_json: Optional[str],
    config_file: Optional[Path],
    description: Optional[str],
):
    """Replace the configuration of an existing MCP."""
    document = read_config_option(config_json, config_file)
    source_enum = Source(source)

    app = obj.get_app()
    asyncio.run(app.registry.update(name, document, source_enum, description))
    console.print(f"[green]✅ Updated MCP '{name}' in {source_enum.display_name}[/green]")


@cli.command()
@click.argument("name")
@click.option("--source", "-s", type=SOURCE_CHOICE, required=True, help="Source of the MCP")
@click.option("--force", "-f", is_flag=True, help="Skip confirmation prompt")
@click.pass_obj
@handle_errors
def remove(obj: CLIContext, name: str, source: str, force: bool):
    """Permanently delete an MCP."""
    source_enum = Source(source)
    if not force and not Confirm.ask(f"Delete MCP '{name}' from {source_enum.display_name}?"):
        console.print("[dim]Removal cancelled[/dim]")
        return

    app = obj.get_app()
    asyncio.run(app.registry.delete(name, source_enum))
    console.print(f"[green]✅ Removed MCP '{name}' from {source_enum.display_name}[/green]")


@cli.command()
@click.option("--content", is_flag=True, help="Also report MCPs whose configs differ")
@click.option(
    "--output-format", "-o",
    type=click.Choice(["table", "json"], case_sensitive=False),
    default="table",
    help="Output format"
)
@click.pass_obj
@handle_errors
def diff(obj: CLIContext, content: bool, output_format: str):
    """Show MCPs that exist in only one source."""
    app = obj.get_app()
    result = asyncio.run(app.diff(compare_content=content))

    if output_format == "json":
        click.echo(result.model_dump_json(indent=2))
        return
    show_diff(result)


@cli.command()
@click.argument("names", nargs=-1, required=True)
@click.option("--from", "from_source", type=SOURCE_CHOICE, required=True, help="Source to copy from")
@click.option("--to", "to_source", type=SOURCE_CHOICE, help="Target source (defaults to the other one)")
@click.pass_obj
@handle_errors
def sync(obj: CLIContext, names, from_source: str, to_source: Optional[str]):
    """Copy one or more MCPs to the other source, overwriting same names."""
    origin = Source(from_source)
    target = Source(to_source) if to_source else origin.other()

    app = obj.get_app()
    result = asyncio.run(app.sync.sync_batch(names, origin, target))
    show_batch_result(result)
    if not result.ok:
        raise SystemExit(1)


@cli.command("sync-missing")
@click.option("--from", "from_source", type=SOURCE_CHOICE, required=True, help="Source to copy from")
@click.pass_obj
@handle_errors
def sync_missing(obj: CLIContext, from_source: str):
    """Copy every MCP missing from the other source."""
    app = obj.get_app()
    result = asyncio.run(app.sync.sync_missing(Source(from_source)))
    show_batch_result(result)
    if not result.ok:
        raise SystemExit(1)


@cli.command()
@click.argument("name")
@click.option("--from", "from_source", type=SOURCE_CHOICE, required=True, help="Current source")
@click.option("--to", "to_source", type=SOURCE_CHOICE, help="New source (defaults to the other one)")
@click.option("--delete-origin", is_flag=True, help="Delete the MCP from its current source")
@click.pass_obj
@handle_errors
def move(obj: CLIContext, name: str, from_source: str, to_source: Optional[str], delete_origin: bool):
    """Create an MCP in the other source, optionally removing the original."""
    origin = Source(from_source)
    target = Source(to_source) if to_source else origin.other()

    app = obj.get_app()
    asyncio.run(app.sync.move_item(name, origin, target, delete_origin=delete_origin))
    verb = "Moved" if delete_origin else "Copied"
    console.print(f"[green]✅ {verb} MCP '{name}' to {target.display_name}[/green]")


@cli.command()
@click.pass_obj
@handle_errors
def paths(obj: CLIContext):
    """Show the files MCP Sync reads and writes."""
    app = obj.get_app()

    table = Table(title="MCP Sync Paths", show_header=True, header_style="bold cyan")
    table.add_column("Name", style="green")
    table.add_column("Location", style="white")
    for name, location in app.backend.config_paths().items():
        table.add_row(name, str(location))

    console.print(table)


def register_commands():
    """Register all modular command groups with the main CLI."""
    for factory in (backup_commands, skills_commands, export_commands):
        for cmd in factory():
            cli.add_command(cmd)


register_commands()


def main():
    """Main CLI entry point."""
    cli()


if __name__ == "__main__":
    main()
