"""
Display helper functions for CLI commands.
"""

import json
from typing import Any, Dict, List

from rich.console import Console
from rich.panel import Panel
from rich.syntax import Syntax
from rich.table import Table

from mcp_sync.core import normalizer
from mcp_sync.core.models import (
    ArchiveMetadata,
    BatchSyncResult,
    DiffResult,
    MCPItem,
    SkillConfig,
    SnapshotMetadata,
    Source,
)

console = Console()


def _truncate(text: str, width: int) -> str:
    return text[:width - 3] + "..." if len(text) > width else text


def item_to_dict(item: MCPItem) -> Dict[str, Any]:
    """JSON view of an item including its derived fields."""
    parsed = normalizer.parse(item.raw_config)
    return {
        "name": item.name,
        "source": item.source.value,
        "type": normalizer.classify(parsed).value,
        "enabled": item.enabled,
        "description": normalizer.describe(item, parsed),
        "config": item.raw_config,
    }


def show_items_table(items: List[MCPItem], source: Source) -> None:
    """Render the items of one source."""
    if not items:
        console.print(f"[yellow]No {source.display_name} MCPs configured[/yellow]")
        return

    table = Table(
        title=f"{source.display_name} MCPs ({len(items)} total)",
        show_header=True,
        header_style="bold cyan",
        title_style="bold cyan",
    )
    table.add_column("Name", style="green")
    table.add_column("Type", style="blue", width=8)
    table.add_column("Status", style="white", width=10)
    table.add_column("Description", style="dim", max_width=60)

    for item in items:
        parsed = normalizer.parse(item.raw_config)
        table.add_row(
            item.name,
            normalizer.classify(parsed).value,
            "✅ Enabled" if item.enabled else "❌ Disabled",
            _truncate(normalizer.describe(item, parsed), 60),
        )

    console.print(table)


def show_item_details(item: MCPItem) -> None:
    """Render one item with its raw configuration."""
    info = item_to_dict(item)
    lines = [
        f"[bold cyan]Source:[/bold cyan] {item.source.display_name}",
        f"[bold cyan]Type:[/bold cyan] {info['type']}",
        f"[bold cyan]Enabled:[/bold cyan] {'yes' if item.enabled else 'no'}",
    ]
    if info["description"]:
        lines.append(f"[bold cyan]Description:[/bold cyan] {info['description']}")

    console.print(Panel("\n".join(lines), title=f"📋 {item.name}", title_align="left", border_style="cyan"))
    console.print(Syntax(json.dumps(item.raw_config, indent=2, ensure_ascii=False), "json"))


def show_diff(diff: DiffResult) -> None:
    """Render drift between the two sources."""
    if diff.in_sync:
        console.print("[green]✅ All MCPs are synchronized.[/green]")
        return

    for source in Source:
        names = diff.only_in(source)
        if names:
            console.print(
                f"[yellow]Only in {source.display_name} ({len(names)}):[/yellow] "
                f"[dim]{len(names)} items to sync to {source.other().display_name}[/dim]"
            )
            for name in names:
                console.print(f"  • {name}")

    if diff.diverged:
        console.print(f"[magenta]Different content ({len(diff.diverged)}):[/magenta]")
        for name in diff.diverged:
            console.print(f"  • {name}")


def show_batch_result(result: BatchSyncResult) -> None:
    """Render the outcome of a batch sync."""
    total = len(result.requested)
    if not total:
        console.print("[green]Nothing to sync[/green]")
        return

    if result.ok:
        console.print(
            f"[green]✅ Synced {result.completed_count} MCPs to {result.to_source.display_name}[/green]"
        )
        return

    console.print(
        f"[red]❌ Sync partially failed: {result.completed_count}/{total} completed, "
        f"first failure '{result.first_failure}'[/red]"
    )
    for name, message in result.failures.items():
        console.print(f"  [red]•[/red] {name}: {message}")


def show_snapshot(metadata: SnapshotMetadata) -> None:
    """Render backup metadata."""
    lines = [
        f"[bold cyan]Source:[/bold cyan] {metadata.source.display_name}",
        f"[bold cyan]MCPs:[/bold cyan] {metadata.item_count}",
        f"[bold cyan]Created:[/bold cyan] {metadata.created_at}",
    ]
    if metadata.path:
        lines.append(f"[bold cyan]Path:[/bold cyan] {metadata.path}")

    console.print(Panel("\n".join(lines), title=f"💾 {metadata.filename}", title_align="left", border_style="cyan"))


def show_archives_table(archives: List[ArchiveMetadata]) -> None:
    """Render full-configuration archives, newest first."""
    if not archives:
        console.print("[yellow]No configuration archives[/yellow]")
        return

    table = Table(
        title=f"Configuration Archives ({len(archives)} total)",
        show_header=True,
        header_style="bold cyan",
        title_style="bold cyan",
    )
    table.add_column("File", style="green")
    table.add_column("Created", style="white")

    for archive in archives:
        table.add_row(archive.filename, archive.created_at)

    console.print(table)


def show_skills_table(skills: List[SkillConfig]) -> None:
    """Render skills."""
    if not skills:
        console.print("[yellow]No skills configured[/yellow]")
        return

    table = Table(
        title=f"Skills ({len(skills)} total)",
        show_header=True,
        header_style="bold cyan",
        title_style="bold cyan",
    )
    table.add_column("Name", style="green")
    table.add_column("Scope", style="yellow", width=8)
    table.add_column("Status", style="white", width=10)
    table.add_column("Description", style="dim")

    for skill in skills:
        table.add_row(
            skill.name,
            skill.partition.value,
            "✅ Enabled" if skill.enabled else "❌ Disabled",
            skill.description or "",
        )

    console.print(table)
