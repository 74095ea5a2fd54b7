"""
Error handling utilities for CLI commands.
"""

import functools
import sys

import click
from rich.console import Console

from mcp_sync.core.exceptions import MCPSyncError
from mcp_sync.utils.logging import get_logger

console = Console(stderr=True)
logger = get_logger(__name__)


def handle_errors(func):
    """Decorator to report MCP Sync errors and exit non-zero."""

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except click.ClickException:
            raise
        except KeyboardInterrupt:
            console.print("\n[yellow]Operation cancelled by user[/yellow]")
            sys.exit(1)
        except MCPSyncError as e:
            logger.debug("Command failed", exc_info=True)
            console.print(f"[red]Error: {e}[/red]")
            sys.exit(1)
        except Exception as e:
            logger.debug("Unexpected failure", exc_info=True)
            console.print(f"[red]Error: {e}[/red]")
            console.print("[dim]Use --debug for more details[/dim]")
            sys.exit(1)

    return wrapper
