"""
Helpers for reading MCP configuration documents from command options.
"""

from pathlib import Path
from typing import Any, Dict, Optional

import click

from mcp_sync.core.exceptions import BackendError
from mcp_sync.utils.validators import validate_config_document


def read_config_option(config_json: Optional[str], config_file: Optional[Path]) -> Dict[str, Any]:
    """
    Resolve ``--config``/``--config-file`` into a validated document.

    Raises:
        click.UsageError: If neither or both options are given
        ParseError: If the text is not valid JSON
        ValidationError: If the document is not a JSON object
    """
    if bool(config_json) == bool(config_file):
        raise click.UsageError("Provide exactly one of --config or --config-file")

    if config_file:
        try:
            config_json = Path(config_file).read_text(encoding="utf-8")
        except OSError as e:
            raise BackendError(f"Failed to read {config_file}: {e}")

    return validate_config_document(config_json)
