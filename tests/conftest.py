"""
Pytest configuration and fixtures for MCP Sync testing.

Every fixture builds its own backend and application context, so tests
never share state or touch the user's real configuration files.
"""

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from mcp_sync.backend import FileBackend, MemoryBackend
from mcp_sync.cli.main import CLIContext
from mcp_sync.core.context import AppContext
from mcp_sync.core.models import Source
from mcp_sync.utils.config import Config

WEATHER_CONFIG = {"type": "remote", "url": "https://x/mcp"}

FILESYSTEM_CONFIG = {
    "type": "local",
    "command": ["npx", "-y", "@modelcontextprotocol/server-filesystem", "/tmp"],
    "enabled": True,
}

GITHUB_CONFIG = {
    "type": "stdio",
    "command": "npx",
    "args": ["-y", "@modelcontextprotocol/server-github"],
    "env": {"GITHUB_TOKEN": "token"},
}


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "integration: Integration tests")


@pytest.fixture
def memory_backend():
    """Empty in-memory backend."""
    return MemoryBackend()


@pytest.fixture
def seeded_backend():
    """In-memory backend with one item only in each source."""
    return MemoryBackend(entries={
        Source.OPENCODE: {"filesystem": FILESYSTEM_CONFIG},
        Source.CLAUDE: {"github": GITHUB_CONFIG},
    })


@pytest.fixture
def app(memory_backend):
    """Application context over an empty in-memory backend."""
    return AppContext(memory_backend, config=Config())


@pytest.fixture
def seeded_app(seeded_backend):
    """Application context over the seeded in-memory backend."""
    return AppContext(seeded_backend, config=Config())


@pytest.fixture
def file_paths(tmp_path: Path):
    """Paths of an isolated set of configuration files."""
    paths = {
        "opencode": tmp_path / "opencode" / "opencode.json",
        "claude": tmp_path / "claude.json",
        "skills": tmp_path / "opencode" / "oh-my-opencode.json",
        "backup": tmp_path / "backups",
    }
    paths["opencode"].parent.mkdir(parents=True)
    paths["opencode"].write_text(json.dumps({
        "$schema": "https://opencode.ai/config.json",
        "theme": "dark",
        "mcp": {"filesystem": FILESYSTEM_CONFIG},
    }))
    paths["claude"].write_text(json.dumps({
        "numStartups": 3,
        "mcpServers": {"github": GITHUB_CONFIG},
    }))
    return paths


@pytest.fixture
def file_backend(file_paths):
    """Filesystem backend over temporary files."""
    return FileBackend(
        opencode_path=file_paths["opencode"],
        claude_path=file_paths["claude"],
        skills_path=file_paths["skills"],
        backup_dir=file_paths["backup"],
    )


@pytest.fixture
def runner():
    """Click test runner."""
    return CliRunner()


@pytest.fixture
def cli_obj(seeded_app):
    """CLI context wired to the seeded application context."""
    return CLIContext(app=seeded_app, config=seeded_app.config)
