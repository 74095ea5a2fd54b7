"""
Persistent backends for MCP Sync.

The core only talks to ``Backend``; ``FileBackend`` owns the on-disk
formats and ``MemoryBackend`` keeps everything in process.
"""

from .base import Backend, DocumentBackend
from .filesystem import FileBackend
from .memory import MemoryBackend

__all__ = [
    "Backend",
    "DocumentBackend",
    "FileBackend",
    "MemoryBackend",
]
