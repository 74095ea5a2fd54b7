"""
Exception classes for MCP Sync.

Defines the error taxonomy surfaced by the normalizer, registries,
sync orchestrator and backup manager.
"""

from typing import Any, Dict, Optional


class MCPSyncError(Exception):
    """Base exception for all MCP Sync errors."""
    
    default_code: Optional[str] = None
    
    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        """
        Initialize MCPSyncError.
        
        Args:
            message: Error message
            error_code: Optional error code for categorization
            details: Optional additional error details
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code or self.default_code
        self.details = details or {}
        
    def __str__(self) -> str:
        """String representation of the error."""
        if self.error_code:
            return f"[{self.error_code}] {self.message}"
        return self.message
        
    def to_dict(self) -> Dict[str, Any]:
        """Convert error to dictionary representation."""
        return {
            "error": self.__class__.__name__,
            "message": self.message,
            "error_code": self.error_code,
            "details": self.details,
        }


class ConfigError(MCPSyncError):
    """Application configuration errors."""
    default_code = "CONFIG"


class ParseError(MCPSyncError):
    """Malformed MCP configuration document."""
    default_code = "PARSE"


class ValidationError(MCPSyncError):
    """Data validation errors raised before any backend call."""
    default_code = "VALIDATION"


class DuplicateNameError(MCPSyncError):
    """An item or skill with the same name already exists in the target."""
    default_code = "DUPLICATE"


class NotFoundError(MCPSyncError):
    """The named item, skill or backup entry does not exist."""
    default_code = "NOT_FOUND"


class NoBackupError(MCPSyncError):
    """Restore or read attempted while no snapshot exists for a source."""
    default_code = "NO_BACKUP"


class BackendError(MCPSyncError):
    """Transport or persistence failure reported by the backend."""
    default_code = "BACKEND"


class OperationInProgressError(MCPSyncError):
    """A guarded operation is already running for the same key."""
    default_code = "IN_PROGRESS"
