"""
Logging infrastructure for MCP Sync.

Records go to a Rich console handler on stderr (or a plain/JSON stream
handler when Rich is switched off) and, optionally, to a rotating file.
"""

import json
import logging
import logging.handlers
import sys
from pathlib import Path
from typing import TYPE_CHECKING, Any, Dict, Optional, Union

from rich.console import Console
from rich.logging import RichHandler

if TYPE_CHECKING:
    from mcp_sync.utils.config import LoggingConfig

TEXT_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
FILE_TEXT_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(module)s:%(funcName)s:%(lineno)d | %(message)s"

# LogRecord attributes that are not user supplied ``extra`` fields
_RECORD_ATTRS = frozenset({
    "name", "msg", "args", "levelname", "levelno", "pathname",
    "filename", "module", "lineno", "funcName", "created",
    "msecs", "relativeCreated", "thread", "threadName", "taskName",
    "processName", "process", "getMessage", "exc_info",
    "exc_text", "stack_info", "message", "asctime",
})

Level = Union[str, int]


def _level(value: Level) -> int:
    if isinstance(value, str):
        return logging.getLevelName(value.upper())
    return value


class JSONFormatter(logging.Formatter):
    """One JSON object per record, including ``extra`` fields."""

    def format(self, record: logging.LogRecord) -> str:
        entry: Dict[str, Any] = {
            "timestamp": self.formatTime(record),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        entry.update(
            (key, value) for key, value in record.__dict__.items() if key not in _RECORD_ATTRS
        )
        return json.dumps(entry, default=str)


class SyncLogger:
    """Owns the root logger configuration for the process."""

    def __init__(self):
        self._loggers: Dict[str, logging.Logger] = {}
        self._setup_done = False

    def setup_logging(
        self,
        enabled: bool = True,
        level: Level = logging.INFO,
        console_level: Level = logging.WARNING,
        log_file: Optional[Path] = None,
        format_type: str = "text",
        enable_rich: bool = True,
        max_bytes: int = 5 * 1024 * 1024,
        backup_count: int = 3,
        force: bool = False,
    ) -> None:
        """
        Install console and file handlers on the root logger.

        Only the first call takes effect unless ``force`` is set.

        Args:
            enabled: When False, only critical records are emitted
            level: File handler level
            console_level: Console handler level
            log_file: Rotating log file; no file handler when None
            format_type: ``text`` or ``json``
            enable_rich: Use Rich for console output
            max_bytes: Size at which the log file rotates
            backup_count: Rotated files kept
            force: Replace an existing configuration
        """
        if self._setup_done and not force:
            return

        root = logging.getLogger()
        root.handlers.clear()
        self._setup_done = True

        if not enabled:
            root.setLevel(logging.CRITICAL)
            return

        console_level = _level(console_level)
        level = _level(level)

        root.addHandler(self._console_handler(console_level, format_type, enable_rich))
        if log_file:
            root.addHandler(self._file_handler(Path(log_file), level, format_type, max_bytes, backup_count))
            root.setLevel(min(level, console_level))
        else:
            root.setLevel(console_level)

    def configure(
        self,
        config: "LoggingConfig",
        log_file: Optional[Path] = None,
        console_level: Optional[Level] = None,
    ) -> None:
        """
        Apply a ``LoggingConfig`` section, replacing any earlier setup.

        Args:
            config: Logging section of the application configuration
            log_file: Resolved log file path
            console_level: Overrides ``config.console_level`` (``--debug``/``--verbose``)
        """
        self.setup_logging(
            enabled=config.enabled,
            level=config.level,
            console_level=console_level or config.console_level,
            log_file=log_file,
            format_type=config.format_type,
            enable_rich=config.enable_rich,
            force=True,
        )

    def get_logger(self, name: str) -> logging.Logger:
        """Get a named logger, cached per name."""
        if name not in self._loggers:
            self._loggers[name] = logging.getLogger(name)
        return self._loggers[name]

    @staticmethod
    def _console_handler(level: int, format_type: str, enable_rich: bool) -> logging.Handler:
        if enable_rich:
            handler: logging.Handler = RichHandler(
                console=Console(stderr=True),
                rich_tracebacks=True,
                markup=False,
                show_path=False,
            )
        else:
            handler = logging.StreamHandler(sys.stderr)
            handler.setFormatter(JSONFormatter() if format_type == "json" else logging.Formatter(TEXT_FORMAT))
        handler.setLevel(level)
        return handler

    @staticmethod
    def _file_handler(
        path: Path,
        level: int,
        format_type: str,
        max_bytes: int,
        backup_count: int,
    ) -> logging.Handler:
        path.parent.mkdir(parents=True, exist_ok=True)
        handler = logging.handlers.RotatingFileHandler(
            path,
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding="utf-8",
        )
        handler.setFormatter(JSONFormatter() if format_type == "json" else logging.Formatter(FILE_TEXT_FORMAT))
        handler.setLevel(level)
        return handler


_logger_manager = SyncLogger()

setup_logging = _logger_manager.setup_logging
configure_logging = _logger_manager.configure
get_logger = _logger_manager.get_logger
