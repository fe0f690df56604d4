"""
Palette Service Structured Logging
Centralized logging configuration using loguru.

One stdout sink is installed on first use. Each module gets its own
`StructuredLogger` whose records carry `module` in `extra`, so pipeline stages
can be filtered apart. Set PALETTE_LOG_JSON=1 for serialized (JSON) records.
"""
import sys
from threading import Lock
from typing import Dict, Any, Optional

from loguru import logger

from palette_service.config import config

LOG_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level} | {message} | {extra}"

_sink_lock = Lock()
_sink_id: Optional[int] = None


def configure_sink(level: Optional[str] = None, serialize: Optional[bool] = None) -> int:
    """(Re)install the stdout sink, replacing loguru's default handler."""
    global _sink_id
    with _sink_lock:
        logger.remove()
        _sink_id = logger.add(
            sys.stdout,
            format=LOG_FORMAT,
            level=level or config.LOG_LEVEL,
            serialize=config.LOG_JSON if serialize is None else serialize
        )
        return _sink_id


class StructuredLogger:
    """Structured logger for one module of the palette service."""

    def __init__(self, name: Optional[str] = None):
        """Initialize structured logger, installing the sink if needed."""
        if _sink_id is None:
            configure_sink()
        self.name = name
        self._logger = logger.bind(module=name) if name else logger

    def _log(self, level: str, message: str, extra: Optional[Dict[str, Any]]):
        bound = self._logger.bind(**extra) if extra else self._logger
        bound.log(level, message)

    def info(self, message: str, extra: Optional[Dict[str, Any]] = None):
        """Log info message with optional extra data."""
        self._log("INFO", message, extra)

    def warning(self, message: str, extra: Optional[Dict[str, Any]] = None):
        """Log warning message with optional extra data."""
        self._log("WARNING", message, extra)

    def error(self, message: str, extra: Optional[Dict[str, Any]] = None):
        """Log error message with optional extra data."""
        self._log("ERROR", message, extra)

    def debug(self, message: str, extra: Optional[Dict[str, Any]] = None):
        """Log debug message with optional extra data."""
        self._log("DEBUG", message, extra)


# Per-module logger instances
_loggers: Dict[Optional[str], StructuredLogger] = {}


def get_logger(name: Optional[str] = None) -> StructuredLogger:
    """Get or create the logger for `name` (usually the caller's __name__)."""
    if name not in _loggers:
        _loggers[name] = StructuredLogger(name)
    return _loggers[name]
