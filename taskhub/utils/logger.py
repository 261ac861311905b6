"""
Logging utilities.

Provides root logging setup and a structured (JSON line) logger used for the
tool invocation audit trail.
"""

import logging
import os
import sys
from datetime import datetime, timezone
import json

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def setup_logging(level: str = None, stream=None) -> None:
    """
    Configure the root logger once.

    Args:
        level: Level name; defaults to the LOG_LEVEL environment variable (INFO)
        stream: Output stream; stdout unless given. Calling again with a
            stream moves the existing handler onto it.
    """
    level_name = (level or os.environ.get("LOG_LEVEL", "INFO")).upper()
    root = logging.getLogger()
    root.setLevel(getattr(logging, level_name, logging.INFO))

    # Prevent adding handlers multiple times
    for handler in root.handlers:
        if getattr(handler, "_taskhub", False):
            if stream is not None:
                handler.setStream(stream)
            return

    console_handler = logging.StreamHandler(stream or sys.stdout)
    console_handler.setFormatter(logging.Formatter(LOG_FORMAT))
    console_handler._taskhub = True
    root.addHandler(console_handler)


class StructuredLogger:
    """Logger that emits one JSON object per record."""

    def __init__(self, name: str):
        """
        Args:
            name: Logger name
        """
        self.logger = logging.getLogger(name)

    def _log_structured(self, level: int, message: str, **kwargs):
        if self.logger.isEnabledFor(level):
            log_data = {
                "timestamp": datetime.now(timezone.utc).isoformat(),
                "level": logging.getLevelName(level),
                "message": message,
                "service": self.logger.name
            }
            log_data.update(kwargs)

            self.logger.log(level, json.dumps(log_data, default=str))

    def debug(self, message: str, **kwargs):
        """Log debug message."""
        self._log_structured(logging.DEBUG, message, **kwargs)

    def info(self, message: str, **kwargs):
        """Log info message."""
        self._log_structured(logging.INFO, message, **kwargs)

    def warning(self, message: str, **kwargs):
        """Log warning message."""
        self._log_structured(logging.WARNING, message, **kwargs)


def get_logger(name: str) -> StructuredLogger:
    """Get a structured logger for the given component."""
    return StructuredLogger(name)
