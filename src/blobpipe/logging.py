"""
Logging for blobpipe.

All loggers live under the ``blobpipe`` namespace. Library code only calls
``get_logger``; applications opt into output with ``setup_logging``.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone

from rich.logging import RichHandler

ROOT_LOGGER_NAME = "blobpipe"

_HANDLER_MARKER = "_blobpipe_handler"


class JsonFormatter(logging.Formatter):
    """Render records as one JSON object per line."""

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload)


def get_logger(name: str) -> logging.Logger:
    """Get a logger in the blobpipe namespace."""
    if name != ROOT_LOGGER_NAME and not name.startswith(f"{ROOT_LOGGER_NAME}."):
        name = f"{ROOT_LOGGER_NAME}.{name}"
    return logging.getLogger(name)


def setup_logging(level: str | None = None, json_output: bool | None = None) -> logging.Logger:
    """
    Configure the blobpipe root logger.

    Args:
        level: Log level name. Defaults to settings.log_level.
        json_output: Emit JSON lines instead of rich console output.
            Defaults to settings.log_json.

    Returns:
        The configured root logger.
    """
    from blobpipe.config import get_settings

    settings = get_settings()
    level = level or settings.log_level
    if json_output is None:
        json_output = settings.log_json

    logger = logging.getLogger(ROOT_LOGGER_NAME)
    logger.setLevel(level)

    # Replace our own handler on reconfiguration, leave foreign ones alone
    for handler in list(logger.handlers):
        if getattr(handler, _HANDLER_MARKER, False):
            logger.removeHandler(handler)

    handler: logging.Handler
    if json_output:
        handler = logging.StreamHandler()
        handler.setFormatter(JsonFormatter())
    else:
        handler = RichHandler(show_path=False, rich_tracebacks=True)
    setattr(handler, _HANDLER_MARKER, True)
    logger.addHandler(handler)
    logger.propagate = False
    return logger


__all__ = ["get_logger", "setup_logging", "JsonFormatter", "ROOT_LOGGER_NAME"]
