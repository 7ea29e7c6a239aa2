"""
Falkor Logging Configuration

Configures the ``falkor`` logger tree used by the engine and the runner.
Request dispatch and completion are logged at DEBUG with structured fields
(method, url, status, duration_ms); network failures at WARNING; dump output
from test cases without an asserter log() at INFO.
"""

import logging
import logging.config
import sys
from pathlib import Path
from typing import Any, Dict, Optional

from .config import get_config

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
FILE_LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s:%(lineno)d: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


class StructuredFormatter(logging.Formatter):
    """Appends the fields passed to log_structured() as ``key=value`` pairs."""

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        fields = getattr(record, "structured_data", None)
        if fields:
            line += " | " + " ".join(f"{key}={value}" for key, value in fields.items())
        return line


def setup_logging(log_level: Optional[str] = None, log_file: Optional[Path] = None) -> None:
    """
    Configure logging for the engine and the runner.

    Args:
        log_level: Level for the falkor loggers, defaults to the configured one
        log_file: Also write to this file, rotated by size. Defaults to the
            configured logging.file_path, if any.
    """
    config = get_config().logging

    level = (log_level or config.level).upper()
    if log_file is None and config.file_path:
        log_file = Path(config.file_path)

    handlers: Dict[str, Dict[str, Any]] = {
        "console": {
            "class": "logging.StreamHandler",
            "level": level,
            "formatter": "structured",
            "stream": sys.stderr,
        }
    }
    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers["file"] = {
            "class": "logging.handlers.RotatingFileHandler",
            "level": level,
            "formatter": "file",
            "filename": str(log_file),
            "maxBytes": config.max_file_size,
            "backupCount": config.backup_count,
            "encoding": "utf-8",
        }

    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "structured": {
                    "()": StructuredFormatter,
                    "format": LOG_FORMAT,
                    "datefmt": DATE_FORMAT,
                },
                "file": {
                    "()": StructuredFormatter,
                    "format": FILE_LOG_FORMAT,
                    "datefmt": DATE_FORMAT,
                },
            },
            "handlers": handlers,
            "loggers": {
                "falkor": {"level": level, "handlers": list(handlers), "propagate": False},
                # aiohttp only reports connection trouble worth seeing.
                "aiohttp": {"level": "WARNING", "handlers": list(handlers), "propagate": False},
            },
        }
    )


def get_logger(name: str) -> logging.Logger:
    """Returns a logger, pass ``__name__`` to stay under the falkor tree."""
    return logging.getLogger(name)


def log_structured(
    logger: logging.Logger, level: int, message: str, **structured_data: Any
) -> None:
    """
    Log a message with extra fields rendered by StructuredFormatter.

    Args:
        logger: Logger instance
        level: Logging level
        message: Log message
        **structured_data: Fields appended to the line
    """
    if logger.isEnabledFor(level):
        logger.log(level, message, extra={"structured_data": structured_data})
