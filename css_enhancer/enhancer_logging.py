"""Logging configuration for the CSS enhancer.

All loggers live under ``css_enhancer``; each pipeline stage logs
through its own category child (``css_enhancer.parser`` and so on).
``setup_logging`` wires a stderr console handler and an optional
rotating file handler, in text or JSON lines, through dictConfig.
"""

import json
import logging
import logging.config
import logging.handlers
from datetime import UTC, datetime
from enum import Enum
from pathlib import Path
from typing import Any

LOGGER_NAME = "css_enhancer"

CONSOLE_FORMAT = "%(levelname)s | %(message)s"
FILE_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s:%(lineno)d - %(message)s"
FILE_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


class LogCategory(Enum):
    """Log categories for the enhancement pipeline stages."""

    PARSER = "parser"
    MAPPER = "mapper"
    CONFLICTS = "conflicts"
    ENHANCER = "enhancer"
    WORKER = "worker"


class JSONFormatter(logging.Formatter):
    """One JSON object per record, with pipeline counters when present."""

    EXTRA_FIELDS = ("duration_ms", "operation", "rule_count", "node_count")

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": datetime.now(UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "category": _category_of(record.name),
            "line": record.lineno,
            "message": record.getMessage(),
        }
        entry.update(
            (name, getattr(record, name))
            for name in self.EXTRA_FIELDS
            if hasattr(record, name)
        )
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry)


def _category_of(logger_name: str) -> str | None:
    prefix = f"{LOGGER_NAME}."
    return logger_name[len(prefix) :] if logger_name.startswith(prefix) else None


def _console_handler(level: str) -> dict[str, Any]:
    return {
        "class": "logging.StreamHandler",
        "formatter": "console",
        "level": level,
        "stream": "ext://sys.stderr",
    }


def _file_handler(
    log_file: Path, log_format: str, rotation_count: int, max_bytes: int
) -> dict[str, Any]:
    Path(log_file).parent.mkdir(parents=True, exist_ok=True)
    return {
        "class": "logging.handlers.RotatingFileHandler",
        "formatter": "json" if log_format == "json" else "file",
        "level": "DEBUG",
        "filename": str(log_file),
        "maxBytes": max_bytes,
        "backupCount": rotation_count,
    }


def setup_logging(
    level: str = "INFO",
    quiet: bool = False,
    verbose: bool = False,
    log_file: Path | None = None,
    log_format: str = "text",
    rotation_count: int = 3,
    max_bytes: int = 10485760,
) -> logging.Logger:
    """Configure the package logger.

    Args:
        level: Console log level (DEBUG, INFO, WARNING, ERROR).
        quiet: Install no console handler.
        verbose: Console at DEBUG regardless of ``level``.
        log_file: Optional log file path; enables a rotating file handler
            that always records DEBUG.
        log_format: File output format ("text" or "json").
        rotation_count: Number of backup files (default 3).
        max_bytes: Max file size before rotation (default 10MB).

    Returns:
        Configured package logger.
    """
    handlers: dict[str, dict[str, Any]] = {}
    if not quiet:
        handlers["console"] = _console_handler("DEBUG" if verbose else level)
    if log_file:
        handlers["file"] = _file_handler(log_file, log_format, rotation_count, max_bytes)

    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "console": {"format": CONSOLE_FORMAT},
                "file": {"format": FILE_FORMAT, "datefmt": FILE_DATE_FORMAT},
                "json": {"()": JSONFormatter},
            },
            "handlers": handlers,
            "loggers": {
                LOGGER_NAME: {
                    "handlers": list(handlers),
                    "level": "DEBUG",
                    "propagate": False,
                }
            },
        }
    )
    return logging.getLogger(LOGGER_NAME)


def get_logger() -> logging.Logger:
    """Get the package logger instance."""
    return logging.getLogger(LOGGER_NAME)


def get_category_logger(category: LogCategory) -> logging.Logger:
    """Get the logger of one pipeline stage, e.g. ``css_enhancer.parser``."""
    return logging.getLogger(f"{LOGGER_NAME}.{category.value}")
