"""Diagnostic logging for ripcheck.

Scan results go through the reporters. This module only sets up the
``ripcheck`` logger: a stderr handler and, on request, a JSON-lines file.
The level comes from the caller, else RIPCHECK_DEBUG / RIPCHECK_LOG_LEVEL.

Structured context is passed through ``extra``; use ``wav_file`` for the
file being scanned (``filename`` is taken by LogRecord itself).
"""

from __future__ import annotations

import json
import logging
import os
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Optional

ROOT_LOGGER = "ripcheck"
CONTEXT_KEYS = ("wav_file", "channel", "sample", "error_type")
CONSOLE_FORMAT = "%(asctime)s %(levelname)-8s [%(name)s] %(message)s"

_configured = False


class JSONFormatter(logging.Formatter):
    """One JSON object per record, with the structured context keys."""

    def format(self, record: logging.LogRecord) -> str:
        output: Dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, timezone.utc).isoformat(timespec="milliseconds"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key in CONTEXT_KEYS:
            if hasattr(record, key):
                output[key] = getattr(record, key)
        if record.exc_info:
            output["traceback"] = self.formatException(record.exc_info)
        return json.dumps(output, default=str)


def _level_from_env() -> str:
    if os.environ.get("RIPCHECK_DEBUG", "").strip().lower() in ("1", "true", "yes"):
        return "DEBUG"
    return os.environ.get("RIPCHECK_LOG_LEVEL", "WARNING")


def configure_logging(*, level: Optional[str] = None, json_file: Optional[str] = None) -> None:
    """Install the stderr handler (and a JSON file handler); replaces earlier setup."""
    global _configured

    numeric_level = getattr(logging, (level or _level_from_env()).upper(), logging.WARNING)
    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(numeric_level)
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)
        handler.close()

    console = logging.StreamHandler(sys.stderr)
    console.setFormatter(logging.Formatter(CONSOLE_FORMAT))
    logger.addHandler(console)

    if json_file:
        try:
            file_handler = logging.FileHandler(json_file, mode="a", encoding="utf-8")
        except OSError as exc:
            logger.warning("Cannot open JSON log file %s: %s", json_file, exc)
        else:
            file_handler.setFormatter(JSONFormatter())
            logger.addHandler(file_handler)

    logger.propagate = False
    _configured = True


def get_logger(name: str) -> logging.Logger:
    """Logger under the ripcheck namespace; configures defaults on first use."""
    if not _configured:
        configure_logging()
    if not name.startswith(ROOT_LOGGER):
        name = f"{ROOT_LOGGER}.{name}"
    return logging.getLogger(name)


def log_exception(logger: logging.Logger, message: str, *, error_type: Optional[str] = None, **extra: Any) -> None:
    """Log the exception being handled; the traceback is kept for DEBUG only."""
    if error_type:
        extra["error_type"] = error_type
    if logger.isEnabledFor(logging.DEBUG):
        logger.exception(message, extra=extra)
    else:
        logger.error(message, extra=extra)
