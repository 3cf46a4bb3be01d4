"""Logging setup for the KnowledgeHub client.

Everything logs under the ``knowledgehub`` logger. Records go to stderr,
and optionally to a file, either as pipe-delimited text or as one JSON
object per line. A filter on every handler masks bearer tokens and
password fields before anything is written.
"""

import json
import logging
import re
import sys
from pathlib import Path
from typing import Any

ROOT_LOGGER_NAME = "knowledgehub"

TEXT_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s:%(funcName)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_SECRET_PATTERNS = [
    (re.compile(r"(Bearer\s+)[A-Za-z0-9._~+/=-]+"), r"\1***"),
    (re.compile(r'("?(?:password|token)"?\s*[:=]\s*"?)[^",\s}]+', re.IGNORECASE), r"\1***"),
]


def redact(text: str) -> str:
    """Mask bearer tokens and password/token values in ``text``."""
    for pattern, replacement in _SECRET_PATTERNS:
        text = pattern.sub(replacement, text)
    return text


class SecretRedactingFilter(logging.Filter):
    """Rewrites each record's message with secrets masked."""

    def filter(self, record: logging.LogRecord) -> bool:
        message = record.getMessage()
        masked = redact(message)
        if masked != message:
            record.msg, record.args = masked, None
        return True


class JSONExceptionFormatter(logging.Formatter):
    """One JSON object per record, with source location and any exception."""

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": self.formatTime(record, DATE_FORMAT),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "location": {
                "file": record.filename,
                "function": record.funcName,
                "line": record.lineno,
            },
        }

        if record.exc_info and record.exc_info[0] is not None:
            exc_type, exc_value, _ = record.exc_info
            entry["exception"] = {
                "type": exc_type.__name__,
                "code": getattr(exc_value, "error_code", None),
                "message": str(exc_value) if exc_value else None,
                "traceback": redact(self.formatException(record.exc_info)),
            }

        return json.dumps(entry, ensure_ascii=False)


def _make_handler(handler: logging.Handler, formatter: logging.Formatter) -> logging.Handler:
    handler.setFormatter(formatter)
    handler.addFilter(SecretRedactingFilter())
    return handler


def setup_logging(
    level: str = "INFO",
    log_file: Path | None = None,
    json_format: bool = False,
) -> logging.Logger:
    """Configure the ``knowledgehub`` logger.

    Calling this again replaces the previous handlers, so the CLI can
    reconfigure per invocation.

    Args:
        level: Logging level name; unknown names fall back to INFO.
        log_file: Optional file that receives the same records as stderr.
        json_format: Emit JSON lines instead of text.

    Returns:
        The configured logger.
    """
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    for old in list(logger.handlers):
        logger.removeHandler(old)
        old.close()

    formatter: logging.Formatter
    if json_format:
        formatter = JSONExceptionFormatter()
    else:
        formatter = logging.Formatter(TEXT_FORMAT, datefmt=DATE_FORMAT)

    # stdout is reserved for command output
    logger.addHandler(_make_handler(logging.StreamHandler(sys.stderr), formatter))

    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        logger.addHandler(
            _make_handler(logging.FileHandler(log_file, encoding="utf-8"), formatter)
        )

    return logger


def get_logger(name: str | None = None) -> logging.Logger:
    """Return the root client logger or one of its children."""
    if name:
        return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")
    return logging.getLogger(ROOT_LOGGER_NAME)
