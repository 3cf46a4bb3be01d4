"""Turning exceptions into log records, CLI messages and exit codes."""

import json
import logging
import os
import traceback
from typing import Any

from ...core.domain.exceptions import (
    ApiError,
    ConfigurationError,
    HttpError,
    KnowledgeHubError,
    SessionError,
    StorageError,
    ValidationError,
)

logger = logging.getLogger(__name__)

EXIT_GENERIC = 1
EXIT_VALIDATION = 2
EXIT_SESSION = 3
EXIT_API = 4
EXIT_ENVIRONMENT = 5

# First match wins
_EXIT_CODES: list[tuple[type[Exception], int]] = [
    (ValidationError, EXIT_VALIDATION),
    (SessionError, EXIT_SESSION),
    (ApiError, EXIT_API),
    (StorageError, EXIT_ENVIRONMENT),
    (ConfigurationError, EXIT_ENVIRONMENT),
]

UNKNOWN_CODE = "PYTHON_ERR"


def _foreign_error_dict(exc: Exception, include_trace: bool) -> dict[str, Any]:
    frames = traceback.extract_tb(exc.__traceback__) if exc.__traceback__ else []
    last = frames[-1] if frames else None
    data: dict[str, Any] = {
        "error": {"type": type(exc).__name__, "code": UNKNOWN_CODE, "message": str(exc)},
        "location": {
            "class": "<unknown>",
            "method": last.name if last else "<unknown>",
            "file": os.path.basename(last.filename) if last else "<unknown>",
            "line": last.lineno if last else 0,
        },
    }
    if include_trace:
        data["stack_trace"] = [
            line.rstrip()
            for line in traceback.format_exception(type(exc), exc, exc.__traceback__)
            if line.strip()
        ]
    return data


def format_exception_json(
    exc: Exception,
    include_trace: bool = False,
    extra_context: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """Describe any exception as a JSON-ready dict.

    Client errors use their own ``to_dict``; HTTP errors additionally get
    the status code in their context. Anything else is reported with code
    ``PYTHON_ERR`` and the innermost traceback frame as location.
    """
    if isinstance(exc, KnowledgeHubError):
        data = exc.to_dict(include_trace=include_trace)
        context = data.setdefault("context", {})
        if isinstance(exc, HttpError):
            context.setdefault("status_code", exc.status_code)
    else:
        data = _foreign_error_dict(exc, include_trace)
        context = data.setdefault("context", {})

    if extra_context:
        context.update(extra_context)
    if not context:
        del data["context"]
    return data


def describe(exc: Exception) -> str:
    """One line for the terminal: ``[CODE] message``."""
    message = exc.message if isinstance(exc, KnowledgeHubError) else str(exc)
    if isinstance(exc, HttpError) and exc.detail:
        message = f"{message} ({exc.detail})"
    return f"[{get_error_code(exc)}] {message}"


def log_exception(
    exc: Exception,
    log: logging.Logger | None = None,
    level: int = logging.ERROR,
    extra_context: dict[str, Any] | None = None,
) -> None:
    """Write ``exc`` to the log as indented JSON, traceback included."""
    payload = format_exception_json(exc, include_trace=True, extra_context=extra_context)
    (log or logger).log(level, json.dumps(payload, indent=2, default=str))


def get_error_code(exc: Exception) -> str:
    if isinstance(exc, KnowledgeHubError):
        return exc.error_code
    return UNKNOWN_CODE


def get_exit_code(exc: Exception) -> int:
    """Process exit status for an error that ends a CLI command.

    2 validation, 3 session, 4 remote API, 5 storage or configuration,
    1 for everything else.
    """
    for exc_type, code in _EXIT_CODES:
        if isinstance(exc, exc_type):
            return code
    return EXIT_GENERIC
