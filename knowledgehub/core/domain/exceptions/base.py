"""Root of the client's error hierarchy.

A ``KnowledgeHubError`` knows its error code, the underlying cause, some
free-form debugging context and the place it was raised. The CLI prints
the code next to the message; logs get the whole thing via ``to_dict``.
"""

import inspect
import os
import traceback
from dataclasses import asdict, dataclass, field
from datetime import UTC, datetime
from typing import Any

_EXCEPTIONS_DIR = os.path.dirname(os.path.abspath(__file__))


@dataclass
class ExceptionContext:
    """Where an error was raised."""

    class_name: str
    method_name: str
    file_name: str
    line_number: int
    timestamp: str = field(default_factory=lambda: datetime.now(UTC).isoformat())

    @classmethod
    def unknown(cls) -> "ExceptionContext":
        return cls("<unknown>", "<unknown>", "<unknown>", 0)

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        return {
            "class": data["class_name"],
            "method": data["method_name"],
            "file": data["file_name"],
            "line": data["line_number"],
            "timestamp": data["timestamp"],
        }


def _raise_site() -> ExceptionContext:
    """First frame outside this package, i.e. the code that built the error."""
    frame = inspect.currentframe()
    try:
        while frame is not None:
            filename = os.path.abspath(frame.f_code.co_filename)
            if os.path.dirname(filename) != _EXCEPTIONS_DIR:
                owner = frame.f_locals.get("self")
                return ExceptionContext(
                    class_name=type(owner).__name__ if owner is not None else "<module>",
                    method_name=frame.f_code.co_name,
                    file_name=os.path.basename(filename),
                    line_number=frame.f_lineno,
                )
            frame = frame.f_back
        return ExceptionContext.unknown()
    finally:
        del frame


class KnowledgeHubError(Exception):
    """Base class for every error the client raises on purpose.

    Subclasses only override ``error_code`` (and add attributes where the
    failure has structure, see ``HttpError``).

    Example:
        raise StorageError(
            "Failed to write 'token'",
            cause=sqlite_error,
            context={"db_path": str(path)},
        )
    """

    error_code: str = "KH_ERR_001"

    def __init__(
        self,
        message: str,
        *,
        cause: Exception | None = None,
        context: dict[str, Any] | None = None,
    ) -> None:
        """
        Args:
            message: Text shown to the user and written to the log.
            cause: Lower-level exception this error wraps.
            context: Extra key/value pairs for debugging.
        """
        super().__init__(message)
        self.message = message
        self.cause = cause
        self.extra_context = dict(context or {})
        self.location = _raise_site()
        self.stack_trace = (
            "".join(traceback.format_exception(type(cause), cause, cause.__traceback__))
            if cause is not None
            else None
        )

    def to_dict(self, include_trace: bool = False) -> dict[str, Any]:
        """Serialize for JSON logs and ``--debug`` CLI output.

        Args:
            include_trace: Add the cause's formatted traceback, if any.
        """
        data: dict[str, Any] = {
            "error": {
                "type": type(self).__name__,
                "code": self.error_code,
                "message": self.message,
            },
            "location": self.location.to_dict(),
        }
        if self.extra_context:
            data["context"] = dict(self.extra_context)
        if self.cause is not None:
            data["cause"] = {"type": type(self.cause).__name__, "message": str(self.cause)}
            if include_trace and self.stack_trace:
                data["stack_trace"] = [
                    line for line in self.stack_trace.splitlines() if line.strip()
                ]
        return data
