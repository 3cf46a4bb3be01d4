"""Exceptions raised while talking to the KnowledgeHub API."""

from typing import Any

from .base import KnowledgeHubError


class ApiError(KnowledgeHubError):
    """Base class for failures of the remote service."""

    error_code = "KH_API_001"


class NetworkError(ApiError):
    """The request could not complete (connection refused, timeout, ...)."""

    error_code = "KH_API_002"


class HttpError(ApiError):
    """The API answered with a non-2xx status.

    Attributes:
        status_code: Numeric HTTP status.
        status_text: Reason phrase sent by the server.
        detail: Optional ``message`` field from a JSON error body.
    """

    error_code = "KH_API_003"

    def __init__(
        self,
        status_code: int,
        status_text: str,
        *,
        detail: str | None = None,
        cause: Exception | None = None,
        context: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(f"API Error: {status_text}", cause=cause, context=context)
        self.status_code = status_code
        self.status_text = status_text
        self.detail = detail


class InvalidResponseError(ApiError):
    """A successful response had a body the client cannot use."""

    error_code = "KH_API_004"
