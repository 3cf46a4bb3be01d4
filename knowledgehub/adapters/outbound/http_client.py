"""JSON-over-HTTP client for the KnowledgeHub API."""

import json
import logging
from collections.abc import Callable
from typing import Any

import requests

from ...core.domain.exceptions import HttpError, InvalidResponseError, NetworkError

logger = logging.getLogger(__name__)

# Constants
REQUEST_TIMEOUT = 30
USER_AGENT = "KnowledgeHub-Client/1.0"


class HttpClient:
    """Thin request wrapper around a configured base URL.

    Every request sends ``Content-Type: application/json``. The bearer
    token is looked up on each call through ``token_provider`` so that a
    login or logout takes effect immediately. Requests are never retried
    and a 401 is reported like any other non-2xx status.
    """

    def __init__(
        self,
        base_url: str,
        token_provider: Callable[[], str | None] | None = None,
        timeout: float = REQUEST_TIMEOUT,
    ) -> None:
        """Initialize the client.

        Args:
            base_url: API root, e.g. ``http://localhost:5000``.
            token_provider: Returns the stored token, or None when logged out.
            timeout: Per-request timeout in seconds.
        """
        self.base_url = base_url.rstrip("/")
        self.token_provider = token_provider or (lambda: None)
        self.timeout = timeout
        self.session = requests.Session()
        self.session.headers.update({"User-Agent": USER_AGENT})

    def __enter__(self) -> "HttpClient":
        """Enter context manager."""
        return self

    def __exit__(self, *args: Any) -> None:
        """Exit context manager and close session."""
        self.close()

    def close(self) -> None:
        """Close the HTTP session."""
        if self.session:
            self.session.close()

    def _build_headers(self, extra: dict[str, str] | None) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        token = self.token_provider()
        if token:
            headers["Authorization"] = f"Bearer {token}"
        if extra:
            headers.update(extra)
        return headers

    @staticmethod
    def _error_detail(response: requests.Response) -> str | None:
        """Pull the optional ``message`` field out of an error body."""
        try:
            body = response.json()
        except ValueError:
            return None
        if isinstance(body, dict) and isinstance(body.get("message"), str):
            return body["message"]
        return None

    def request(
        self,
        path: str,
        method: str = "GET",
        body: Any = None,
        headers: dict[str, str] | None = None,
    ) -> Any:
        """Send a request and return the parsed JSON body.

        Args:
            path: Path below the base URL, starting with ``/``.
            method: HTTP method.
            body: JSON-serializable payload, or None for no body.
            headers: Extra headers, applied last.

        Returns:
            The decoded JSON body, or None for an empty 2xx body.

        Raises:
            NetworkError: If the request could not complete.
            HttpError: If the status is not 2xx.
            InvalidResponseError: If a 2xx body is not valid JSON.
        """
        url = f"{self.base_url}{path}"
        data = json.dumps(body) if body is not None else None
        logger.debug(f"{method} {path}")

        try:
            response = self.session.request(
                method,
                url,
                data=data,
                headers=self._build_headers(headers),
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise NetworkError(
                "Network error. Please try again.",
                cause=e,
                context={"method": method, "path": path},
            ) from e

        if not response.ok:
            raise HttpError(
                response.status_code,
                response.reason or str(response.status_code),
                detail=self._error_detail(response),
                context={"method": method, "path": path},
            )

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            raise InvalidResponseError(
                "API returned a body that is not JSON",
                cause=e,
                context={"method": method, "path": path, "status": response.status_code},
            ) from e
