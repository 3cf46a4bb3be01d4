"""KnowledgeHub API adapter: endpoint table over the HTTP client."""

import logging
from typing import Any

from ...core.domain import Answer, Document, SearchResult, User
from ...core.domain.exceptions import InvalidResponseError
from ...core.ports.api_port import KnowledgeApiPort
from .http_client import HttpClient

logger = logging.getLogger(__name__)

# Malformed payloads surface as one of these while parsing
_PARSE_ERRORS = (KeyError, TypeError, ValueError, AttributeError)


def _unwrap_documents(payload: Any) -> list[Any]:
    """Accept both ``[...]`` and ``{"documents": [...]}`` list responses."""
    if isinstance(payload, dict) and "documents" in payload:
        payload = payload["documents"]
    if not isinstance(payload, list):
        raise InvalidResponseError(
            "Expected a list of documents",
            context={"received": type(payload).__name__},
        )
    return payload


class KnowledgeHubApi(KnowledgeApiPort):
    """Maps each KnowledgeHub operation to its HTTP method and path."""

    def __init__(self, client: HttpClient) -> None:
        self.client = client

    def _parse_document(self, payload: Any) -> Document:
        try:
            return Document.from_dict(payload)
        except _PARSE_ERRORS as e:
            raise InvalidResponseError("Malformed document in API response", cause=e) from e

    def _parse_documents(self, payload: Any, model: type[Document] = Document) -> list[Any]:
        items = _unwrap_documents(payload)
        try:
            return [model.from_dict(item) for item in items]
        except _PARSE_ERRORS as e:
            raise InvalidResponseError("Malformed document in API response", cause=e) from e

    # Auth

    def login(self, email: str, password: str) -> tuple[str, User]:
        data = self.client.request(
            "/api/auth/login", method="POST", body={"email": email, "password": password}
        )
        try:
            token = data["token"]
            user = User.from_dict(data["user"])
        except _PARSE_ERRORS as e:
            raise InvalidResponseError("Login response lacks token or user", cause=e) from e
        if not isinstance(token, str) or not token:
            raise InvalidResponseError("Login response has an empty token")
        return token, user

    def register(self, email: str, password: str) -> str:
        data = self.client.request(
            "/api/auth/register", method="POST", body={"email": email, "password": password}
        )
        if isinstance(data, dict):
            return str(data.get("message", ""))
        return ""

    # Documents

    def list_documents(self) -> list[Document]:
        return self._parse_documents(self.client.request("/api/documents"))

    def get_document(self, document_id: str) -> Document:
        return self._parse_document(self.client.request(f"/api/documents/{document_id}"))

    def create_document(
        self, title: str, content: str, tags: list[str] | None = None
    ) -> Document:
        body: dict[str, Any] = {"title": title, "content": content}
        if tags is not None:
            body["tags"] = tags
        return self._parse_document(self.client.request("/api/documents", method="POST", body=body))

    def update_document(self, document_id: str, changes: dict[str, Any]) -> Document:
        body = {k: v for k, v in changes.items() if k in ("title", "content", "tags")}
        return self._parse_document(
            self.client.request(f"/api/documents/{document_id}", method="PUT", body=body)
        )

    def delete_document(self, document_id: str) -> None:
        self.client.request(f"/api/documents/{document_id}", method="DELETE")

    def summarize_document(self, document_id: str) -> Document:
        return self._parse_document(
            self.client.request(f"/api/documents/{document_id}/summarize", method="POST")
        )

    def generate_tags(self, document_id: str) -> Document:
        return self._parse_document(
            self.client.request(f"/api/documents/{document_id}/generate-tags", method="POST")
        )

    # Search and Q&A

    def search(self, query: str, semantic: bool = False) -> list[SearchResult]:
        payload = self.client.request(
            "/api/search", method="POST", body={"query": query, "semantic": semantic}
        )
        return self._parse_documents(payload, SearchResult)

    def ask(self, question: str) -> Answer:
        data = self.client.request("/api/qa", method="POST", body={"question": question})
        if not isinstance(data, dict):
            raise InvalidResponseError("Expected an object from the Q&A endpoint")
        sources = data.get("sources") or []
        return Answer(
            answer=str(data.get("answer") or ""),
            sources=[str(s) for s in sources] if isinstance(sources, list) else [],
        )
