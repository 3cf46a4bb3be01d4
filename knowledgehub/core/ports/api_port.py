"""KnowledgeHub API Port Interface."""

from abc import ABC, abstractmethod
from typing import Any

from ..domain import Answer, Document, SearchResult, User


class KnowledgeApiPort(ABC):
    """Abstract interface for the remote KnowledgeHub service.

    Implementations raise ``ApiError`` subclasses on failure.
    """

    @abstractmethod
    def login(self, email: str, password: str) -> tuple[str, User]:
        """Exchange credentials for a token and the user record."""
        ...

    @abstractmethod
    def register(self, email: str, password: str) -> str:
        """Create an account. Returns the backend's message."""
        ...

    @abstractmethod
    def list_documents(self) -> list[Document]:
        """Fetch every document visible to the current user."""
        ...

    @abstractmethod
    def get_document(self, document_id: str) -> Document:
        """Fetch a single document."""
        ...

    @abstractmethod
    def create_document(
        self, title: str, content: str, tags: list[str] | None = None
    ) -> Document:
        """Create a document."""
        ...

    @abstractmethod
    def update_document(self, document_id: str, changes: dict[str, Any]) -> Document:
        """Update any of ``title``, ``content``, ``tags``."""
        ...

    @abstractmethod
    def delete_document(self, document_id: str) -> None:
        """Delete a document."""
        ...

    @abstractmethod
    def summarize_document(self, document_id: str) -> Document:
        """Ask the backend to generate a summary."""
        ...

    @abstractmethod
    def generate_tags(self, document_id: str) -> Document:
        """Ask the backend to generate tags."""
        ...

    @abstractmethod
    def search(self, query: str, semantic: bool = False) -> list[SearchResult]:
        """Run a keyword or semantic search."""
        ...

    @abstractmethod
    def ask(self, question: str) -> Answer:
        """Ask a question answered from document content."""
        ...
