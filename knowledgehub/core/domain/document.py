"""Document and search result models.

Documents are owned by the backend; the client only holds read-through
copies parsed from API responses. Tags are normalized on the way in
(trimmed, lowercased, deduplicated) so that tag filtering can compare
plain strings.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from .utils import normalize_tags, parse_timestamp


@dataclass
class Author:
    """Creator of a document as reported by the backend."""

    email: str
    role: str = "user"

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Author":
        return cls(email=str(data.get("email", "")), role=str(data.get("role", "user")))


@dataclass
class Document:
    """A titled, tagged text record.

    Attributes:
        id: Backend identifier (``_id`` or ``id`` on the wire).
        title: Document title.
        content: Full text content.
        tags: Normalized tag list, order as received.
        summary: AI summary, absent until the summarize action has run.
        created_by: Author of the document.
        created_at: Creation timestamp, if the backend sent a parseable one.
        updated_at: Last update timestamp.
    """

    id: str
    title: str
    content: str
    tags: list[str] = field(default_factory=list)
    summary: str | None = None
    created_by: Author | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @staticmethod
    def _common_fields(data: dict[str, Any]) -> dict[str, Any]:
        doc_id = data.get("_id", data.get("id"))
        if doc_id is None:
            raise KeyError("_id")
        created_by = data.get("createdBy")
        return {
            "id": str(doc_id),
            "title": str(data["title"]),
            "content": str(data.get("content") or ""),
            "tags": normalize_tags(data.get("tags") or []),
            "summary": data.get("summary") or None,
            "created_by": Author.from_dict(created_by) if isinstance(created_by, dict) else None,
            "created_at": parse_timestamp(data.get("createdAt")),
            "updated_at": parse_timestamp(data.get("updatedAt")),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Document":
        """Build a document from an API payload.

        Raises:
            KeyError: If the identifier or title is missing.
            TypeError: If the payload is not a mapping.
        """
        return cls(**cls._common_fields(data))

    def matches_text(self, query: str) -> bool:
        """Case-insensitive substring match against title, content or summary."""
        needle = query.lower()
        if needle in self.title.lower() or needle in self.content.lower():
            return True
        return bool(self.summary) and needle in self.summary.lower()

    def has_all_tags(self, tags: list[str]) -> bool:
        """True when every tag in ``tags`` is on this document."""
        return all(tag in self.tags for tag in tags)


@dataclass
class SearchResult(Document):
    """A document returned by the search endpoint, with optional score."""

    relevance_score: float | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "SearchResult":
        score = data.get("relevanceScore")
        return cls(
            **cls._common_fields(data),
            relevance_score=float(score) if score is not None else None,
        )
