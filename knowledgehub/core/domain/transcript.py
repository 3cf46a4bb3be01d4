"""Q&A transcript models."""

import uuid
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from typing import Any


class EntryKind(Enum):
    """Who produced a transcript entry."""

    QUESTION = "question"
    ANSWER = "answer"


@dataclass
class Answer:
    """Answer returned by the question endpoint."""

    answer: str
    sources: list[str] = field(default_factory=list)


@dataclass
class TranscriptEntry:
    """One message of a Q&A conversation.

    ``sources`` is ``None`` for questions and for the fallback entry
    appended when a request fails; answers always carry a list.
    """

    kind: EntryKind
    text: str
    id: str = field(default_factory=lambda: uuid.uuid4().hex)
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))
    sources: list[str] | None = None

    @classmethod
    def question(cls, text: str) -> "TranscriptEntry":
        return cls(kind=EntryKind.QUESTION, text=text)

    @classmethod
    def answer(cls, text: str, sources: list[str] | None = None) -> "TranscriptEntry":
        return cls(kind=EntryKind.ANSWER, text=text, sources=sources)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "id": self.id,
            "kind": self.kind.value,
            "text": self.text,
            "createdAt": self.created_at.isoformat(),
        }
        if self.sources is not None:
            data["sources"] = list(self.sources)
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "TranscriptEntry":
        """Rehydrate an entry persisted with :meth:`to_dict`.

        Raises:
            KeyError, ValueError, TypeError: On malformed input.
        """
        sources = data.get("sources")
        return cls(
            id=str(data["id"]),
            kind=EntryKind(data["kind"]),
            text=str(data["text"]),
            created_at=datetime.fromisoformat(data["createdAt"]),
            sources=[str(s) for s in sources] if sources is not None else None,
        )
