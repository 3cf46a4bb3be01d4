"""Domain models for the KnowledgeHub client.

Models are organized by domain area:

- document: Author, Document and SearchResult from the documents API
- user: Role and User for the authenticated session
- transcript: EntryKind, TranscriptEntry and Answer for Q&A
- notification: Notification and Variant for user-facing messages

All models are re-exported here for convenient importing:

    from knowledgehub.core.domain import Document, User, TranscriptEntry
"""

from .document import Author, Document, SearchResult
from .notification import Notification, Variant
from .transcript import Answer, EntryKind, TranscriptEntry
from .user import Role, User

__all__ = [
    # Document models
    "Author",
    "Document",
    "SearchResult",
    # User models
    "Role",
    "User",
    # Transcript models
    "Answer",
    "EntryKind",
    "TranscriptEntry",
    # Notifications
    "Notification",
    "Variant",
]
