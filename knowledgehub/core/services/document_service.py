"""Document collection cache and per-document actions."""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field

from ..domain import Document, Notification, User
from ..domain.exceptions import KnowledgeHubError, PermissionDeniedError, SessionError
from ..domain.utils import normalize_tag, normalize_tags, toggle_tag
from ..ports.api_port import KnowledgeApiPort
from ..ports.notifier_port import NotifierPort
from .session_service import SessionStore

logger = logging.getLogger(__name__)


def can_edit(user: User | None, document: Document) -> bool:
    """Admins may edit anything; other users only what they created."""
    if user is None:
        return False
    if user.is_admin:
        return True
    return document.created_by is not None and document.created_by.email == user.email


def filter_documents(
    documents: list[Document], query: str = "", selected_tags: list[str] | None = None
) -> list[Document]:
    """Filter by text and tags.

    Text matching is a case-insensitive substring test on title, content
    and summary. Selected tags are normalized like document tags, and a
    document must carry every one of them (AND). Both filters apply
    together; with neither, the input comes back as is.
    """
    selected_tags = normalize_tags(selected_tags or [])
    filtered = documents
    if query:
        filtered = [doc for doc in filtered if doc.matches_text(query)]
    if selected_tags:
        filtered = [doc for doc in filtered if doc.has_all_tags(selected_tags)]
    return list(filtered)


@dataclass
class DocumentFilter:
    """Dashboard filter state: a text query plus selected tags."""

    query: str = ""
    selected_tags: list[str] = field(default_factory=list)

    @property
    def is_active(self) -> bool:
        return bool(self.query) or bool(self.selected_tags)

    def toggle_tag(self, tag: str) -> None:
        tag = normalize_tag(tag)
        if tag:
            self.selected_tags = toggle_tag(self.selected_tags, tag)

    def clear(self) -> None:
        self.query = ""
        self.selected_tags = []

    def describe(self, shown: int, total: int) -> str:
        text = f"Showing {shown} of {total} documents"
        if self.selected_tags:
            text += f" • Filtered by: {', '.join(self.selected_tags)}"
        return text


class DocumentCollection:
    """Read-through cache of the full document list.

    The cache is only ever replaced wholesale by :meth:`refresh`. Every
    mutation goes to the backend first and is followed by a refresh; a
    failed refresh keeps the previous contents.
    """

    def __init__(
        self,
        api: KnowledgeApiPort,
        session: SessionStore,
        notifier: NotifierPort,
    ) -> None:
        self.api = api
        self.session = session
        self.notifier = notifier
        self.documents: list[Document] = []
        self.tags: list[str] = []
        self.is_loading = False

    def refresh(self) -> bool:
        """Refetch every document and recompute the distinct tag set."""
        self.is_loading = True
        try:
            self.session.require_authenticated()
            documents = self.api.list_documents()
        except KnowledgeHubError as e:
            self._report(e, "Failed to fetch documents", "refresh")
            return False
        finally:
            self.is_loading = False

        if not self.session.is_authenticated:
            logger.debug("Session ended during refresh; dropping document list")
            return False

        self.documents = documents
        self.tags = self._collect_tags(documents)
        logger.info(f"Loaded {len(documents)} documents with {len(self.tags)} distinct tags")
        return True

    @staticmethod
    def _collect_tags(documents: list[Document]) -> list[str]:
        tags: list[str] = []
        for doc in documents:
            for tag in doc.tags:
                if tag not in tags:
                    tags.append(tag)
        return tags

    def filter(self, query: str = "", selected_tags: list[str] | None = None) -> list[Document]:
        """Filter the cached documents. Pure; see :func:`filter_documents`."""
        return filter_documents(self.documents, query, selected_tags)

    def apply(self, doc_filter: DocumentFilter) -> list[Document]:
        return self.filter(doc_filter.query, doc_filter.selected_tags)

    def find(self, document_id: str) -> Document | None:
        return next((doc for doc in self.documents if doc.id == document_id), None)

    def can_edit(self, document: Document) -> bool:
        return can_edit(self.session.user, document)

    def delete(self, document: Document) -> bool:
        """Delete a document the current user owns (or any, for admins)."""

        def action() -> None:
            if not self.can_edit(document):
                raise PermissionDeniedError(
                    "You can only delete your own documents",
                    context={"document_id": document.id},
                )
            self.api.delete_document(document.id)

        return self._mutate(
            action, "delete", "Document deleted successfully!", "Failed to delete document"
        )

    def summarize(self, document: Document) -> bool:
        return self._mutate(
            lambda: self.api.summarize_document(document.id),
            "summarize",
            "Document summarized with AI!",
            "Failed to generate summary",
        )

    def generate_tags(self, document: Document) -> bool:
        return self._mutate(
            lambda: self.api.generate_tags(document.id),
            "generate-tags",
            "Tags generated with AI!",
            "Failed to generate tags",
        )

    def _mutate(
        self,
        action: Callable[[], object],
        operation: str,
        success_text: str,
        failure_text: str,
    ) -> bool:
        try:
            self.session.require_authenticated()
            action()
        except KnowledgeHubError as e:
            self._report(e, failure_text, operation)
            return False

        self.notifier.notify(Notification.success(success_text))
        self.refresh()
        return True

    def _report(self, exc: KnowledgeHubError, failure_text: str, operation: str) -> None:
        logger.error(f"Document {operation} failed [{exc.error_code}]: {exc.message}")
        description = exc.message if isinstance(exc, SessionError) else failure_text
        self.notifier.notify(Notification.error(description))
