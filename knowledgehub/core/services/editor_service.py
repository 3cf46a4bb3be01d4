"""Document edit/create flow."""

import logging
from collections.abc import Callable
from enum import Enum

from ..domain import Document, Notification
from ..domain.exceptions import (
    EmptyFieldError,
    KnowledgeHubError,
    RequestInFlightError,
    SessionError,
    ValidationError,
)
from ..domain.utils import add_tag, merge_tags, remove_tag
from ..ports.api_port import KnowledgeApiPort
from ..ports.notifier_port import NotifierPort
from .session_service import SessionStore

logger = logging.getLogger(__name__)


class EditorState(Enum):
    """Lifecycle of one editing session.

    NEW -> LOADING -> EDITING -> SUBMITTING -> DONE, with SUBMITTING
    falling back to EDITING when the request fails. A failed load ends in
    ABORTED. DONE and ABORTED are terminal.
    """

    NEW = "new"
    LOADING = "loading"
    EDITING = "editing"
    SUBMITTING = "submitting"
    DONE = "done"
    ABORTED = "aborted"


TERMINAL_STATES = {EditorState.DONE, EditorState.ABORTED}


class DocumentEditor:
    """Holds the editable fields of one document until submit.

    Tag edits only touch local state; they reach the backend together
    with title and content in the single create or update request.
    """

    def __init__(
        self,
        api: KnowledgeApiPort,
        session: SessionStore,
        notifier: NotifierPort,
        document_id: str | None = None,
        on_saved: Callable[[Document], object] | None = None,
    ) -> None:
        """Initialize the editor.

        Args:
            api: Backend API.
            session: Session store gating every operation.
            notifier: Sink for user-facing messages.
            document_id: Document to edit, or None to create a new one.
            on_saved: Called with the saved document after a successful submit.
        """
        self.api = api
        self.session = session
        self.notifier = notifier
        self.document_id = document_id
        self.on_saved = on_saved
        self.state = EditorState.NEW
        self.title = ""
        self.content = ""
        self.tags: list[str] = []
        self.saved: Document | None = None
        self.is_generating_tags = False

    @property
    def is_editing(self) -> bool:
        """True when an existing document is being edited."""
        return self.document_id is not None

    @property
    def is_loading(self) -> bool:
        return self.state is EditorState.LOADING

    @property
    def is_submitting(self) -> bool:
        return self.state is EditorState.SUBMITTING

    @property
    def is_finished(self) -> bool:
        return self.state in TERMINAL_STATES

    @property
    def content_length(self) -> int:
        return len(self.content)

    def open(self) -> bool:
        """Enter the flow, fetching the document when editing.

        Returns:
            False if the document could not be loaded; the flow is then
            aborted and the caller should leave it.
        """
        if self.state is not EditorState.NEW:
            return not self.is_finished
        if not self.is_editing:
            self.state = EditorState.EDITING
            return True

        self.state = EditorState.LOADING
        try:
            self.session.require_authenticated()
            document = self.api.get_document(self.document_id or "")
        except KnowledgeHubError as e:
            logger.error(f"Loading document {self.document_id} failed [{e.error_code}]: {e.message}")
            self.notifier.notify(Notification.error("Failed to fetch document"))
            self.state = EditorState.ABORTED
            return False

        self.title = document.title
        self.content = document.content
        self.tags = list(document.tags)
        self.state = EditorState.EDITING
        return True

    def add_tag(self, raw: str) -> bool:
        """Add a tag locally. Returns False for blank or duplicate tags."""
        updated = add_tag(self.tags, raw)
        if updated == self.tags:
            return False
        self.tags = updated
        return True

    def remove_tag(self, tag: str) -> None:
        self.tags = remove_tag(self.tags, tag)

    def generate_tags(self) -> bool:
        """Ask the backend for AI tags and merge them into the local set.

        Only saved documents can be tagged, and the content must not be
        empty. New tags are appended; existing ones are left alone.
        """
        try:
            if self.is_generating_tags:
                raise RequestInFlightError("Tag generation is already running")
            if not self.content.strip():
                raise EmptyFieldError("Please add content before generating tags")
            if not self.is_editing:
                raise ValidationError("Save the document before generating tags")
            self.session.require_authenticated()
        except (ValidationError, SessionError) as e:
            self.notifier.notify(Notification.error(e.message))
            return False

        self.is_generating_tags = True
        try:
            document = self.api.generate_tags(self.document_id or "")
        except KnowledgeHubError as e:
            logger.error(f"Tag generation failed [{e.error_code}]: {e.message}")
            self.notifier.notify(Notification.error("Failed to generate tags"))
            return False
        finally:
            self.is_generating_tags = False

        new_tags = [tag for tag in document.tags if tag not in self.tags]
        self.tags = merge_tags(self.tags, new_tags)
        if new_tags:
            self.notifier.notify(Notification.success(f"Generated {len(new_tags)} new tags with AI!"))
        else:
            self.notifier.notify(
                Notification("Info", "No new tags to add - document already has relevant tags.")
            )
        return True

    def validate(self) -> None:
        """Raise ``EmptyFieldError`` unless title and content are filled in."""
        if not self.title.strip() or not self.content.strip():
            raise EmptyFieldError(
                "Title and content are required",
                context={"title": bool(self.title.strip()), "content": bool(self.content.strip())},
            )

    def submit(self) -> bool:
        """Create or update the document in one request.

        Returns:
            True when saved (state DONE). Validation failures return False
            without a request; request failures return False and put the
            editor back into EDITING so the user can retry.
        """
        if self.state not in (EditorState.NEW, EditorState.EDITING):
            logger.warning(f"Ignoring submit in state {self.state.value}")
            return False
        try:
            self.validate()
            self.session.require_authenticated()
        except ValidationError as e:
            self.notifier.notify(Notification.error(e.message, "Validation Error"))
            return False
        except SessionError as e:
            self.notifier.notify(Notification.error(e.message))
            return False

        verb = "update" if self.is_editing else "create"
        self.state = EditorState.SUBMITTING
        title, content, tags = self.title.strip(), self.content.strip(), list(self.tags)
        try:
            if self.is_editing:
                document = self.api.update_document(
                    self.document_id or "", {"title": title, "content": content, "tags": tags}
                )
            else:
                document = self.api.create_document(title, content, tags)
        except KnowledgeHubError as e:
            logger.error(f"Document {verb} failed [{e.error_code}]: {e.message}")
            self.notifier.notify(Notification.error(f"Failed to {verb} document"))
            self.state = EditorState.EDITING
            return False

        self.saved = document
        self.state = EditorState.DONE
        logger.info(f"Document {document.id} {verb}d")
        self.notifier.notify(Notification.success(f"Document {verb}d successfully!"))
        if self.on_saved is not None:
            self.on_saved(document)
        return True
