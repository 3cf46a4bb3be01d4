"""Q&A session: an append-only, persisted question/answer transcript."""

import json
import logging

from ..domain import Answer, Notification, TranscriptEntry
from ..domain.exceptions import KnowledgeHubError, SessionError, StorageError
from ..ports.api_port import KnowledgeApiPort
from ..ports.notifier_port import NotifierPort
from ..ports.storage_port import QA_HISTORY_KEY, StoragePort
from .session_service import SessionStore

logger = logging.getLogger(__name__)

NO_ANSWER_TEXT = (
    "I apologize, but I couldn't find relevant information to answer your question."
)
FALLBACK_ANSWER_TEXT = (
    "Sorry, I encountered an error while processing your question. Please try again."
)

SUGGESTED_QUESTIONS = [
    "What documents do we have about user authentication?",
    "Summarize the key points from our technical documentation",
    "How can I implement database connections?",
    "What are the best practices mentioned in our guides?",
]


class QASession:
    """Asks questions and keeps the transcript in durable storage.

    Each accepted :meth:`ask` appends exactly two entries: the question,
    immediately, then either the answer or a fixed fallback. Only one
    question may be outstanding at a time, so answers never interleave.
    The whole transcript is written to storage after every append.
    """

    def __init__(
        self,
        api: KnowledgeApiPort,
        storage: StoragePort,
        session: SessionStore,
        notifier: NotifierPort,
    ) -> None:
        self.api = api
        self.storage = storage
        self.session = session
        self.notifier = notifier
        self.is_asking = False
        self.entries: list[TranscriptEntry] = self._load()

    def _load(self) -> list[TranscriptEntry]:
        try:
            saved = self.storage.get(QA_HISTORY_KEY)
        except StorageError as e:
            logger.warning(f"Could not read Q&A history [{e.error_code}]: {e.message}")
            return []
        if not saved:
            return []
        try:
            parsed = json.loads(saved)
        except ValueError as e:
            logger.warning(f"Failed to parse Q&A history: {e}")
            return []
        if not isinstance(parsed, list) or not all(isinstance(item, dict) for item in parsed):
            logger.warning("Ignoring Q&A history that is not a list of entries")
            return []
        try:
            entries = [TranscriptEntry.from_dict(item) for item in parsed]
        except (ValueError, KeyError, TypeError, AttributeError) as e:
            logger.warning(f"Failed to parse Q&A history: {e}")
            return []
        logger.debug(f"Restored {len(entries)} Q&A entries")
        return entries

    def ask(self, question: str) -> Answer | None:
        """Ask a question and record the exchange.

        Returns:
            The backend's answer, or None if the question was blank, was
            rejected because another question is in flight, or failed.
        """
        question = question.strip()
        if not question:
            return None
        if self.is_asking:
            logger.warning("Rejected question while another is in flight")
            self.notifier.notify(
                Notification.error("Please wait for the current answer first.", "Busy")
            )
            return None
        try:
            self.session.require_authenticated()
        except SessionError as e:
            self.notifier.notify(Notification.error(e.message))
            return None

        self.is_asking = True
        try:
            self._append(TranscriptEntry.question(question))
            try:
                answer = self.api.ask(question)
            except KnowledgeHubError as e:
                logger.error(f"Question failed [{e.error_code}]: {e.message}")
                self.notifier.notify(
                    Notification.error("Failed to get AI response. Please try again.")
                )
                self._append(TranscriptEntry.answer(FALLBACK_ANSWER_TEXT))
                return None

            self._append(TranscriptEntry.answer(answer.answer or NO_ANSWER_TEXT, answer.sources))
            return answer
        finally:
            self.is_asking = False

    def clear_history(self) -> None:
        """Empty the transcript and remove its persisted copy."""
        self.entries = []
        try:
            self.storage.remove(QA_HISTORY_KEY)
        except StorageError as e:
            logger.error(f"Could not remove Q&A history [{e.error_code}]: {e.message}")
        self.notifier.notify(
            Notification("History Cleared", "Conversation history has been cleared.")
        )

    def _append(self, entry: TranscriptEntry) -> None:
        self.entries.append(entry)
        try:
            self.storage.set(QA_HISTORY_KEY, json.dumps([e.to_dict() for e in self.entries]))
        except StorageError as e:
            logger.error(f"Could not persist Q&A history [{e.error_code}]: {e.message}")
