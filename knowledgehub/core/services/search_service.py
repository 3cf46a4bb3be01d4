"""Search session: one-shot queries plus a persisted recent-search list."""

import json
import logging

from ..domain import Notification, SearchResult
from ..domain.exceptions import KnowledgeHubError, SessionError, StorageError
from ..domain.utils import MAX_RECENT_SEARCHES, push_recent
from ..ports.api_port import KnowledgeApiPort
from ..ports.notifier_port import NotifierPort
from ..ports.storage_port import RECENT_SEARCHES_KEY, StoragePort
from .session_service import SessionStore

logger = logging.getLogger(__name__)


class SearchSession:
    """Runs keyword or semantic searches against the backend.

    Results are not cached beyond the latest successful query. A failed
    search leaves the previous results in place.
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
        self.results: list[SearchResult] = []
        self.semantic = False
        self.is_searching = False
        self.has_searched = False
        self.recent_searches: list[str] = self._load_recent()

    def _load_recent(self) -> list[str]:
        try:
            saved = self.storage.get(RECENT_SEARCHES_KEY)
        except StorageError as e:
            logger.warning(f"Could not read recent searches [{e.error_code}]: {e.message}")
            return []
        if not saved:
            return []
        try:
            parsed = json.loads(saved)
        except ValueError as e:
            logger.warning(f"Failed to parse recent searches: {e}")
            return []
        if not isinstance(parsed, list):
            logger.warning("Ignoring recent searches that are not a list")
            return []

        recent: list[str] = []
        for query in parsed:
            if isinstance(query, str) and query not in recent:
                recent.append(query)
        return recent[:MAX_RECENT_SEARCHES]

    def search(self, query: str, semantic: bool | None = None) -> list[SearchResult]:
        """Run a search and return the results now on display.

        Args:
            query: Search text. Blank queries are ignored.
            semantic: Ranking mode; None keeps the current mode.

        Returns:
            The new results on success, otherwise the previous ones.
        """
        query = query.strip()
        if not query:
            return self.results
        if semantic is not None:
            self.semantic = semantic

        self.is_searching = True
        self.has_searched = True
        try:
            self.session.require_authenticated()
            results = self.api.search(query, self.semantic)
        except KnowledgeHubError as e:
            logger.error(f"Search failed [{e.error_code}]: {e.message}")
            description = (
                e.message
                if isinstance(e, SessionError)
                else "Failed to search documents. Please try again."
            )
            self.notifier.notify(Notification.error(description, "Search Error"))
            return self.results
        finally:
            self.is_searching = False

        if not self.session.is_authenticated:
            logger.debug("Session ended during search; dropping results")
            return self.results

        self.results = results
        self._remember(query)
        mode = "semantic" if self.semantic else "regular"
        logger.info(f"{mode.capitalize()} search returned {len(results)} results")
        self.notifier.notify(
            Notification.success(f"Found {len(results)} documents", "Search Complete")
        )
        return self.results

    def rerun_recent(self, query: str) -> list[SearchResult]:
        """Run a query from the recent list again in the current mode."""
        return self.search(query)

    def clear(self) -> None:
        """Drop the displayed results. Recent searches are kept."""
        self.results = []
        self.has_searched = False

    def _remember(self, query: str) -> None:
        self.recent_searches = push_recent(self.recent_searches, query)
        try:
            self.storage.set(RECENT_SEARCHES_KEY, json.dumps(self.recent_searches))
        except StorageError as e:
            logger.error(f"Could not persist recent searches [{e.error_code}]: {e.message}")
