"""Composition root wiring adapters to the application services."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import lru_cache

from ..adapters.outbound.console_notifier import ConsoleNotifier
from ..adapters.outbound.http_client import HttpClient
from ..adapters.outbound.knowledgehub_api import KnowledgeHubApi
from ..adapters.outbound.sqlite_storage import SQLiteStorage
from ..config.settings import Settings, settings as default_settings
from ..core.domain import Document
from ..core.domain.exceptions import InvalidConfigurationError
from ..core.ports.api_port import KnowledgeApiPort
from ..core.ports.notifier_port import NotifierPort
from ..core.ports.storage_port import TOKEN_KEY, StoragePort
from ..core.services.document_service import DocumentCollection
from ..core.services.editor_service import DocumentEditor
from ..core.services.qa_service import QASession
from ..core.services.search_service import SearchSession
from ..core.services.session_service import SessionStore

logger = logging.getLogger(__name__)


@dataclass
class Container:
    """Every long-lived object of one client process."""

    settings: Settings
    storage: StoragePort
    api: KnowledgeApiPort
    notifier: NotifierPort
    session: SessionStore
    documents: DocumentCollection
    search: SearchSession
    qa: QASession

    def editor(self, document_id: str | None = None) -> DocumentEditor:
        """Start an edit flow; a successful save refreshes the document cache."""

        def refresh_after_save(_: Document) -> None:
            self.documents.refresh()

        return DocumentEditor(
            self.api,
            self.session,
            self.notifier,
            document_id=document_id,
            on_saved=refresh_after_save,
        )


def build_container(
    config: Settings | None = None,
    *,
    storage: StoragePort | None = None,
    api: KnowledgeApiPort | None = None,
    notifier: NotifierPort | None = None,
) -> Container:
    """Wire the client, letting tests substitute any adapter.

    The session is bootstrapped from storage before the container is
    returned, so ``container.session.loading`` is always False here.
    """
    config = config or default_settings
    if config.request_timeout <= 0:
        raise InvalidConfigurationError(
            "request_timeout must be positive",
            context={"request_timeout": config.request_timeout},
        )
    if storage is None:
        config.ensure_directories()
        logger.debug(f"Opening local storage at {config.storage_path}")
        storage = SQLiteStorage(config.storage_path)
    store = storage

    if api is None:
        client = HttpClient(
            config.api_url,
            token_provider=lambda: store.get(TOKEN_KEY),
            timeout=config.request_timeout,
        )
        api = KnowledgeHubApi(client)
    notifier = notifier or ConsoleNotifier()

    session = SessionStore(api, store, notifier)
    session.bootstrap()
    logger.info(f"Using KnowledgeHub API at {config.api_url}")

    return Container(
        settings=config,
        storage=store,
        api=api,
        notifier=notifier,
        session=session,
        documents=DocumentCollection(api, session, notifier),
        search=SearchSession(api, store, session, notifier),
        qa=QASession(api, store, session, notifier),
    )


@lru_cache
def get_container() -> Container:
    logger.info("Initializing KnowledgeHub client (composition root)...")
    return build_container()
