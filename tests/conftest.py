"""
Pytest configuration and shared fixtures.
"""

import json
from unittest.mock import MagicMock

import pytest

from knowledgehub.adapters.outbound.sqlite_storage import MemoryStorage
from knowledgehub.core.domain import Author, Document, Notification, Role, User
from knowledgehub.core.ports.api_port import KnowledgeApiPort
from knowledgehub.core.ports.storage_port import TOKEN_KEY, USER_KEY
from knowledgehub.core.services.session_service import SessionStore


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests (no external dependencies)")
    config.addinivalue_line("markers", "integration: Integration tests (require a running backend)")


class RecordingNotifier:
    """Notifier that keeps every notification for assertions."""

    def __init__(self):
        self.notifications: list[Notification] = []

    def notify(self, notification: Notification) -> None:
        self.notifications.append(notification)

    @property
    def last(self) -> Notification | None:
        return self.notifications[-1] if self.notifications else None

    @property
    def errors(self) -> list[Notification]:
        return [n for n in self.notifications if n.is_error]


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def storage():
    return MemoryStorage()


@pytest.fixture
def api():
    """A mock of the backend API with the port's method signatures."""
    return MagicMock(spec=KnowledgeApiPort)


@pytest.fixture
def user():
    return User(id="u1", email="ana@example.com", role=Role.USER)


@pytest.fixture
def admin():
    return User(id="u9", email="root@example.com", role=Role.ADMIN)


@pytest.fixture
def session(api, storage, notifier):
    """A bootstrapped, unauthenticated session."""
    store = SessionStore(api, storage, notifier)
    store.bootstrap()
    return store


@pytest.fixture
def logged_in(api, storage, notifier, user):
    """A session restored from storage for ``user``."""
    storage.set(TOKEN_KEY, "t1")
    storage.set(USER_KEY, json.dumps(user.to_dict()))
    store = SessionStore(api, storage, notifier)
    store.bootstrap()
    return store


@pytest.fixture
def sample_documents(user):
    """Two documents: one owned by ``user``, one by somebody else."""
    return [
        Document(
            id="d1",
            title="Auth Guide",
            content="How to set up JWT authentication for the API.",
            tags=["auth", "security"],
            created_by=Author(email=user.email),
        ),
        Document(
            id="d2",
            title="DB Notes",
            content="Connection pooling for the database layer.",
            tags=["database"],
            created_by=Author(email="other@example.com"),
        ),
    ]
