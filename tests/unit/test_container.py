"""Unit tests for the composition root."""

import json

import pytest

from knowledgehub.adapters.outbound.knowledgehub_api import KnowledgeHubApi
from knowledgehub.adapters.outbound.sqlite_storage import SQLiteStorage
from knowledgehub.composition.container import build_container
from knowledgehub.config.settings import Settings
from knowledgehub.core.domain import Document
from knowledgehub.core.domain.exceptions import InvalidConfigurationError
from knowledgehub.core.ports.storage_port import TOKEN_KEY, USER_KEY

pytestmark = pytest.mark.unit


def test_default_adapters(tmp_path, notifier):
    config = Settings(api_url="http://api.test", data_dir=tmp_path / "data")

    container = build_container(config, notifier=notifier)

    assert isinstance(container.storage, SQLiteStorage)
    assert isinstance(container.api, KnowledgeHubApi)
    assert container.api.client.base_url == "http://api.test"
    assert config.storage_path.exists()
    assert container.session.loading is False


def test_token_provider_follows_storage(tmp_path, notifier):
    container = build_container(
        Settings(api_url="http://api.test", data_dir=tmp_path), notifier=notifier
    )
    client = container.api.client

    assert client.token_provider() is None
    container.storage.set(TOKEN_KEY, "t1")
    assert client.token_provider() == "t1"


def test_services_share_one_session(tmp_path, api, storage, notifier, user):
    storage.set(TOKEN_KEY, "t1")
    storage.set(USER_KEY, json.dumps(user.to_dict()))

    container = build_container(
        Settings(api_url="http://api.test", data_dir=tmp_path),
        storage=storage,
        api=api,
        notifier=notifier,
    )

    assert container.session.user == user
    assert container.documents.session is container.session
    assert container.search.session is container.session
    assert container.qa.session is container.session


def test_editor_save_refreshes_documents(tmp_path, api, storage, notifier, user):
    storage.set(TOKEN_KEY, "t1")
    storage.set(USER_KEY, json.dumps(user.to_dict()))
    saved = Document(id="d1", title="T", content="c")
    api.create_document.return_value = saved
    api.list_documents.return_value = [saved]
    container = build_container(
        Settings(api_url="http://api.test", data_dir=tmp_path),
        storage=storage,
        api=api,
        notifier=notifier,
    )

    editor = container.editor()
    editor.open()
    editor.title, editor.content = "T", "c"
    assert editor.submit() is True

    assert container.documents.documents == [saved]


def test_rejects_non_positive_timeout(tmp_path, notifier):
    config = Settings(api_url="http://api.test", data_dir=tmp_path, request_timeout=0)
    with pytest.raises(InvalidConfigurationError):
        build_container(config, notifier=notifier)
