"""Tests for the typer CLI, wired to in-memory adapters."""

import json

import pytest
from rich.console import Console
from typer.testing import CliRunner

from knowledgehub.adapters.common.exception_handler import EXIT_ENVIRONMENT, EXIT_SESSION
from knowledgehub.adapters.inbound.cli import commands
from knowledgehub.composition.container import build_container
from knowledgehub.config.settings import Settings
from knowledgehub.core.domain import Answer, Document, SearchResult, User
from knowledgehub.core.domain.exceptions import HttpError, InvalidConfigurationError
from knowledgehub.core.ports.storage_port import QA_HISTORY_KEY, TOKEN_KEY, USER_KEY

pytestmark = pytest.mark.unit

runner = CliRunner()


@pytest.fixture
def wire(monkeypatch, tmp_path, api, storage, notifier):
    """Point the CLI at a fresh container built over the test doubles."""

    def factory():
        return build_container(
            Settings(api_url="http://api.test", data_dir=tmp_path),
            storage=storage,
            api=api,
            notifier=notifier,
        )

    monkeypatch.setattr(commands, "get_container", factory)
    # Wide enough that table cells never wrap
    monkeypatch.setattr(commands, "console", Console(width=200))
    return factory


@pytest.fixture
def signed_in(storage, wire):
    user = User(id="u1", email="ana@example.com")
    storage.set(TOKEN_KEY, "t1")
    storage.set(USER_KEY, json.dumps(user.to_dict()))
    return user


def test_login_persists_session(wire, api, storage, notifier):
    api.login.return_value = ("t1", User(id="u1", email="ana@example.com"))

    result = runner.invoke(commands.app, ["login", "ana@example.com"], input="secret\n")

    assert result.exit_code == 0
    api.login.assert_called_once_with("ana@example.com", "secret")
    assert storage.get(TOKEN_KEY) == "t1"
    assert notifier.last.description == "Logged in successfully!"


def test_failed_login_exits_with_session_code(wire, api):
    api.login.side_effect = HttpError(401, "Unauthorized", detail="Invalid credentials")

    result = runner.invoke(commands.app, ["login", "ana@example.com", "--password", "bad"])

    assert result.exit_code == EXIT_SESSION


def test_commands_require_login(wire, api):
    result = runner.invoke(commands.app, ["docs", "list"])

    assert result.exit_code == EXIT_SESSION
    assert "Not logged in" in result.output
    api.list_documents.assert_not_called()


def test_whoami(signed_in):
    result = runner.invoke(commands.app, ["whoami"])
    assert result.exit_code == 0
    assert "ana@example.com" in result.output


def test_logout_clears_storage(signed_in, storage):
    result = runner.invoke(commands.app, ["logout"])
    assert result.exit_code == 0
    assert storage.get(TOKEN_KEY) is None


@pytest.mark.parametrize("raw", ['{"a": 1}', "[1]", '"abc"'])
def test_logout_with_unreadable_history(signed_in, storage, raw):
    storage.set(QA_HISTORY_KEY, raw)

    result = runner.invoke(commands.app, ["logout"])

    assert result.exit_code == 0
    assert storage.get(TOKEN_KEY) is None


def test_docs_list_filters_by_tag(signed_in, api, sample_documents):
    api.list_documents.return_value = sample_documents

    result = runner.invoke(commands.app, ["docs", "list", "--tag", "database"])

    assert result.exit_code == 0
    assert "DB Notes" in result.output
    assert "Auth Guide" not in result.output
    assert "Showing 1 of 2 documents" in result.output


def test_docs_add(signed_in, api):
    api.create_document.return_value = Document(id="d3", title="New", content="Body")
    api.list_documents.return_value = []

    result = runner.invoke(
        commands.app,
        ["docs", "add", "--title", "New", "--content", "Body", "--tag", "Draft"],
    )

    assert result.exit_code == 0
    api.create_document.assert_called_once_with("New", "Body", ["draft"])
    api.list_documents.assert_called_once()


def test_docs_delete_refuses_foreign_document(signed_in, api, sample_documents):
    api.list_documents.return_value = sample_documents

    result = runner.invoke(commands.app, ["docs", "delete", "d2", "--yes"])

    assert result.exit_code == 1
    api.delete_document.assert_not_called()


def test_docs_show_unknown_id(signed_in, api, sample_documents):
    api.list_documents.return_value = sample_documents
    result = runner.invoke(commands.app, ["docs", "show", "nope"])
    assert result.exit_code == 1
    assert "No document with id nope" in result.output


def test_search_and_recent(signed_in, api):
    api.search.return_value = [SearchResult(id="d1", title="Auth Guide", content="JWT")]

    result = runner.invoke(commands.app, ["search", "jwt", "--semantic"])
    assert result.exit_code == 0
    assert "Auth Guide" in result.output
    api.search.assert_called_once_with("jwt", True)

    result = runner.invoke(commands.app, ["recent"])
    assert "1. jwt" in result.output


def test_ask_records_history(signed_in, api, storage):
    api.ask.return_value = Answer("X is a thing.", ["Doc A"])

    result = runner.invoke(commands.app, ["ask", "What is X?"])

    assert result.exit_code == 0
    assert "X is a thing." in result.output
    assert len(json.loads(storage.get(QA_HISTORY_KEY))) == 2


def test_chat_quits(signed_in, api):
    result = runner.invoke(commands.app, ["chat"], input="quit\n")
    assert result.exit_code == 0
    assert "Goodbye" in result.output
    api.ask.assert_not_called()


def test_configuration_error_exits_with_environment_code(monkeypatch):
    def broken():
        raise InvalidConfigurationError("request_timeout must be positive")

    monkeypatch.setattr(commands, "get_container", broken)
    monkeypatch.setattr(commands, "console", Console(width=200))

    result = runner.invoke(commands.app, ["whoami"])

    assert result.exit_code == EXIT_ENVIRONMENT
    assert "KH_CFG_002" in result.output
