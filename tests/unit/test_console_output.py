"""Unit tests for the Rich notifier and renderers."""

import io
from datetime import datetime

import pytest
from rich.console import Console

from knowledgehub.adapters.inbound.cli.views import (
    render_documents,
    render_search_results,
    render_transcript,
)
from knowledgehub.adapters.outbound.console_notifier import ConsoleNotifier
from knowledgehub.core.domain import Document, Notification, SearchResult, TranscriptEntry

pytestmark = pytest.mark.unit


@pytest.fixture
def console():
    return Console(file=io.StringIO(), width=200)


def output(console):
    return console.file.getvalue()


class TestConsoleNotifier:
    def test_prints_success_and_error(self, console):
        notifier = ConsoleNotifier(console)
        notifier.notify(Notification.success("Saved"))
        notifier.notify(Notification.error("Broken", "Search Error"))

        text = output(console)
        assert "Success: Saved" in text
        assert "Search Error: Broken" in text

    def test_quiet_only_prints_errors(self, console):
        notifier = ConsoleNotifier(console, quiet=True)
        notifier.notify(Notification.success("Saved"))
        notifier.notify(Notification.error("Broken"))

        text = output(console)
        assert "Saved" not in text
        assert "Broken" in text


class TestViews:
    def test_documents_mark_own_and_preview_summary(self, console, user, sample_documents):
        sample_documents[1].summary = "Pooling explained"
        sample_documents[0].created_at = datetime(2025, 3, 7)

        render_documents(console, sample_documents, user, caption="Showing 2 of 2 documents")

        text = output(console)
        assert "Auth Guide (yours)" in text
        assert "DB Notes (yours)" not in text
        assert "AI Summary: Pooling explained" in text
        assert "Mar 7, 2025" in text

    def test_empty_document_list(self, console):
        render_documents(console, [])
        assert "No documents found." in output(console)

    def test_tag_preview(self, console):
        doc = Document(id="d1", title="T", content="c", tags=["a", "b", "c", "d"])
        render_documents(console, [doc])
        assert "a, b, c, +1 more" in output(console)

    def test_search_results_show_score(self, console):
        results = [SearchResult(id="d1", title="Auth", content="c", relevance_score=0.5)]
        render_search_results(console, results, semantic=True)
        text = output(console)
        assert "Semantic search results" in text
        assert "0.50" in text

    def test_transcript(self, console):
        entries = [
            TranscriptEntry.question("What is X?"),
            TranscriptEntry.answer("X is Y", ["Doc A"]),
        ]
        render_transcript(console, entries)
        text = output(console)
        assert "What is X?" in text
        assert "Doc A" in text

    def test_empty_transcript(self, console):
        render_transcript(console, [])
        assert "No conversation history yet." in output(console)
