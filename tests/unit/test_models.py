"""Unit tests for domain models parsed from API payloads and storage."""

import pytest

from knowledgehub.core.domain import (
    Document,
    EntryKind,
    Notification,
    Role,
    SearchResult,
    TranscriptEntry,
    User,
    Variant,
)

pytestmark = pytest.mark.unit


class TestDocument:
    def test_from_dict_reads_mongo_style_payload(self):
        doc = Document.from_dict(
            {
                "_id": "abc",
                "title": "Auth Guide",
                "content": "JWT setup",
                "tags": [" Auth", "security", "auth"],
                "summary": "",
                "createdBy": {"email": "ana@example.com", "role": "user"},
                "createdAt": "2025-03-07T10:00:00Z",
            }
        )

        assert doc.id == "abc"
        assert doc.tags == ["auth", "security"]
        assert doc.summary is None
        assert doc.created_by is not None and doc.created_by.email == "ana@example.com"
        assert doc.created_at is not None and doc.created_at.year == 2025
        assert doc.updated_at is None

    def test_from_dict_accepts_plain_id(self):
        assert Document.from_dict({"id": 7, "title": "T"}).id == "7"

    def test_missing_id_raises_key_error(self):
        with pytest.raises(KeyError):
            Document.from_dict({"title": "No id"})

    def test_matches_text_checks_summary(self):
        doc = Document(id="1", title="Guide", content="body", summary="Covers OAuth flows")
        assert doc.matches_text("oauth")
        assert not doc.matches_text("kubernetes")

    def test_has_all_tags(self):
        doc = Document(id="1", title="T", content="c", tags=["auth", "security"])
        assert doc.has_all_tags(["auth", "security"])
        assert not doc.has_all_tags(["auth", "database"])
        assert doc.has_all_tags([])

    def test_search_result_score(self):
        result = SearchResult.from_dict({"_id": "1", "title": "T", "relevanceScore": "0.75"})
        assert result.relevance_score == pytest.approx(0.75)
        assert SearchResult.from_dict({"_id": "2", "title": "T"}).relevance_score is None


class TestUser:
    def test_round_trip_through_storage_format(self):
        user = User(id="u1", email="ana@example.com", role=Role.ADMIN)
        assert User.from_dict(user.to_dict()) == user
        assert user.is_admin

    def test_unknown_role_is_rejected(self):
        with pytest.raises(ValueError):
            User.from_dict({"id": "u1", "email": "a@b.c", "role": "superuser"})


class TestTranscriptEntry:
    def test_question_has_no_sources(self):
        entry = TranscriptEntry.question("What is X?")
        assert entry.kind is EntryKind.QUESTION
        assert entry.sources is None
        assert "sources" not in entry.to_dict()

    def test_persisted_answer_is_restored(self):
        entry = TranscriptEntry.answer("X is Y", ["Doc A"])
        restored = TranscriptEntry.from_dict(entry.to_dict())
        assert restored == entry

    def test_ids_are_unique(self):
        assert TranscriptEntry.question("a").id != TranscriptEntry.question("a").id


class TestNotification:
    def test_error_is_destructive(self):
        note = Notification.error("boom")
        assert note.variant is Variant.DESTRUCTIVE
        assert note.is_error
        assert note.title == "Error"

    def test_success_is_default(self):
        note = Notification.success("done")
        assert not note.is_error
        assert note.title == "Success"
