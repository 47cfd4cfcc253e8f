"""Tests for the Mongo persistence functions with mocked motor collections."""

import datetime as dt
from unittest.mock import AsyncMock, MagicMock

import pytest

from feedbackdesk import crud
from feedbackdesk.config import DEFAULT_EVENT_TITLE
from feedbackdesk.db import ensure_indexes
from feedbackdesk.demo import seed_demo_data
from feedbackdesk.questionnaire import default_answers
from feedbackdesk.schemas import FeedbackIn, ParticipantIn, SessionIn


def _collection(docs=None):
    collection = MagicMock()
    cursor = MagicMock()
    cursor.sort.return_value = cursor
    cursor.to_list = AsyncMock(return_value=docs or [])
    collection.find.return_value = cursor
    collection.find_one = AsyncMock(return_value=None)
    collection.insert_one = AsyncMock()
    collection.insert_many = AsyncMock()
    collection.update_one = AsyncMock()
    collection.replace_one = AsyncMock(return_value=MagicMock(matched_count=1))
    collection.delete_one = AsyncMock(return_value=MagicMock(deleted_count=1))
    collection.count_documents = AsyncMock(return_value=0)
    return collection


@pytest.fixture
def db():
    collections = {name: _collection() for name in ("sessions", "participants", "feedback", "settings")}
    database = MagicMock()
    database.__getitem__.side_effect = collections.__getitem__
    database.collections = collections
    return database


SESSION_DOC = {
    "id": "s1", "title": "Opening Keynote", "date": "2024-11-12", "start_time": "09:00",
    "end_time": "10:00", "presenter_name": "Dr. Sarah Miller", "presenter_email": "s.miller@train.io",
    "presenter_phone": None, "location": "Grand Ballroom A", "material_url": None,
}


def _session_in(**changes):
    data = {"title": "Opening Keynote", "date": "2024-11-12", "start_time": "09:00", "end_time": "10:00",
            "presenter_name": "Dr. Sarah Miller"}
    data.update(changes)
    return SessionIn(**data)


class TestSessions:

    @pytest.mark.asyncio
    async def test_create_sessions_stores_json_documents(self, db):
        rows = await crud.create_sessions(db, [_session_in(), _session_in(title="Second")])

        assert len(rows) == 2
        assert rows[0].id != rows[1].id
        docs = db.collections["sessions"].insert_many.call_args[0][0]
        assert docs[0]["date"] == "2024-11-12"
        assert docs[1]["title"] == "Second"

    @pytest.mark.asyncio
    async def test_create_nothing_skips_insert(self, db):
        assert await crud.create_sessions(db, []) == []
        db.collections["sessions"].insert_many.assert_not_called()

    @pytest.mark.asyncio
    async def test_list_sessions_sorted_by_date_and_time(self, db):
        db.collections["sessions"].find.return_value.to_list.return_value = [SESSION_DOC]

        sessions = await crud.list_sessions(db)

        assert sessions[0].date == dt.date(2024, 11, 12)
        db.collections["sessions"].find.assert_called_once_with({}, {"_id": 0})
        db.collections["sessions"].find.return_value.sort.assert_called_once_with([("date", 1), ("start_time", 1)])

    @pytest.mark.asyncio
    async def test_update_missing_session(self, db):
        db.collections["sessions"].replace_one.return_value = MagicMock(matched_count=0)
        assert await crud.update_session(db, "nope", _session_in()) is None

    @pytest.mark.asyncio
    async def test_update_replaces_whole_document(self, db):
        row = await crud.update_session(db, "s1", _session_in(location="Room 9"))

        assert row.id == "s1"
        query, doc = db.collections["sessions"].replace_one.call_args[0]
        assert query == {"id": "s1"}
        assert doc["location"] == "Room 9"

    @pytest.mark.asyncio
    async def test_delete_does_not_touch_feedback(self, db):
        assert await crud.delete_session(db, "s1") is True
        db.collections["feedback"].delete_one.assert_not_called()
        db.collections["feedback"].delete_many.assert_not_called()


class TestParticipantsAndFeedback:

    @pytest.mark.asyncio
    async def test_get_participant(self, db):
        db.collections["participants"].find_one.return_value = {"id": "p1", "name": "James Gordon",
                                                                "email": "gordon@example.com", "phone": None}
        participant = await crud.get_participant(db, "p1")
        assert participant.name == "James Gordon"

    @pytest.mark.asyncio
    async def test_create_participants(self, db):
        rows = await crud.create_participants(db, [ParticipantIn(name="Alice", email="alice@example.com")])
        assert rows[0].id.startswith("p-")

    @pytest.mark.asyncio
    async def test_create_feedback_strips_comments(self, db):
        answers = default_answers()
        for a in answers:
            if (a["category"], a["question_id"]) in {("material", 3), ("overall", 1)}:
                a["score"] = 1
        payload = FeedbackIn(session_id="s1", participant_id="p1", scores=answers, comments="  Great session  ")

        row = await crud.create_feedback(db, payload)

        assert row.comments == "Great session"
        doc = db.collections["feedback"].insert_one.call_args[0][0]
        assert doc["session_id"] == "s1"
        assert len(doc["scores"]) == 18
        assert doc["scores"][3]["text_value"] == "Too Basic"

    @pytest.mark.asyncio
    async def test_list_feedback_for_session(self, db):
        await crud.list_feedback(db, session_id="s1")
        db.collections["feedback"].find.assert_called_once_with({"session_id": "s1"}, {"_id": 0})


class TestEventAndSnapshot:

    @pytest.mark.asyncio
    async def test_default_title(self, db):
        assert await crud.get_event_title(db) == DEFAULT_EVENT_TITLE

    @pytest.mark.asyncio
    async def test_set_title_upserts(self, db):
        assert await crud.set_event_title(db, "  Forum 2025 ") == "Forum 2025"
        kwargs = db.collections["settings"].update_one.call_args.kwargs
        assert kwargs["upsert"] is True

    @pytest.mark.asyncio
    async def test_load_snapshot(self, db):
        db.collections["sessions"].find.return_value.to_list.return_value = [SESSION_DOC]
        db.collections["settings"].find_one.return_value = {"_id": "event", "title": "Forum"}

        snapshot = await crud.load_snapshot(db)

        assert snapshot.event_title == "Forum"
        assert snapshot.session("s1").title == "Opening Keynote"
        assert snapshot.feedback == ()


class TestSeed:

    @pytest.mark.asyncio
    async def test_seeds_empty_store(self, db):
        assert await seed_demo_data(db) is True
        assert len(db.collections["sessions"].insert_many.call_args[0][0]) == 3
        feedback_docs = db.collections["feedback"].insert_many.call_args[0][0]
        assert feedback_docs[0]["scores"][3] == {"category": "material", "question_id": 3,
                                                 "score": 2.0, "text_value": "Appropriate"}

    @pytest.mark.asyncio
    async def test_leaves_existing_data_alone(self, db):
        db.collections["sessions"].count_documents.return_value = 3
        assert await seed_demo_data(db) is False
        db.collections["sessions"].insert_many.assert_not_called()


class TestIndexes:

    @pytest.mark.asyncio
    async def test_ensure_indexes(self, db):
        for collection in db.collections.values():
            collection.create_index = AsyncMock()

        await ensure_indexes(db)

        sessions = db.collections["sessions"].create_index
        sessions.assert_any_await([("id", 1)], unique=True)
        sessions.assert_any_await([("date", 1), ("start_time", 1)])
        db.collections["participants"].create_index.assert_awaited_once_with([("id", 1)], unique=True)
        feedback = db.collections["feedback"].create_index
        assert feedback.await_count == 2
        feedback.assert_any_await([("session_id", 1), ("submitted_at", -1)])
        db.collections["settings"].create_index.assert_not_awaited()
