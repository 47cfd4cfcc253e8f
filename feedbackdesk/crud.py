"""Persistence boundary: every read and write of the Mongo collections goes through here."""

import logging
import uuid
from typing import Iterable, List, Optional

from .config import DEFAULT_EVENT_TITLE
from .models import Feedback, Participant, Session, Snapshot, now_utc
from .schemas import FeedbackIn, ParticipantIn, SessionIn

logger = logging.getLogger(__name__)

MAX_ROWS = 100000
EVENT_SETTINGS_ID = "event"


def new_id(prefix: str) -> str:
    return f"{prefix}-{uuid.uuid4().hex[:12]}"


def _doc(model) -> dict:
    return model.model_dump(mode="json")


async def _find(collection, query: dict, sort) -> List[dict]:
    cursor = collection.find(query, {"_id": 0}).sort(sort)
    return await cursor.to_list(length=MAX_ROWS)


# ---------- Event ----------
async def get_event_title(db) -> str:
    doc = await db["settings"].find_one({"_id": EVENT_SETTINGS_ID})
    return (doc or {}).get("title") or DEFAULT_EVENT_TITLE


async def set_event_title(db, title: str) -> str:
    title = title.strip()
    await db["settings"].update_one({"_id": EVENT_SETTINGS_ID}, {"$set": {"title": title}}, upsert=True)
    return title


# ---------- Sessions ----------
async def create_sessions(db, items: Iterable[SessionIn]) -> List[Session]:
    rows = [Session(id=new_id("s"), **data.model_dump(mode="json")) for data in items]
    if rows:
        await db["sessions"].insert_many([_doc(r) for r in rows])
        logger.info("Added %d session(s)", len(rows))
    return rows


async def list_sessions(db) -> List[Session]:
    docs = await _find(db["sessions"], {}, [("date", 1), ("start_time", 1)])
    return [Session.model_validate(d) for d in docs]


async def get_session(db, session_id: str) -> Optional[Session]:
    doc = await db["sessions"].find_one({"id": session_id}, {"_id": 0})
    return Session.model_validate(doc) if doc else None


async def update_session(db, session_id: str, data: SessionIn) -> Optional[Session]:
    row = Session(id=session_id, **data.model_dump(mode="json"))
    result = await db["sessions"].replace_one({"id": session_id}, _doc(row))
    return row if result.matched_count else None


async def delete_session(db, session_id: str) -> bool:
    # feedback for the session is left in place
    result = await db["sessions"].delete_one({"id": session_id})
    return result.deleted_count > 0


# ---------- Participants ----------
async def create_participants(db, items: Iterable[ParticipantIn]) -> List[Participant]:
    rows = [Participant(id=new_id("p"), **data.model_dump(mode="json")) for data in items]
    if rows:
        await db["participants"].insert_many([_doc(r) for r in rows])
        logger.info("Added %d participant(s)", len(rows))
    return rows


async def list_participants(db) -> List[Participant]:
    docs = await _find(db["participants"], {}, [("name", 1)])
    return [Participant.model_validate(d) for d in docs]


async def get_participant(db, participant_id: str) -> Optional[Participant]:
    doc = await db["participants"].find_one({"id": participant_id}, {"_id": 0})
    return Participant.model_validate(doc) if doc else None


async def update_participant(db, participant_id: str, data: ParticipantIn) -> Optional[Participant]:
    row = Participant(id=participant_id, **data.model_dump(mode="json"))
    result = await db["participants"].replace_one({"id": participant_id}, _doc(row))
    return row if result.matched_count else None


async def delete_participant(db, participant_id: str) -> bool:
    result = await db["participants"].delete_one({"id": participant_id})
    return result.deleted_count > 0


# ---------- Feedback ----------
async def create_feedback(db, data: FeedbackIn) -> Feedback:
    row = Feedback(
        id=new_id("f"),
        session_id=data.session_id,
        participant_id=data.participant_id,
        scores=[s.model_dump() for s in data.scores],
        comments=data.comments.strip(),
        submitted_at=now_utc(),
    )
    await db["feedback"].insert_one(_doc(row))
    logger.info("Feedback %s recorded for session %s", row.id, row.session_id)
    return row


async def list_feedback(db, session_id: Optional[str] = None) -> List[Feedback]:
    query = {"session_id": session_id} if session_id else {}
    docs = await _find(db["feedback"], query, [("submitted_at", -1)])
    return [Feedback.model_validate(d) for d in docs]


# ---------- Snapshot ----------
async def load_snapshot(db) -> Snapshot:
    return Snapshot(
        event_title=await get_event_title(db),
        sessions=tuple(await list_sessions(db)),
        participants=tuple(await list_participants(db)),
        feedback=tuple(await list_feedback(db)),
    )
