import logging
from typing import List, Optional

from fastapi import Depends, FastAPI, HTTPException

from . import crud
from .config import seed_demo_data_enabled, setup_logging
from .db import db, ensure_indexes, get_db
from .demo import seed_demo_data
from .importer import parse_participants, parse_sessions
from .models import Feedback, Participant, Session
from .questionnaire import CATEGORIES, EVALUATION_QUESTIONS, SECTION_TITLES, default_answers
from .routes.dashboard import router as dashboard_router
from .routes.exports import router as export_router
from .routes.reports import router as reports_router
from .schemas import BulkImportIn, EventTitleIn, FeedbackIn, ParticipantIn, SessionIn

setup_logging()
logger = logging.getLogger(__name__)

app = FastAPI(title="Feedback Desk (Mongo)", version="1.0.0")

app.include_router(dashboard_router, prefix="/api", tags=["Dashboard"])
app.include_router(reports_router, prefix="/api", tags=["Reports"])
app.include_router(export_router, prefix="/api", tags=["Export"])


@app.on_event("startup")
async def on_startup():
    try:
        await ensure_indexes()
        if seed_demo_data_enabled():
            await seed_demo_data(db)
    except Exception as e:
        logger.warning(f"Could not connect to MongoDB/ensure indexes: {e}")


# ---------- Event ----------
@app.get("/api/event")
async def api_get_event(db=Depends(get_db)):
    return {"title": await crud.get_event_title(db)}


@app.put("/api/event")
async def api_update_event(payload: EventTitleIn, db=Depends(get_db)):
    return {"title": await crud.set_event_title(db, payload.title)}


# ---------- Sessions ----------
@app.get("/api/sessions", response_model=List[Session])
async def api_list_sessions(db=Depends(get_db)):
    return await crud.list_sessions(db)


@app.post("/api/sessions", response_model=Session, status_code=201)
async def api_create_session(payload: SessionIn, db=Depends(get_db)):
    rows = await crud.create_sessions(db, [payload])
    return rows[0]


@app.post("/api/sessions/import")
async def api_import_sessions(payload: BulkImportIn, db=Depends(get_db)):
    result = parse_sessions(payload.text)
    rows = await crud.create_sessions(db, result.items)
    return {"ok": True, "count": len(rows), "skipped_lines": result.skipped, "sessions": rows}


@app.get("/api/sessions/{session_id}", response_model=Session)
async def api_get_session(session_id: str, db=Depends(get_db)):
    session = await crud.get_session(db, session_id)
    if session is None:
        raise HTTPException(status_code=404, detail="Session not found")
    return session


@app.put("/api/sessions/{session_id}", response_model=Session)
async def api_update_session(session_id: str, payload: SessionIn, db=Depends(get_db)):
    session = await crud.update_session(db, session_id, payload)
    if session is None:
        raise HTTPException(status_code=404, detail="Session not found")
    return session


@app.delete("/api/sessions/{session_id}")
async def api_delete_session(session_id: str, db=Depends(get_db)):
    if not await crud.delete_session(db, session_id):
        raise HTTPException(status_code=404, detail="Session not found")
    return {"ok": True, "id": session_id}


# ---------- Participants ----------
@app.get("/api/participants", response_model=List[Participant])
async def api_list_participants(db=Depends(get_db)):
    return await crud.list_participants(db)


@app.post("/api/participants", response_model=Participant, status_code=201)
async def api_create_participant(payload: ParticipantIn, db=Depends(get_db)):
    rows = await crud.create_participants(db, [payload])
    return rows[0]


@app.post("/api/participants/import")
async def api_import_participants(payload: BulkImportIn, db=Depends(get_db)):
    result = parse_participants(payload.text)
    rows = await crud.create_participants(db, result.items)
    return {"ok": True, "count": len(rows), "skipped_lines": result.skipped, "participants": rows}


@app.get("/api/participants/{participant_id}", response_model=Participant)
async def api_get_participant(participant_id: str, db=Depends(get_db)):
    participant = await crud.get_participant(db, participant_id)
    if participant is None:
        raise HTTPException(status_code=404, detail="Participant not found")
    return participant


@app.put("/api/participants/{participant_id}", response_model=Participant)
async def api_update_participant(participant_id: str, payload: ParticipantIn, db=Depends(get_db)):
    participant = await crud.update_participant(db, participant_id, payload)
    if participant is None:
        raise HTTPException(status_code=404, detail="Participant not found")
    return participant


@app.delete("/api/participants/{participant_id}")
async def api_delete_participant(participant_id: str, db=Depends(get_db)):
    if not await crud.delete_participant(db, participant_id):
        raise HTTPException(status_code=404, detail="Participant not found")
    return {"ok": True, "id": participant_id}


# ---------- Feedback ----------
@app.get("/api/questionnaire")
async def api_questionnaire():
    return {
        "sections": [
            {
                "category": category.value,
                "title": SECTION_TITLES[category],
                "questions": [
                    {"index": q.index, "text": q.text, "options": list(q.options)}
                    for q in EVALUATION_QUESTIONS[category]
                ],
            }
            for category in CATEGORIES
        ],
        "default_answers": default_answers(),
    }


@app.post("/api/feedback", response_model=Feedback, status_code=201)
async def api_create_feedback(payload: FeedbackIn, db=Depends(get_db)):
    if await crud.get_session(db, payload.session_id) is None:
        raise HTTPException(status_code=404, detail="Session not found")
    if await crud.get_participant(db, payload.participant_id) is None:
        raise HTTPException(status_code=404, detail="Participant not found")
    return await crud.create_feedback(db, payload)


@app.get("/api/feedback", response_model=List[Feedback])
async def api_list_feedback(session_id: Optional[str] = None, db=Depends(get_db)):
    return await crud.list_feedback(db, session_id=session_id)
