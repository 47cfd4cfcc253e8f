import logging
from typing import Dict

from fastapi import APIRouter, Depends, HTTPException

from .. import crud
from ..db import get_db
from ..exceptions import AnalysisInterruptedError, NoEvaluationsError
from ..schemas import AIInsight, ReportStatus
from ..services.report_service import ReportService

logger = logging.getLogger(__name__)

router = APIRouter()


class ReportTracker:
    """Per-session idle -> loading -> success/error state of report requests."""

    def __init__(self):
        self._states: Dict[str, ReportStatus] = {}

    def get(self, session_id: str) -> ReportStatus:
        return self._states.get(session_id) or ReportStatus(session_id=session_id)

    def is_loading(self, session_id: str) -> bool:
        return self.get(session_id).state == "loading"

    def start(self, session_id: str) -> None:
        self._states[session_id] = ReportStatus(session_id=session_id, state="loading")

    def succeed(self, session_id: str, report: AIInsight) -> None:
        self._states[session_id] = ReportStatus(session_id=session_id, state="success", report=report)

    def fail(self, session_id: str, message: str) -> None:
        self._states[session_id] = ReportStatus(session_id=session_id, state="error", error=message)


tracker = ReportTracker()


def get_report_service() -> ReportService:
    try:
        return ReportService()
    except ValueError as e:
        raise HTTPException(status_code=503, detail=str(e))


@router.post("/sessions/{session_id}/report", response_model=AIInsight)
async def create_session_report(session_id: str, db=Depends(get_db)):
    session = await crud.get_session(db, session_id)
    if session is None:
        raise HTTPException(status_code=404, detail="Session not found")
    if tracker.is_loading(session_id):
        raise HTTPException(status_code=409, detail="A report for this session is already being generated")

    feedback_list = await crud.list_feedback(db, session_id=session_id)
    if not feedback_list:
        message = str(NoEvaluationsError())
        tracker.fail(session_id, message)
        raise HTTPException(status_code=400, detail=message)

    service = get_report_service()
    tracker.start(session_id)
    try:
        report = await service.generate_session_report(session, feedback_list)
    except AnalysisInterruptedError as e:
        logger.warning("Report for session %s failed: %s", session_id, e.__cause__)
        tracker.fail(session_id, str(e))
        raise HTTPException(status_code=502, detail=str(e))
    except Exception:
        logger.exception("Report for session %s crashed", session_id)
        message = str(AnalysisInterruptedError())
        tracker.fail(session_id, message)
        raise HTTPException(status_code=502, detail=message)

    tracker.succeed(session_id, report)
    return report


@router.get("/sessions/{session_id}/report/status", response_model=ReportStatus)
async def session_report_status(session_id: str):
    return tracker.get(session_id)
