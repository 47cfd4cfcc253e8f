from typing import Optional

from fastapi import APIRouter, Depends

from .. import analytics, crud
from ..analytics import DashboardMode, DashboardView
from ..db import get_db
from ..questionnaire import Category

router = APIRouter()


@router.get("/dashboard", response_model=DashboardView)
async def get_dashboard(mode: DashboardMode = DashboardMode.OVERALL, value: Optional[str] = None, db=Depends(get_db)):
    snapshot = await crud.load_snapshot(db)
    return analytics.dashboard(snapshot, mode, value)


@router.get("/sessions/{session_id}/stats")
async def get_session_stats(session_id: str, db=Depends(get_db)):
    feedback_list = await crud.list_feedback(db, session_id=session_id)
    stats = analytics.overall_stats(feedback_list)
    return {
        "session_id": session_id,
        "feedback_count": len(feedback_list),
        "rating": analytics.session_rating(feedback_list),
        "stats": stats,
        "status": analytics.classify_status(stats[Category.OVERALL]) if stats else None,
    }
