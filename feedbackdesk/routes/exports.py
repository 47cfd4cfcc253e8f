import csv
import io
from datetime import datetime
from typing import List

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import Response, StreamingResponse
from openpyxl import Workbook

from .. import analytics, crud
from ..db import get_db
from ..importer import PARTICIPANT_TEMPLATE_CSV, SESSION_TEMPLATE_CSV
from ..models import Snapshot
from ..questionnaire import CATEGORIES, Category, question_keys

router = APIRouter()

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


def feedback_header() -> List[str]:
    return (
        ["Feedback ID", "Session ID", "Session", "Participant", "Submitted At"]
        + [f"{c.value}_{i}" for c, i in question_keys()]
        + ["Comments"]
    )


def _answer_cell(answer):
    if answer.text_value:
        return answer.text_value
    return int(answer.score) if float(answer.score).is_integer() else answer.score


def feedback_rows(snapshot: Snapshot) -> List[list]:
    sessions = {s.id: s for s in snapshot.sessions}
    participants = {p.id: p for p in snapshot.participants}
    rows = []
    for f in snapshot.feedback:
        session = sessions.get(f.session_id)
        participant = participants.get(f.participant_id)
        answers = {(s.category, s.question_id): _answer_cell(s) for s in f.scores}
        rows.append(
            [
                f.id,
                f.session_id,
                session.title if session else "",
                participant.name if participant else "",
                f.submitted_at.isoformat(),
            ]
            + [answers.get(key, "") for key in question_keys()]
            + [f.comments]
        )
    return rows


def build_excel(snapshot: Snapshot) -> bytes:
    wb = Workbook()
    ws = wb.active
    ws.title = "Feedback"

    ws.append(feedback_header())
    for row in feedback_rows(snapshot):
        ws.append(row)

    summary = wb.create_sheet("Session Summary")
    summary.append(
        ["Date", "Session", "Presenter", "Evaluations", "Rating"]
        + [c.value.title() for c in CATEGORIES]
        + ["Status"]
    )
    for s in snapshot.sessions:
        feedback_list = snapshot.feedback_for(s.id)
        stats = analytics.overall_stats(feedback_list)
        summary.append(
            [s.date.isoformat(), s.title, s.presenter_name, len(feedback_list), analytics.session_rating(feedback_list)]
            + [stats[c] if stats else "" for c in CATEGORIES]
            + [analytics.classify_status(stats[Category.OVERALL]).value if stats else ""]
        )

    buf = io.BytesIO()
    wb.save(buf)
    return buf.getvalue()


@router.get("/export/feedback.csv")
async def export_feedback_csv(db=Depends(get_db)):
    snapshot = await crud.load_snapshot(db)

    buf = io.StringIO()
    w = csv.writer(buf)
    w.writerow(feedback_header())
    for row in feedback_rows(snapshot):
        w.writerow(row)
    buf.seek(0)
    return StreamingResponse(iter([buf.getvalue()]), media_type="text/csv")


@router.get("/export/feedback.xlsx")
async def export_feedback_xlsx(db=Depends(get_db)):
    snapshot = await crud.load_snapshot(db)
    if not snapshot.feedback:
        raise HTTPException(status_code=404, detail="No feedback found in database")

    filename = f"feedback_{datetime.now().strftime('%Y%m%d_%H%M%S')}.xlsx"
    return Response(
        content=build_excel(snapshot),
        media_type=XLSX_MEDIA_TYPE,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.get("/templates/sessions.csv")
async def session_template():
    return Response(
        content=SESSION_TEMPLATE_CSV,
        media_type="text/csv",
        headers={"Content-Disposition": 'attachment; filename="program_template.csv"'},
    )


@router.get("/templates/participants.csv")
async def participant_template():
    return Response(
        content=PARTICIPANT_TEMPLATE_CSV,
        media_type="text/csv",
        headers={"Content-Disposition": 'attachment; filename="participant_list_template.csv"'},
    )
