"""Dashboard aggregation over feedback snapshots.

Everything here is a pure function of its arguments: inputs are read, never
mutated, and empty inputs come back as 0 / None instead of raising so the
API can render an explicit "no data" state.
"""

import datetime as dt
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum
from typing import Dict, Iterable, List, Optional, Sequence

from pydantic import BaseModel

from .models import Feedback, Session, Snapshot
from .questionnaire import CATEGORIES, RATING_SCALE, Category, is_special_choice

EXCELLENT_THRESHOLD = 4.2
SATISFACTORY_THRESHOLD = 3.5

RADAR_LABELS: Dict[Category, str] = {
    Category.MATERIAL: "Material",
    Category.PRESENTER: "Presenter",
    Category.ENGAGEMENT: "Engage",
    Category.OUTCOMES: "Learn",
    Category.LOGISTICS: "Logistics",
    Category.OVERALL: "Overall",
}


class Status(str, Enum):
    EXCELLENT = "Excellent"
    SATISFACTORY = "Satisfactory"
    CRITICAL = "Critical"


class DashboardMode(str, Enum):
    OVERALL = "overall"
    DAILY = "daily"
    SPEAKER = "speaker"


class SpeakerScore(BaseModel):
    name: str
    score: float


class RadarPoint(BaseModel):
    subject: str
    value: float


class DashboardView(BaseModel):
    mode: DashboardMode
    value: Optional[str] = None
    event_title: str = ""
    feedback_count: int
    stats: Optional[Dict[Category, float]] = None
    status: Optional[Status] = None
    radar: List[RadarPoint] = []
    rating_distribution: Dict[int, int]
    speaker_comparison: List[SpeakerScore] = []
    dates: List[dt.date] = []
    presenters: List[str] = []


def round_half_up(value: float, places: int = 2) -> float:
    """Round the exact binary value with ties going up, like JS toFixed."""
    quantum = Decimal(1).scaleb(-places)
    return float(Decimal(value).quantize(quantum, rounding=ROUND_HALF_UP))


def _mean(values: Sequence[float]) -> float:
    if not values:
        return 0
    return sum(values) / len(values)


def category_average(feedback: Feedback, category) -> float:
    category = Category(category)
    ratings = [
        s.score for s in feedback.scores
        if s.category == category and not is_special_choice(s.category, s.question_id)
    ]
    return _mean(ratings)


def overall_stats(feedback_list: Sequence[Feedback]) -> Optional[Dict[Category, float]]:
    if not feedback_list:
        return None
    return {
        category: round_half_up(_mean([category_average(f, category) for f in feedback_list]))
        for category in CATEGORIES
    }


def _filter_by_sessions(feedback_list: Iterable[Feedback], session_ids) -> List[Feedback]:
    session_ids = set(session_ids)
    return [f for f in feedback_list if f.session_id in session_ids]


def filter_feedback_by_date(feedback_list, sessions: Iterable[Session], day) -> List[Feedback]:
    if isinstance(day, str):
        try:
            day = dt.date.fromisoformat(day)
        except ValueError:
            return []
    return _filter_by_sessions(feedback_list, (s.id for s in sessions if s.date == day))


def filter_feedback_by_presenter(feedback_list, sessions: Iterable[Session], presenter_name: str) -> List[Feedback]:
    return _filter_by_sessions(
        feedback_list, (s.id for s in sessions if s.presenter_name == presenter_name)
    )


def _overall_rating(feedback: Feedback) -> float:
    entry = next(
        (s for s in feedback.scores if s.category == Category.OVERALL and s.question_id == 0),
        None,
    )
    return entry.score if entry else 0


def rating_distribution(feedback_list: Iterable[Feedback]) -> Dict[int, int]:
    buckets = {rating: 0 for rating in RATING_SCALE}
    for f in feedback_list:
        score = _overall_rating(f)
        if score in buckets:
            buckets[int(score)] += 1
    return buckets


def speaker_comparison(feedback_list: Iterable[Feedback], sessions: Iterable[Session]) -> List[SpeakerScore]:
    presenter_by_session = {s.id: s.presenter_name for s in sessions}
    groups: Dict[str, List[float]] = {}
    for f in feedback_list:
        name = presenter_by_session.get(f.session_id)
        if name is None:
            continue
        groups.setdefault(name, []).append(category_average(f, Category.OVERALL))

    ranked = [SpeakerScore(name=name, score=round_half_up(_mean(scores))) for name, scores in groups.items()]
    return sorted(ranked, key=lambda s: s.score, reverse=True)


def classify_status(average: float) -> Status:
    if average >= EXCELLENT_THRESHOLD:
        return Status.EXCELLENT
    if average >= SATISFACTORY_THRESHOLD:
        return Status.SATISFACTORY
    return Status.CRITICAL


def radar_series(stats: Optional[Dict[Category, float]]) -> List[RadarPoint]:
    if not stats:
        return []
    return [RadarPoint(subject=RADAR_LABELS[c], value=stats[c]) for c in CATEGORIES]


def session_rating(feedback_list: Sequence[Feedback]) -> float:
    """Mean headline rating (overall question 0) to one decimal."""
    if not feedback_list:
        return 0
    return round_half_up(_mean([_overall_rating(f) for f in feedback_list]), 1)


def event_dates(sessions: Iterable[Session]) -> List[dt.date]:
    return sorted({s.date for s in sessions})


def presenters(sessions: Iterable[Session]) -> List[str]:
    return sorted({s.presenter_name for s in sessions})


def dashboard(snapshot: Snapshot, mode=DashboardMode.OVERALL, value: Optional[str] = None) -> DashboardView:
    mode = DashboardMode(mode)
    feedback_list = list(snapshot.feedback)
    if mode == DashboardMode.DAILY:
        feedback_list = filter_feedback_by_date(feedback_list, snapshot.sessions, value or "")
    elif mode == DashboardMode.SPEAKER:
        feedback_list = filter_feedback_by_presenter(feedback_list, snapshot.sessions, value or "")

    stats = overall_stats(feedback_list)
    comparison = []
    if mode == DashboardMode.OVERALL:
        comparison = speaker_comparison(snapshot.feedback, snapshot.sessions)

    return DashboardView(
        mode=mode,
        value=value if mode != DashboardMode.OVERALL else None,
        event_title=snapshot.event_title,
        feedback_count=len(feedback_list),
        stats=stats,
        status=classify_status(stats[Category.OVERALL]) if stats else None,
        radar=radar_series(stats),
        rating_distribution=rating_distribution(feedback_list),
        speaker_comparison=comparison,
        dates=event_dates(snapshot.sessions),
        presenters=presenters(snapshot.sessions),
    )
