from dataclasses import dataclass, field
import datetime as dt
from typing import List, Optional, Tuple

from pydantic import BaseModel, Field

from .questionnaire import Category


def now_utc():
    return dt.datetime.now(dt.timezone.utc)


class Session(BaseModel):
    id: str
    title: str
    date: dt.date
    start_time: str = Field(pattern=r"^\d{2}:\d{2}$")
    end_time: str = Field(pattern=r"^\d{2}:\d{2}$")
    presenter_name: str
    presenter_email: str = ""
    presenter_phone: Optional[str] = None
    location: str = ""
    material_url: Optional[str] = None


class Participant(BaseModel):
    id: str
    name: str
    email: str = ""
    phone: Optional[str] = None


class QuestionFeedback(BaseModel):
    category: Category
    question_id: int = Field(ge=0)
    score: float  # choice position for special questions, 1-5 rating otherwise
    text_value: Optional[str] = None


class Feedback(BaseModel):
    id: str
    session_id: str
    participant_id: str
    scores: List[QuestionFeedback] = Field(default_factory=list)
    comments: str = ""
    submitted_at: dt.datetime = Field(default_factory=now_utc)


@dataclass(frozen=True)
class Snapshot:
    """Read-only view of the store handed to analytics and report code."""
    event_title: str = ""
    sessions: Tuple[Session, ...] = field(default_factory=tuple)
    participants: Tuple[Participant, ...] = field(default_factory=tuple)
    feedback: Tuple[Feedback, ...] = field(default_factory=tuple)

    def session(self, session_id: str) -> Optional[Session]:
        return next((s for s in self.sessions if s.id == session_id), None)

    def feedback_for(self, session_id: str) -> List[Feedback]:
        return [f for f in self.feedback if f.session_id == session_id]
