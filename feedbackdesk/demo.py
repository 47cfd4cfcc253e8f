"""Demo sessions, participants and feedback for a fresh install."""

import datetime as dt
import logging
from typing import List

from .models import Feedback, Participant, QuestionFeedback, Session
from .questionnaire import Category, question_keys, SPECIAL_CHOICES

logger = logging.getLogger(__name__)

# what the demo forms answered for the two choice questions
_DEMO_CHOICES = {
    (Category.MATERIAL, 3): 2,
    (Category.OVERALL, 1): 1,
}


def demo_scores(rating: int) -> List[QuestionFeedback]:
    scores = []
    for category, index in question_keys():
        choice = _DEMO_CHOICES.get((category, index))
        if choice is None:
            scores.append(QuestionFeedback(category=category, question_id=index, score=rating))
        else:
            label = SPECIAL_CHOICES[(category, index)][choice - 1]
            scores.append(QuestionFeedback(category=category, question_id=index, score=choice, text_value=label))
    return scores


DEMO_SESSIONS = [
    Session(id="s1", title="Opening Keynote: Strategy 2025", date=dt.date(2024, 11, 12),
            start_time="09:00", end_time="10:00", presenter_name="Dr. Sarah Miller",
            presenter_email="s.miller@train.io", presenter_phone="+1234567890",
            location="Grand Ballroom A"),
    Session(id="s2", title="Advanced Workflow Optimization", date=dt.date(2024, 11, 12),
            start_time="10:30", end_time="12:00", presenter_name="Johnathan Wick",
            presenter_email="j.wick@train.io", presenter_phone="+1987654321",
            location="Tech Hub Room 4"),
    Session(id="s3", title="Leadership in Crisis Workshop", date=dt.date(2024, 11, 13),
            start_time="09:00", end_time="11:00", presenter_name="Marcus Aurelius",
            presenter_email="m.aurelius@train.io", presenter_phone="+1122334455",
            location="Executive Suite 2"),
]

DEMO_PARTICIPANTS = [
    Participant(id="p1", name="James Gordon", email="gordon@example.com", phone="+1000111222"),
    Participant(id="p2", name="Harvey Dent", email="dent@example.com", phone="+1000333444"),
    Participant(id="p3", name="Selina Kyle", email="kyle@example.com", phone="+1000555666"),
]

DEMO_FEEDBACK = [
    Feedback(id="f1", session_id="s1", participant_id="p1", scores=demo_scores(5),
             comments="Excellent start to the training. Very clear vision.",
             submitted_at=dt.datetime(2024, 11, 12, 10, 15, tzinfo=dt.timezone.utc)),
    Feedback(id="f2", session_id="s2", participant_id="p2", scores=demo_scores(4),
             comments="Technical aspects were handled well, pace was a bit fast.",
             submitted_at=dt.datetime(2024, 11, 12, 12, 30, tzinfo=dt.timezone.utc)),
]


async def seed_demo_data(db) -> bool:
    """Insert the demo records when the store holds no sessions; returns whether it did."""
    if await db["sessions"].count_documents({}) > 0:
        return False

    await db["sessions"].insert_many([s.model_dump(mode="json") for s in DEMO_SESSIONS])
    await db["participants"].insert_many([p.model_dump(mode="json") for p in DEMO_PARTICIPANTS])
    await db["feedback"].insert_many([f.model_dump(mode="json") for f in DEMO_FEEDBACK])
    logger.info("Seeded demo data: %d sessions, %d participants", len(DEMO_SESSIONS), len(DEMO_PARTICIPANTS))
    return True
