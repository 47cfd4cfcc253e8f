"""
Shared fixtures for feedbackdesk tests.
"""
import datetime as dt

import pytest

from feedbackdesk.models import Feedback, QuestionFeedback, Session
from feedbackdesk.questionnaire import SPECIAL_CHOICES, question_keys


def _feedback(feedback_id="f1", session_id="s1", participant_id="p1", rating=5,
              overrides=None, choices=None, comments=""):
    """Complete 18-answer feedback; every rating question gets `rating`.

    overrides: {(category, index): score} for individual answers
    choices: {(category, index): option position} for the two choice questions
    """
    overrides = overrides or {}
    choices = choices or {}
    scores = []
    for category, index in question_keys():
        options = SPECIAL_CHOICES.get((category, index))
        if options:
            position = choices.get((category, index), 1)
            scores.append(QuestionFeedback(category=category, question_id=index,
                                           score=position, text_value=options[position - 1]))
        else:
            scores.append(QuestionFeedback(category=category, question_id=index,
                                           score=overrides.get((category, index), rating)))
    return Feedback(id=feedback_id, session_id=session_id, participant_id=participant_id,
                    scores=scores, comments=comments)


def _session(session_id="s1", presenter_name="Dr. Sarah Miller", day=dt.date(2024, 11, 12),
             title="Opening Keynote", location="Grand Ballroom A"):
    return Session(id=session_id, title=title, date=day, start_time="09:00", end_time="10:00",
                   presenter_name=presenter_name, presenter_email="speaker@train.io",
                   location=location)


@pytest.fixture
def make_feedback():
    return _feedback


@pytest.fixture
def make_session():
    return _session
