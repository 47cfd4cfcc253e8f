"""Tests for request validation and the generated report model."""

import pytest
from pydantic import ValidationError

from feedbackdesk.questionnaire import default_answers
from feedbackdesk.schemas import AIInsight, FeedbackIn, ParticipantIn, SessionIn


def _form():
    answers = default_answers()
    return {"session_id": "s1", "participant_id": "p1", "scores": answers, "comments": "  Nice  "}


class TestFeedbackIn:

    def test_default_answers_need_choices_picked(self):
        with pytest.raises(ValidationError) as exc:
            FeedbackIn.model_validate(_form())
        assert "must pick one of Too Basic, Appropriate, Too Advanced" in str(exc.value)

    def test_valid_form(self):
        data = _form()
        for a in data["scores"]:
            if (a["category"], a["question_id"]) in {("material", 3), ("overall", 1)}:
                a["score"] = 2
        form = FeedbackIn.model_validate(data)

        assert len(form.scores) == 18
        labels = {(s.category.value, s.question_id): s.text_value for s in form.scores if s.text_value}
        assert labels == {("material", 3): "Appropriate", ("overall", 1): "No"}

    def test_missing_answer_rejected(self):
        data = _form()
        data["scores"] = data["scores"][:-1]
        with pytest.raises(ValidationError) as exc:
            FeedbackIn.model_validate(data)
        assert "unanswered questions: overall/1" in str(exc.value)

    def test_duplicate_answer_rejected(self):
        data = _form()
        data["scores"].append(dict(data["scores"][0]))
        with pytest.raises(ValidationError):
            FeedbackIn.model_validate(data)

    def test_infinite_score_rejected(self):
        data = _form()
        data["scores"][3]["score"] = float("inf")
        with pytest.raises(ValidationError):
            FeedbackIn.model_validate(data)

    def test_rating_out_of_scale_rejected(self):
        data = _form()
        data["scores"][0]["score"] = 6
        with pytest.raises(ValidationError):
            FeedbackIn.model_validate(data)


def test_session_in_accepts_blank_email():
    session = SessionIn(title="Workshop", date="2024-11-20", start_time="09:00", end_time="10:30",
                        presenter_name="Dr. Aris")
    assert session.presenter_email == ""


def test_session_in_rejects_bad_time():
    with pytest.raises(ValidationError):
        SessionIn(title="Workshop", date="2024-11-20", start_time="9am", end_time="10:30",
                  presenter_name="Dr. Aris")


def test_participant_in_rejects_bad_email():
    with pytest.raises(ValidationError):
        ParticipantIn(name="Alice", email="not-an-email")


def test_ai_insight_reads_camel_case_and_dumps_snake_case():
    insight = AIInsight.model_validate({
        "sessionId": "s1",
        "strengths": [],
        "weaknesses": [],
        "recommendations": [],
        "overallSummary": "Fine.",
        "categoryAnalysis": [
            {"category": "material", "score": "4.00", "analysis": "a", "detailedRecommendation": "r"}
        ],
        "futureImprovements": {"material": "m", "delivery": "d", "engagement": "e"},
    })

    dumped = insight.model_dump()
    assert dumped["session_id"] == "s1"
    assert dumped["category_analysis"][0]["detailed_recommendation"] == "r"
