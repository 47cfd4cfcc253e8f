import datetime as dt
from typing import List, Literal, Optional, Union

from pydantic import AliasGenerator, BaseModel, ConfigDict, EmailStr, Field, model_validator
from pydantic.alias_generators import to_camel

from .questionnaire import SPECIAL_CHOICES, Category, choice_label, question_keys

TIME_PATTERN = r"^\d{2}:\d{2}$"


class EventTitleIn(BaseModel):
    title: str = Field(min_length=1, max_length=200)


class SessionIn(BaseModel):
    title: str = Field(min_length=1, max_length=200)
    date: dt.date
    start_time: str = Field(pattern=TIME_PATTERN)
    end_time: str = Field(pattern=TIME_PATTERN)
    presenter_name: str = Field(min_length=1, max_length=120)
    presenter_email: Union[EmailStr, Literal[""]] = ""
    presenter_phone: Optional[str] = Field(default=None, max_length=30)
    location: str = Field(default="", max_length=160)
    material_url: Optional[str] = Field(default=None, max_length=500)


class ParticipantIn(BaseModel):
    name: str = Field(min_length=1, max_length=120)
    email: Union[EmailStr, Literal[""]] = ""
    phone: Optional[str] = Field(default=None, max_length=30)


class BulkImportIn(BaseModel):
    text: str = Field(max_length=200_000)


class QuestionFeedbackIn(BaseModel):
    category: Category
    question_id: int = Field(ge=0)
    score: Optional[float] = Field(default=None, allow_inf_nan=False)
    text_value: Optional[str] = Field(default=None, max_length=60)


class FeedbackIn(BaseModel):
    session_id: str = Field(min_length=1)
    participant_id: str = Field(min_length=1)
    scores: List[QuestionFeedbackIn]
    comments: str = Field(default="", max_length=2000)

    @model_validator(mode="after")
    def check_complete_form(self):
        expected = question_keys()
        seen = [(s.category, s.question_id) for s in self.scores]
        if len(seen) != len(set(seen)):
            raise ValueError("each question may be answered only once")
        missing = [f"{c.value}/{i}" for c, i in expected if (c, i) not in seen]
        if missing:
            raise ValueError(f"unanswered questions: {', '.join(missing)}")
        unknown = [f"{c.value}/{i}" for c, i in seen if (c, i) not in expected]
        if unknown:
            raise ValueError(f"unknown questions: {', '.join(unknown)}")

        for answer in self.scores:
            options = SPECIAL_CHOICES.get((answer.category, answer.question_id))
            if options:
                label = choice_label(answer.category, answer.question_id, answer.score)
                if label is None:
                    raise ValueError(
                        f"{answer.category.value}/{answer.question_id} must pick one of {', '.join(options)}"
                    )
                answer.text_value = label
            elif answer.score not in (1, 2, 3, 4, 5):
                raise ValueError(f"{answer.category.value}/{answer.question_id} must be rated 1-5")
        # keep questionnaire order regardless of submission order
        self.scores.sort(key=lambda s: expected.index((s.category, s.question_id)))
        return self


# Generated report. The model answers in camelCase; we serialize snake_case.
_camel_in = ConfigDict(
    alias_generator=AliasGenerator(validation_alias=to_camel),
    populate_by_name=True,
)


class CategoryInsight(BaseModel):
    model_config = _camel_in

    category: str
    score: str
    analysis: str
    detailed_recommendation: str


class FutureImprovements(BaseModel):
    model_config = _camel_in

    material: str
    delivery: str
    engagement: str


class AIInsight(BaseModel):
    model_config = _camel_in

    session_id: str
    strengths: List[str]
    weaknesses: List[str]
    recommendations: List[str]
    overall_summary: str
    category_analysis: List[CategoryInsight]
    future_improvements: FutureImprovements


class ReportStatus(BaseModel):
    session_id: str
    state: Literal["idle", "loading", "success", "error"] = "idle"
    report: Optional[AIInsight] = None
    error: Optional[str] = None
