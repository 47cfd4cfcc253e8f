"""
Session report synthesis.

Builds a prompt from a session's scores and comments and asks Gemini (through
its OpenAI compatibility endpoint) for a report constrained to a JSON schema.
"""

import json
import logging
from typing import Dict, List, Optional, Sequence

from openai import AsyncOpenAI, OpenAIError
from pydantic import ValidationError

from ..analytics import round_half_up
from ..config import get_gemini_api_key, get_gemini_model
from ..exceptions import AnalysisInterruptedError, NoEvaluationsError
from ..models import Feedback, Session
from ..questionnaire import CATEGORIES, Category
from ..schemas import AIInsight

logger = logging.getLogger(__name__)

MIN_COMMENT_LENGTH = 5

_string_list = {"type": "array", "items": {"type": "string"}}

AI_INSIGHT_SCHEMA = {
    "type": "object",
    "properties": {
        "sessionId": {"type": "string"},
        "strengths": _string_list,
        "weaknesses": _string_list,
        "recommendations": _string_list,
        "overallSummary": {"type": "string"},
        "categoryAnalysis": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {
                    "category": {"type": "string"},
                    "score": {"type": "string"},
                    "analysis": {"type": "string"},
                    "detailedRecommendation": {"type": "string"},
                },
                "required": ["category", "score", "analysis", "detailedRecommendation"],
            },
        },
        "futureImprovements": {
            "type": "object",
            "properties": {
                "material": {"type": "string"},
                "delivery": {"type": "string"},
                "engagement": {"type": "string"},
            },
            "required": ["material", "delivery", "engagement"],
        },
    },
    "required": [
        "sessionId",
        "strengths",
        "weaknesses",
        "recommendations",
        "overallSummary",
        "categoryAnalysis",
        "futureImprovements",
    ],
}


def report_category_averages(feedback_list: Sequence[Feedback]) -> Dict[Category, str]:
    """Plain mean of every answer per category, formatted to two decimals.

    Unlike analytics.category_average this keeps the choice questions in the
    mean; reports have always been generated from these numbers.
    """
    averages = {}
    for category in CATEGORIES:
        values = [s.score for f in feedback_list for s in f.scores if s.category == category]
        averages[category] = f"{round_half_up(sum(values) / len(values)):.2f}" if values else "0.00"
    return averages


def collect_comments(feedback_list: Sequence[Feedback]) -> str:
    return "\n".join(
        f'"{f.comments}"' for f in feedback_list if len(f.comments) > MIN_COMMENT_LENGTH
    )


def build_report_prompt(session: Session, averages: Dict[Category, str], comments: str) -> str:
    return f"""
Conduct a comprehensive training session analysis for: "{session.title}" led by {session.presenter_name} at {session.location}.

QUANTITATIVE DATA (Average scores 1-5 across metrics):
- Material Quality (Structure, Relevance, Depth): {averages[Category.MATERIAL]}
- Presenter Competence (Clarity, Interaction, Time Mgmt): {averages[Category.PRESENTER]}
- Engagement Index (Methods, Pace): {averages[Category.ENGAGEMENT]}
- Learning Outcomes (Application, Knowledge Gain): {averages[Category.OUTCOMES]}
- Logistics (Timing, Environment): {averages[Category.LOGISTICS]}
- Overall Rating: {averages[Category.OVERALL]}

QUALITATIVE FEEDBACK (Participant Comments):
{comments}

REQUIRED OUTPUT:
For EACH of the 6 categories (Material, Presenter, Engagement, Outcomes, Logistics, Overall), provide:
1. A specific analysis based on the scores and comments.
2. A detailed recommendation to improve that specific area.

Also provide:
- Top 3 General Strengths.
- Top 3 General Weaknesses.
- An executive summary.
- Future improvement plans for Material, Delivery, and Engagement.
""".strip()


class ReportService:
    """Gemini report generation via the OpenAI SDK"""

    GEMINI_BASE_URL = "https://generativelanguage.googleapis.com/v1beta/openai/"

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        client: Optional[AsyncOpenAI] = None,
    ):
        self.model = model or get_gemini_model()
        if client is not None:
            self.client = client
            return

        api_key = api_key or get_gemini_api_key()
        if not api_key:
            raise ValueError("Gemini API key not configured")
        self.client = AsyncOpenAI(api_key=api_key, base_url=self.GEMINI_BASE_URL)

    def _messages(self, session: Session, feedback_list: Sequence[Feedback]) -> List[dict]:
        prompt = build_report_prompt(
            session, report_category_averages(feedback_list), collect_comments(feedback_list)
        )
        return [{"role": "user", "content": prompt}]

    async def generate_session_report(self, session: Session, feedback_list: Sequence[Feedback]) -> AIInsight:
        """
        Generate the narrative report for one session.

        Args:
            session: Session being analysed
            feedback_list: Feedback already filtered to this session

        Raises:
            NoEvaluationsError: feedback_list is empty; nothing is sent
            AnalysisInterruptedError: the call or the response parsing failed
        """
        if not feedback_list:
            raise NoEvaluationsError()

        logger.info(
            "Requesting report for session %s from %s (%d evaluations)",
            session.id, self.model, len(feedback_list),
        )
        try:
            response = await self.client.chat.completions.create(
                model=self.model,
                messages=self._messages(session, feedback_list),
                response_format={
                    "type": "json_schema",
                    "json_schema": {"name": "ai_insight", "schema": AI_INSIGHT_SCHEMA},
                },
            )
            payload = json.loads(response.choices[0].message.content or "{}")
            payload["sessionId"] = session.id
            payload.pop("session_id", None)
            return AIInsight.model_validate(payload)
        except (OpenAIError, json.JSONDecodeError, ValidationError, IndexError, AttributeError, TypeError) as e:
            logger.error(f"Report generation failed for session {session.id}: {str(e)}")
            raise AnalysisInterruptedError() from e
