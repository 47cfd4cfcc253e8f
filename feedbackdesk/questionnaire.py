"""Fixed evaluation questionnaire used by every feedback form."""

import math
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional, Tuple


class Category(str, Enum):
    MATERIAL = "material"
    PRESENTER = "presenter"
    ENGAGEMENT = "engagement"
    OUTCOMES = "outcomes"
    LOGISTICS = "logistics"
    OVERALL = "overall"


CATEGORIES: List[Category] = list(Category)

# (category, question index) -> option labels. Answers to these questions carry
# the chosen option position (1-based) as score, not a 1-5 rating.
SPECIAL_CHOICES: Dict[Tuple[Category, int], Tuple[str, ...]] = {
    (Category.MATERIAL, 3): ("Too Basic", "Appropriate", "Too Advanced"),
    (Category.OVERALL, 1): ("Yes", "No", "Maybe"),
}

RATING_SCALE = (1, 2, 3, 4, 5)


@dataclass(frozen=True)
class Question:
    category: Category
    index: int
    text: str
    options: Tuple[str, ...] = ()

    @property
    def is_special_choice(self) -> bool:
        return bool(self.options)


_QUESTION_TEXTS: Dict[Category, List[str]] = {
    Category.MATERIAL: [
        "The training material was well-structured and organized.",
        "The content was relevant to my job / role.",
        "The material matched the stated learning objectives.",
        "The technical depth of the material was appropriate.",
    ],
    Category.PRESENTER: [
        "The resource person demonstrated strong subject knowledge.",
        "Concepts were explained clearly and effectively.",
        "The presenter encouraged interaction and questions.",
        "Time was managed effectively during the session.",
    ],
    Category.ENGAGEMENT: [
        "The session was engaging and maintained my interest.",
        "Teaching methods (examples, discussion, activities) were effective.",
        "The pace of the session was appropriate.",
    ],
    Category.OUTCOMES: [
        "I gained new knowledge or skills from this session.",
        "I can apply what I learned in my work.",
        "The session met my expectations.",
    ],
    Category.LOGISTICS: [
        "Session timing and duration were appropriate.",
        "Technical and organizational arrangements were satisfactory.",
    ],
    Category.OVERALL: [
        "Overall rating of this session",
        "Would you recommend this session to others?",
    ],
}

EVALUATION_QUESTIONS: Dict[Category, List[Question]] = {
    category: [
        Question(category, i, text, SPECIAL_CHOICES.get((category, i), ()))
        for i, text in enumerate(texts)
    ]
    for category, texts in _QUESTION_TEXTS.items()
}

QUESTION_COUNT = sum(len(qs) for qs in EVALUATION_QUESTIONS.values())

SECTION_TITLES: Dict[Category, str] = {
    Category.MATERIAL: "Section A: Material Quality",
    Category.PRESENTER: "Section B: Presenter Expertise",
    Category.ENGAGEMENT: "Section C: Delivery Flow",
    Category.OUTCOMES: "Section D: Value Gained",
    Category.LOGISTICS: "Section E: Logistics",
    Category.OVERALL: "Section F: Overall Recommendation",
}


def question(category, index: int) -> Question:
    try:
        category = Category(category)
    except ValueError:
        raise KeyError(f"unknown category {category!r}")
    questions = EVALUATION_QUESTIONS[category]
    if not 0 <= index < len(questions):
        raise KeyError(f"{category.value} has no question {index}")
    return questions[index]


def is_special_choice(category, index: int) -> bool:
    try:
        return (Category(category), index) in SPECIAL_CHOICES
    except ValueError:
        return False


def choice_label(category, index: int, score) -> Optional[str]:
    """Option label for a choice answer, None when the score doesn't map to one."""
    if not is_special_choice(category, index):
        return None
    options = SPECIAL_CHOICES[(Category(category), index)]
    if score is None or not math.isfinite(score) or not float(score).is_integer():
        return None
    position = int(score) - 1
    if 0 <= position < len(options):
        return options[position]
    return None


def question_keys() -> List[Tuple[Category, int]]:
    """Every (category, index) pair in questionnaire order."""
    return [(q.category, q.index) for cat in CATEGORIES for q in EVALUATION_QUESTIONS[cat]]


def default_answers() -> List[dict]:
    """Blank form: ratings start at 5, choice questions start unpicked."""
    return [
        {
            "category": category.value,
            "question_id": index,
            "score": None if is_special_choice(category, index) else 5,
            "text_value": None,
        }
        for category, index in question_keys()
    ]
