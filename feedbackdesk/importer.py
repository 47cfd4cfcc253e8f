"""Bulk import of sessions and participants pasted from a spreadsheet or CSV."""

import datetime as dt
import logging
import re
from dataclasses import dataclass, field
from typing import Callable, List

from pydantic import ValidationError

from .schemas import ParticipantIn, SessionIn

logger = logging.getLogger(__name__)

SESSION_TEMPLATE_CSV = (
    "Module Title,Presenter,Email,Phone,Date (YYYY-MM-DD),Start (HH:mm),End (HH:mm),Location\n"
    "Strategic Planning,Dr. Aris,aris@example.com,+123456789,2024-11-20,09:00,10:30,Room 101\n"
)

PARTICIPANT_TEMPLATE_CSV = (
    "Full Name,Email Address,Phone\n"
    "Alice Doe,alice@example.com,+123456789\n"
)

_SPLIT = re.compile(r"[,\t]")


@dataclass
class ImportResult:
    items: list = field(default_factory=list)
    skipped: List[int] = field(default_factory=list)  # 1-based line numbers


def _split(line: str) -> List[str]:
    return [part.strip() for part in _SPLIT.split(line)]


def _part(parts: List[str], i: int, default: str) -> str:
    return parts[i] if i < len(parts) and parts[i] else default


def _session_row(parts: List[str]) -> SessionIn:
    return SessionIn(
        title=_part(parts, 0, "Untitled"),
        presenter_name=_part(parts, 1, "Expert TBA"),
        presenter_email=_part(parts, 2, ""),
        presenter_phone=_part(parts, 3, "") or None,
        date=_part(parts, 4, dt.date.today().isoformat()),
        start_time=_part(parts, 5, "09:00"),
        end_time=_part(parts, 6, "10:00"),
        location=_part(parts, 7, "TBA"),
    )


def _participant_row(parts: List[str]) -> ParticipantIn:
    return ParticipantIn(name=parts[0], email=parts[1], phone=_part(parts, 2, "") or None)


def _parse(text: str, min_fields: int, build: Callable[[List[str]], object]) -> ImportResult:
    result = ImportResult()
    for lineno, line in enumerate(text.splitlines(), start=1):
        if not line.strip():
            continue
        parts = _split(line)
        if len(parts) < min_fields:
            result.skipped.append(lineno)
            continue
        try:
            result.items.append(build(parts))
        except ValidationError as e:
            logger.warning("Skipping import line %d: %s", lineno, e.errors()[0]["msg"])
            result.skipped.append(lineno)
    return result


def parse_sessions(text: str) -> ImportResult:
    """Title, presenter, email, phone, date, start, end, location per line."""
    return _parse(text, 4, _session_row)


def parse_participants(text: str) -> ImportResult:
    """Name, email and optional phone per line."""
    return _parse(text, 2, _participant_row)
