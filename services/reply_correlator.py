import asyncio
import enum
import logging
import re
from dataclasses import dataclass

from database.models import Exercise
from database.repositories.exercise_repository import get_exercise

MIN_CARD_TITLE_LENGTH = 10

_EXERCISE_ID_RE = re.compile(r"#([0-9]+)")


class CorrelationOutcome(enum.Enum):
    IGNORED = "ignored"
    NO_IDENTIFIER = "no_identifier"
    NOT_FOUND = "not_found"
    MATCHED = "matched"


@dataclass
class Correlation:
    outcome: CorrelationOutcome
    exercise_id: int = 0
    exercise: Exercise | None = None

    @property
    def matched(self) -> bool:
        return self.outcome is CorrelationOutcome.MATCHED


def extract_exercise_id(title: str) -> int:
    """Returns the id from the first ``#<digits>`` run in title, 0 if none."""
    match = _EXERCISE_ID_RE.search(title or "")
    if not match:
        return 0
    try:
        return int(match.group(1))
    except ValueError:
        return 0


def card_title(message) -> str:
    text = getattr(message, "text", None) or getattr(message, "caption", None) or ""
    lines = text.splitlines()
    return lines[0].strip() if lines else ""


def is_rendered_card(message) -> bool:
    """True when the message opens with the bold title line of a card."""
    if getattr(message, "text", None):
        entities = getattr(message, "entities", None)
    else:
        entities = getattr(message, "caption_entities", None)
    if not entities:
        return False
    first = entities[0]
    return first.type == "bold" and first.offset == 0


def _is_from(message, user_id: int) -> bool:
    author = getattr(message, "from_user", None)
    return author is not None and author.id == user_id


async def correlate(message, bot_id: int) -> Correlation:
    author = getattr(message, "from_user", None)
    if author is None or author.is_bot or author.id == bot_id:
        return Correlation(CorrelationOutcome.IGNORED)

    referenced = getattr(message, "reply_to_message", None)
    if referenced is None:
        return Correlation(CorrelationOutcome.IGNORED)
    if not _is_from(referenced, bot_id):
        return Correlation(CorrelationOutcome.IGNORED)
    if not is_rendered_card(referenced):
        return Correlation(CorrelationOutcome.IGNORED)

    title = card_title(referenced)
    if not title or len(title) < MIN_CARD_TITLE_LENGTH:
        return Correlation(CorrelationOutcome.IGNORED)

    exercise_id = extract_exercise_id(title)
    if exercise_id == 0:
        return Correlation(CorrelationOutcome.NO_IDENTIFIER)

    try:
        exercise = await asyncio.to_thread(get_exercise, exercise_id)
    except Exception as exc:
        logging.error("Error loading exercise #%d: %s", exercise_id, exc)
        exercise = None
    if exercise is None:
        logging.info("Reply references exercise #%d which is not in the store", exercise_id)
        return Correlation(CorrelationOutcome.NOT_FOUND, exercise_id=exercise_id)

    return Correlation(CorrelationOutcome.MATCHED, exercise_id=exercise_id, exercise=exercise)
