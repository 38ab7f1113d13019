import datetime
from dataclasses import dataclass

from core.texts import DEFAULT_DIFFICULTY, DEFAULT_THEME


def _to_datetime(value) -> datetime.datetime | None:
    if value is None:
        return None
    if isinstance(value, datetime.datetime):
        return value
    raw = str(value).strip()
    if not raw:
        return None
    try:
        return datetime.datetime.fromisoformat(raw.replace("Z", "+00:00"))
    except ValueError:
        return None


@dataclass
class Preferences:
    account_id: str
    difficulty: str = DEFAULT_DIFFICULTY
    theme: str = DEFAULT_THEME
    schedule_enabled: bool = True
    created_at: datetime.datetime | None = None

    @classmethod
    def from_row(cls, row) -> "Preferences":
        return cls(
            account_id=str(row["account_id"]),
            difficulty=row["difficulty"],
            theme=row["theme"],
            schedule_enabled=bool(row["schedule_enabled"]),
            created_at=_to_datetime(row["created_at"]),
        )


@dataclass
class Exercise:
    id: int
    prompt_text: str
    difficulty: str
    theme: str
    created_at: datetime.datetime | None = None

    @classmethod
    def from_row(cls, row) -> "Exercise":
        return cls(
            id=int(row["id"]),
            prompt_text=row["prompt_text"],
            difficulty=row["difficulty"],
            theme=row["theme"],
            created_at=_to_datetime(row["created_at"]),
        )


@dataclass
class UserStats:
    total_answers: int = 0
    average_score: float = 0.0
    highest_score: int = 0
    answers_today: int = 0
