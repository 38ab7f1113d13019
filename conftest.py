import dataclasses
from types import SimpleNamespace

import pytest

from database import connection, create_table
from services.ai_client import GenerationError
from services.evaluation_protocol import parse_evaluation_response

BOT_ID = 424242
USER_ID = 1001


@pytest.fixture
def temp_db(tmp_path, monkeypatch):
    patched = dataclasses.replace(
        connection.settings,
        db_backend="sqlite",
        db_path=str(tmp_path / "quiz_test.db"),
    )
    monkeypatch.setattr(connection, "settings", patched)
    create_table()
    return patched.db_path


class FakeAIClient:
    """Stands in for AIClient; records calls and replays canned replies."""

    def __init__(self, exercise_text="これはテストです", evaluation_text=None, fail_generation=False, fail_evaluation=False):
        self.exercise_text = exercise_text
        self.evaluation_text = evaluation_text or (
            "SCORE: 85\nMODEL_ANSWER: This is a test.\nFEEDBACK: よくできました！"
        )
        self.fail_generation = fail_generation
        self.fail_evaluation = fail_evaluation
        self.generate_calls = []
        self.evaluate_calls = []

    async def generate_exercise(self, theme, difficulty):
        self.generate_calls.append((theme, difficulty))
        if self.fail_generation:
            raise GenerationError("boom")
        return self.exercise_text

    async def evaluate_answer(self, source_text, answer):
        self.evaluate_calls.append((source_text, answer))
        if self.fail_evaluation:
            raise GenerationError("boom")
        return parse_evaluation_response(self.evaluation_text)


@pytest.fixture
def fake_ai():
    return FakeAIClient()


def make_user(user_id=USER_ID, is_bot=False):
    return SimpleNamespace(id=user_id, is_bot=is_bot)


def make_card_message(text, author_id=BOT_ID, rendered=True):
    """A bot message as Telegram delivers it; rendered cards open with a bold title entity."""
    entities = None
    if rendered and text:
        title = text.split("\n", 1)[0]
        entities = [SimpleNamespace(type="bold", offset=0, length=len(title.encode("utf-16-le")) // 2)]
    return SimpleNamespace(
        from_user=make_user(author_id, is_bot=True),
        text=text,
        entities=entities,
        caption=None,
        caption_entities=None,
        reply_to_message=None,
    )


def make_reply(text, referenced, user_id=USER_ID, is_bot=False):
    return SimpleNamespace(
        from_user=make_user(user_id, is_bot=is_bot),
        text=text,
        caption=None,
        reply_to_message=referenced,
    )
