import sqlite3

import pytest

from conftest import BOT_ID, FakeAIClient, make_card_message, make_reply
from core import texts
from database import create_exercise, get_exercise, get_statistics, update_preferences
from services.exercise_service import BroadcastError, ExerciseService

ACCOUNT = "1001"


def _as_delivered(card):
    # Telegram returns the card's plain text, markup stripped.
    return make_card_message(f"{card.title}\n{card.body}")


@pytest.mark.asyncio
async def test_issue_then_answer_records_score(temp_db):
    for n in range(6):
        create_exercise(f"ダミー{n}", "beginner", "テスト")

    ai = FakeAIClient(exercise_text="私は毎朝コーヒーを飲みます。")
    service = ExerciseService(ai)

    issued = await service.issue_for_account(ACCOUNT)
    assert issued.ok
    assert issued.exercise_id == 7
    assert issued.card.title == "📝 英作文問題 #7"
    assert issued.card.body == "「私は毎朝コーヒーを飲みます。」"
    assert ai.generate_calls == [("日常会話", "intermediate")]

    hook_calls = []

    async def on_correlated():
        hook_calls.append(True)

    reply = make_reply("I drink coffee every morning.", _as_delivered(issued.card))
    outcome = await service.evaluate_reply(reply, BOT_ID, on_correlated=on_correlated)

    assert outcome is not None
    assert outcome.exercise_id == 7
    assert outcome.score == 85
    assert outcome.recorded is True
    assert outcome.error_text is None
    assert outcome.card.title == "👍 回答評価"
    assert hook_calls == [True]
    assert ai.evaluate_calls == [(get_exercise(7).prompt_text, "I drink coffee every morning.")]

    stats = get_statistics(ACCOUNT)
    assert stats.total_answers == 1
    assert stats.highest_score == 85


@pytest.mark.asyncio
async def test_issue_uses_stored_preferences(temp_db):
    update_preferences(ACCOUNT, "advanced", "旅行")
    ai = FakeAIClient()
    issued = await ExerciseService(ai).issue_for_account(ACCOUNT)

    assert ai.generate_calls == [("旅行", "advanced")]
    exercise = get_exercise(issued.exercise_id)
    assert (exercise.theme, exercise.difficulty) == ("旅行", "advanced")


@pytest.mark.asyncio
async def test_generation_failure_shows_error_and_stores_nothing(temp_db):
    service = ExerciseService(FakeAIClient(fail_generation=True))

    issued = await service.issue_for_account(ACCOUNT)

    assert not issued.ok
    assert issued.error_text == texts.ERR_GENERATION_FAILED
    assert get_exercise(1) is None


@pytest.mark.asyncio
async def test_evaluation_failure_records_nothing(temp_db):
    exercise_id = create_exercise("犬を飼っています。", "beginner", "動物")
    service = ExerciseService(FakeAIClient(fail_evaluation=True))
    reply = make_reply("I have a dog.", make_card_message(f"📝 英作文問題 #{exercise_id}\n「犬を飼っています。」"))

    outcome = await service.evaluate_reply(reply, BOT_ID)

    assert outcome.card is None
    assert outcome.error_text == texts.ERR_EVALUATION_FAILED
    assert outcome.recorded is False
    assert get_statistics(ACCOUNT).total_answers == 0


@pytest.mark.asyncio
async def test_uncorrelated_reply_is_silent(temp_db):
    ai = FakeAIClient()
    service = ExerciseService(ai)
    hook_calls = []

    async def on_correlated():
        hook_calls.append(True)

    unknown = make_reply("hello", make_card_message("📝 英作文問題 #404\n「x」"))
    assert await service.evaluate_reply(unknown, BOT_ID, on_correlated=on_correlated) is None
    assert hook_calls == []
    assert ai.evaluate_calls == []


@pytest.mark.asyncio
async def test_failed_insert_still_shows_card_with_id_zero(temp_db, monkeypatch):
    monkeypatch.setattr("services.exercise_service.create_exercise", lambda *args: None)
    issued = await ExerciseService(FakeAIClient()).issue_for_account(ACCOUNT)

    assert issued.ok
    assert issued.exercise_id == 0
    assert issued.card.title == "📝 英作文問題 #0"


@pytest.mark.asyncio
async def test_scheduled_issue_uses_defaults(temp_db):
    ai = FakeAIClient()
    issued = await ExerciseService(ai).issue_scheduled()

    assert ai.generate_calls == [("日常会話", "intermediate")]
    assert get_exercise(issued.exercise_id) is not None


@pytest.mark.asyncio
async def test_scheduled_issue_raises_on_failures(temp_db, monkeypatch):
    with pytest.raises(BroadcastError):
        await ExerciseService(FakeAIClient(fail_generation=True)).issue_scheduled()

    monkeypatch.setattr("services.exercise_service.create_exercise", lambda *args: None)
    with pytest.raises(BroadcastError):
        await ExerciseService(FakeAIClient()).issue_scheduled()


def _unreachable_store():
    raise sqlite3.OperationalError("unable to open database file")


@pytest.mark.asyncio
async def test_answer_store_outage_still_returns_evaluation(temp_db, monkeypatch):
    exercise_id = create_exercise("犬を飼っています。", "beginner", "動物")
    monkeypatch.setattr("database.repositories.answer_repository.get_connection", _unreachable_store)
    reply = make_reply("I have a dog.", make_card_message(f"📝 英作文問題 #{exercise_id}\n「犬を飼っています。」"))

    outcome = await ExerciseService(FakeAIClient()).evaluate_reply(reply, BOT_ID)

    assert outcome.card is not None
    assert outcome.score == 85
    assert outcome.recorded is False


@pytest.mark.asyncio
async def test_exercise_store_outage_still_shows_card(temp_db, monkeypatch):
    monkeypatch.setattr("database.repositories.exercise_repository.get_connection", _unreachable_store)

    issued = await ExerciseService(FakeAIClient()).issue_for_account(ACCOUNT)

    assert issued.ok
    assert issued.exercise_id == 0
    assert issued.card.title == "📝 英作文問題 #0"
