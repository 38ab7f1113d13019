import asyncio
import logging
from dataclasses import dataclass

from core import texts
from database.repositories.answer_repository import record_answer
from database.repositories.exercise_repository import create_exercise
from database.repositories.preference_repository import get_or_create_preferences
from services.ai_client import AIClient, GenerationError
from services.cards import Card, build_evaluation_card, build_exercise_card
from services.reply_correlator import CorrelationOutcome, correlate
from utils.ops_logging import log_structured


class BroadcastError(Exception):
    """A scheduled exercise could not be generated or persisted."""


@dataclass
class IssueResult:
    card: Card | None = None
    exercise_id: int = 0
    error_text: str | None = None

    @property
    def ok(self) -> bool:
        return self.card is not None


@dataclass
class EvaluationOutcome:
    card: Card | None = None
    exercise_id: int = 0
    score: int | None = None
    recorded: bool = False
    error_text: str | None = None


class ExerciseService:
    def __init__(self, ai_client: AIClient):
        self.ai = ai_client

    async def _generate_and_store(self, theme: str, difficulty: str) -> tuple[str, int | None]:
        prompt_text = await self.ai.generate_exercise(theme, difficulty)
        exercise_id = await asyncio.to_thread(create_exercise, prompt_text, difficulty, theme)
        return prompt_text, exercise_id

    async def issue_for_account(self, account_id: str) -> IssueResult:
        try:
            prefs = await asyncio.to_thread(get_or_create_preferences, account_id)
        except Exception as exc:
            logging.error(f"Error getting preferences for {account_id}: {exc}")
            return IssueResult(error_text=texts.ERR_GENERIC)

        try:
            prompt_text, exercise_id = await self._generate_and_store(prefs.theme, prefs.difficulty)
        except GenerationError as exc:
            logging.error(f"Error generating exercise for {account_id}: {exc}")
            return IssueResult(error_text=texts.ERR_GENERATION_FAILED)

        # A failed insert still shows the card; replies to "#0" never correlate.
        exercise_id = exercise_id or 0
        log_structured(
            "exercise_issued",
            account_id=account_id,
            exercise_id=exercise_id,
            theme=prefs.theme,
            difficulty=prefs.difficulty,
            persisted=exercise_id > 0,
        )
        card = build_exercise_card(exercise_id, prompt_text, prefs.theme, prefs.difficulty)
        return IssueResult(card=card, exercise_id=exercise_id)

    async def issue_scheduled(self) -> IssueResult:
        theme, difficulty = texts.DEFAULT_THEME, texts.DEFAULT_DIFFICULTY
        try:
            prompt_text, exercise_id = await self._generate_and_store(theme, difficulty)
        except GenerationError as exc:
            raise BroadcastError(f"generation failed: {exc}") from exc
        if not exercise_id:
            raise BroadcastError("exercise could not be saved")

        card = build_exercise_card(exercise_id, prompt_text, theme, difficulty)
        return IssueResult(card=card, exercise_id=exercise_id)

    async def evaluate_reply(self, message, bot_id: int, on_correlated=None) -> EvaluationOutcome | None:
        """
        Evaluates a reply to an exercise card. Returns None when the message
        is not a quiz answer at all. on_correlated, if given, is awaited once
        the exercise is found and before the AI request starts.
        """
        correlation = await correlate(message, bot_id)
        if not correlation.matched:
            if correlation.outcome is not CorrelationOutcome.IGNORED:
                logging.info("Reply not correlated: %s (exercise #%d)", correlation.outcome.value, correlation.exercise_id)
            return None

        exercise = correlation.exercise
        account_id = str(message.from_user.id)
        answer = message.text or ""

        if on_correlated is not None:
            try:
                await on_correlated()
            except Exception as exc:
                logging.warning(f"on_correlated hook failed: {exc}")

        try:
            result = await self.ai.evaluate_answer(exercise.prompt_text, answer)
        except GenerationError as exc:
            logging.error(f"Error evaluating answer on exercise #{exercise.id}: {exc}")
            return EvaluationOutcome(exercise_id=exercise.id, error_text=texts.ERR_EVALUATION_FAILED)

        recorded = await asyncio.to_thread(
            record_answer,
            account_id,
            exercise.id,
            answer,
            result.model_answer,
            result.score,
            result.feedback,
        )
        log_structured(
            "answer_evaluated",
            account_id=account_id,
            exercise_id=exercise.id,
            score=result.score,
            recorded=recorded,
        )
        card = build_evaluation_card(answer, result.score, result.feedback, result.model_answer)
        return EvaluationOutcome(card=card, exercise_id=exercise.id, score=result.score, recorded=recorded)
