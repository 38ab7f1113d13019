import logging

from anthropic import APIError, AsyncAnthropic

from core.config import settings
from services.evaluation_protocol import EvaluationResult, parse_evaluation_response
from services.prompts import build_evaluation_prompt, build_generation_prompt

GENERATION_MAX_TOKENS = 200
EVALUATION_MAX_TOKENS = 500


class GenerationError(Exception):
    """The AI service call failed or returned nothing usable."""


class AIClient:
    def __init__(
        self,
        api_key: str | None = None,
        model: str | None = None,
        timeout: float | None = None,
        client: AsyncAnthropic | None = None,
    ):
        self.model = model or settings.ai_model
        self._client = client or AsyncAnthropic(
            api_key=api_key or settings.ai_api_key,
            timeout=timeout or settings.ai_timeout_seconds,
        )

    async def complete(self, prompt: str, max_tokens: int) -> str:
        try:
            message = await self._client.messages.create(
                model=self.model,
                max_tokens=max_tokens,
                messages=[{"role": "user", "content": prompt}],
            )
        except APIError as exc:
            raise GenerationError(f"AI request failed: {exc}") from exc

        text = "".join(
            block.text for block in (message.content or []) if getattr(block, "type", "") == "text"
        )
        if not text.strip():
            raise GenerationError("empty response from AI service")
        return text

    async def generate_exercise(self, theme: str, difficulty: str) -> str:
        text = await self.complete(build_generation_prompt(theme, difficulty), GENERATION_MAX_TOKENS)
        return text.strip()

    async def evaluate_answer(self, source_text: str, answer: str) -> EvaluationResult:
        text = await self.complete(build_evaluation_prompt(source_text, answer), EVALUATION_MAX_TOKENS)
        result = parse_evaluation_response(text)
        logging.debug("Parsed evaluation score=%s model_answer_len=%d", result.score, len(result.model_answer))
        return result

    async def close(self):
        await self._client.close()
