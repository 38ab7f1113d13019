from aiogram import Router, F, Bot
from aiogram.enums import ChatAction
from aiogram.types import Message

from services.exercise_service import ExerciseService

router = Router()


@router.message(F.reply_to_message, F.text)
async def reply_answer_handler(message: Message, bot: Bot, exercise_service: ExerciseService):
    async def show_typing():
        await bot.send_chat_action(message.chat.id, ChatAction.TYPING)

    outcome = await exercise_service.evaluate_reply(message, bot.id, on_correlated=show_typing)
    if outcome is None:
        # Not an answer to an exercise card.
        return

    if outcome.card is None:
        await message.reply(outcome.error_text)
        return
    await message.reply(outcome.card.render(), parse_mode="HTML")
