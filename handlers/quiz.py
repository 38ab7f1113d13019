from aiogram import Router, F, Bot
from aiogram.enums import ChatAction
from aiogram.filters import Command
from aiogram.types import Message, CallbackQuery

from keyboards.builders import CB_QUIZ_NEXT, get_quiz_keyboard
from services.exercise_service import ExerciseService

router = Router()


async def _send_exercise(bot: Bot, chat_id: int, account_id: str, exercise_service: ExerciseService):
    await bot.send_chat_action(chat_id, ChatAction.TYPING)
    issued = await exercise_service.issue_for_account(account_id)
    if not issued.ok:
        await bot.send_message(chat_id, issued.error_text)
        return
    await bot.send_message(
        chat_id,
        issued.card.render(),
        reply_markup=get_quiz_keyboard(),
        parse_mode="HTML",
    )


@router.message(Command("quiz"))
async def cmd_quiz(message: Message, bot: Bot, exercise_service: ExerciseService):
    if not message.from_user:
        return
    await _send_exercise(bot, message.chat.id, str(message.from_user.id), exercise_service)


@router.callback_query(F.data == CB_QUIZ_NEXT)
async def quiz_next_handler(call: CallbackQuery, bot: Bot, exercise_service: ExerciseService):
    message = call.message if isinstance(call.message, Message) else None
    await call.answer()
    chat_id = message.chat.id if message else call.from_user.id
    await _send_exercise(bot, chat_id, str(call.from_user.id), exercise_service)
