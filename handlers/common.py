import asyncio
import logging

from aiogram import Router
from aiogram.filters import CommandStart
from aiogram.fsm.context import FSMContext
from aiogram.types import Message

from core.texts import WELCOME_TEXT
from database import get_or_create_preferences
from keyboards.builders import get_quiz_keyboard

router = Router()


@router.message(CommandStart())
async def cmd_start(message: Message, state: FSMContext):
    await state.clear()
    if not message.from_user:
        return

    try:
        await asyncio.to_thread(get_or_create_preferences, str(message.from_user.id))
    except Exception as e:
        logging.error(f"Error creating preferences on /start: {e}")

    await message.answer(WELCOME_TEXT, reply_markup=get_quiz_keyboard(), parse_mode="HTML")
