from aiogram import Router, F
from aiogram.filters import Command
from aiogram.types import Message, CallbackQuery
import asyncio
import logging

from core.texts import ERR_STATS_FETCH_FAILED
from database import get_statistics
from keyboards.builders import CB_STATS_SHOW
from services.cards import build_stats_card

router = Router()


async def _send_stats(message: Message, account_id: str):
    try:
        stats = await asyncio.to_thread(get_statistics, account_id)
    except Exception as e:
        logging.error(f"Error loading stats for {account_id}: {e}")
        await message.answer(ERR_STATS_FETCH_FAILED)
        return
    await message.answer(build_stats_card(stats).render(), parse_mode="HTML")


@router.message(Command("stats"))
async def cmd_stats(message: Message):
    if not message.from_user:
        return
    await _send_stats(message, str(message.from_user.id))


@router.callback_query(F.data == CB_STATS_SHOW)
async def stats_show_handler(call: CallbackQuery):
    await call.answer()
    if isinstance(call.message, Message):
        await _send_stats(call.message, str(call.from_user.id))
