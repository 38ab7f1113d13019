import asyncio
import logging

from aiogram import Router, F
from aiogram.filters import Command, CommandObject
from aiogram.fsm.context import FSMContext
from aiogram.fsm.state import State, StatesGroup
from aiogram.types import Message, CallbackQuery

from core import texts
from core.config import settings
from database import get_or_create_preferences, update_preferences, update_schedule_flag
from keyboards.builders import (
    CB_DIFFICULTY_PREFIX,
    CB_SCHEDULE_TOGGLE,
    CB_SETTINGS_OPEN,
    CB_THEME_FORM,
    get_settings_keyboard,
)
from services.cards import build_settings_card, difficulty_label

router = Router()


class SettingsState(StatesGroup):
    waiting_for_theme = State()


def validate_theme(raw: str | None) -> tuple[str | None, str | None]:
    """Returns (theme, error_text); exactly one of them is set."""
    theme = (raw or "").strip()
    if len(theme) < settings.theme_min_length:
        return None, texts.ERR_THEME_REQUIRED
    if len(theme) > settings.theme_max_length:
        return None, texts.ERR_THEME_TOO_LONG.format(max_len=settings.theme_max_length)
    return theme, None


async def _set_theme(account_id: str, theme: str) -> str:
    try:
        prefs = await asyncio.to_thread(get_or_create_preferences, account_id)
        await asyncio.to_thread(update_preferences, account_id, prefs.difficulty, theme)
    except Exception as e:
        logging.error(f"Error updating theme for {account_id}: {e}")
        return texts.ERR_SETTINGS_UPDATE_FAILED
    return texts.MSG_THEME_SET.format(theme=theme)


async def _send_settings(message: Message, account_id: str):
    try:
        prefs = await asyncio.to_thread(get_or_create_preferences, account_id)
    except Exception as e:
        logging.error(f"Error loading settings for {account_id}: {e}")
        await message.answer(texts.ERR_SETTINGS_FETCH_FAILED)
        return
    await message.answer(
        build_settings_card(prefs).render(),
        reply_markup=get_settings_keyboard(prefs.difficulty),
        parse_mode="HTML",
    )


@router.message(Command("settings"))
async def cmd_settings(message: Message):
    if not message.from_user:
        return
    await _send_settings(message, str(message.from_user.id))


@router.callback_query(F.data == CB_SETTINGS_OPEN)
async def settings_open_handler(call: CallbackQuery):
    await call.answer()
    if isinstance(call.message, Message):
        await _send_settings(call.message, str(call.from_user.id))


@router.message(Command("theme"))
async def cmd_theme(message: Message, command: CommandObject):
    if not message.from_user:
        return
    if not command.args:
        await message.answer(texts.MSG_THEME_USAGE)
        return
    theme, error = validate_theme(command.args)
    if error:
        await message.answer(error)
        return
    await message.answer(await _set_theme(str(message.from_user.id), theme))


@router.callback_query(F.data.startswith(CB_DIFFICULTY_PREFIX))
async def difficulty_select_handler(call: CallbackQuery):
    difficulty = call.data.replace(CB_DIFFICULTY_PREFIX, "", 1)
    if difficulty not in texts.DIFFICULTIES:
        await call.answer(texts.ERR_UNKNOWN_DIFFICULTY, show_alert=True)
        return

    account_id = str(call.from_user.id)
    try:
        prefs = await asyncio.to_thread(get_or_create_preferences, account_id)
        await asyncio.to_thread(update_preferences, account_id, difficulty, prefs.theme)
    except Exception as e:
        logging.error(f"Error updating difficulty for {account_id}: {e}")
        await call.answer(texts.ERR_SETTINGS_UPDATE_FAILED, show_alert=True)
        return

    await call.answer(texts.MSG_DIFFICULTY_SET.format(label=difficulty_label(difficulty)), show_alert=True)


@router.callback_query(F.data == CB_THEME_FORM)
async def theme_form_handler(call: CallbackQuery, state: FSMContext):
    await call.answer()
    await state.set_state(SettingsState.waiting_for_theme)
    if isinstance(call.message, Message):
        await call.message.answer(
            texts.THEME_FORM_PROMPT.format(min_len=settings.theme_min_length, max_len=settings.theme_max_length),
            parse_mode="HTML",
        )


@router.message(SettingsState.waiting_for_theme, F.text)
async def theme_form_submit(message: Message, state: FSMContext):
    theme, error = validate_theme(message.text)
    if error:
        # Stay in the form until a valid theme arrives.
        await message.answer(error)
        return
    await state.clear()
    await message.answer(await _set_theme(str(message.from_user.id), theme))


@router.callback_query(F.data == CB_SCHEDULE_TOGGLE)
async def schedule_toggle_handler(call: CallbackQuery):
    account_id = str(call.from_user.id)
    try:
        prefs = await asyncio.to_thread(get_or_create_preferences, account_id)
        enabled = not prefs.schedule_enabled
        await asyncio.to_thread(update_schedule_flag, account_id, enabled)
    except Exception as e:
        logging.error(f"Error toggling schedule for {account_id}: {e}")
        await call.answer(texts.ERR_SETTINGS_UPDATE_FAILED, show_alert=True)
        return

    await call.answer(texts.MSG_SCHEDULE_SET.format(status="ON" if enabled else "OFF"), show_alert=True)
