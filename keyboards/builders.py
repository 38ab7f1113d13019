from aiogram.types import InlineKeyboardButton
from aiogram.utils.keyboard import InlineKeyboardBuilder
from core.texts import (
    BTN_NEXT_QUIZ,
    BTN_SCHEDULE_TOGGLE,
    BTN_SETTINGS,
    BTN_STATS,
    BTN_THEME,
    DIFFICULTIES,
    DIFFICULTY_LABELS,
)

CB_QUIZ_NEXT = "quiz_next"
CB_SETTINGS_OPEN = "settings_open"
CB_STATS_SHOW = "stats_show"
CB_DIFFICULTY_PREFIX = "difficulty_set_"
CB_THEME_FORM = "theme_modal"
CB_SCHEDULE_TOGGLE = "schedule_toggle"


def get_quiz_keyboard():
    builder = InlineKeyboardBuilder()
    builder.button(text=BTN_NEXT_QUIZ, callback_data=CB_QUIZ_NEXT)
    builder.button(text=BTN_SETTINGS, callback_data=CB_SETTINGS_OPEN)
    builder.button(text=BTN_STATS, callback_data=CB_STATS_SHOW)
    builder.adjust(1, 2)
    return builder.as_markup()


def get_settings_keyboard(current_difficulty: str | None = None):
    builder = InlineKeyboardBuilder()
    for level in DIFFICULTIES:
        label = DIFFICULTY_LABELS[level]
        if level == current_difficulty:
            label = f"✅ {label}"
        builder.button(text=label, callback_data=f"{CB_DIFFICULTY_PREFIX}{level}")
    builder.adjust(3)
    builder.row(
        InlineKeyboardButton(text=BTN_THEME, callback_data=CB_THEME_FORM),
        InlineKeyboardButton(text=BTN_SCHEDULE_TOGGLE, callback_data=CB_SCHEDULE_TOGGLE),
    )
    return builder.as_markup()
