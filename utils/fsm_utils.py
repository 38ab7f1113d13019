from aiogram import BaseMiddleware
from aiogram.types import Message
from aiogram.fsm.context import FSMContext
import logging


class StateCleanupMiddleware(BaseMiddleware):
    """
    Clears a pending FSM state (e.g. the theme form) when the user sends a
    command instead, so the command is not swallowed as form input.
    """
    async def __call__(self, handler, event, data):
        state: FSMContext | None = data.get("state")

        if state is not None and isinstance(event, Message) and event.text and event.text.startswith("/"):
            current_state = await state.get_state()
            if current_state:
                logging.info(f"Clearing state {current_state} for user {event.from_user.id} due to command {event.text}")
                await state.clear()

        return await handler(event, data)
