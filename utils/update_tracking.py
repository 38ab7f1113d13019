from aiogram import BaseMiddleware
import logging

from utils.error_notifier import schedule_ops_error_notification


class UpdateTrackingMiddleware(BaseMiddleware):
    """Logs unhandled handler errors with context and alerts the admin."""

    async def __call__(self, handler, event, data):
        try:
            return await handler(event, data)
        except Exception as exc:
            user_id = _extract_user_id(event)
            where_ctx = _describe_event(event)
            logging.exception("Unhandled update exception in %s (user=%s)", where_ctx, user_id)
            schedule_ops_error_notification(data.get("bot"), {
                "where_ctx": where_ctx,
                "user_id": user_id,
                "error_type": type(exc).__name__,
                "message_short": str(exc),
            })
            raise


def _describe_event(event) -> str:
    for attr in ("message", "callback_query", "edited_message"):
        if getattr(event, attr, None) is not None:
            return f"{type(event).__name__}.{attr}"
    return type(event).__name__


def _extract_user_id(event):
    for attr in ("message", "callback_query", "edited_message"):
        inner = getattr(event, attr, None)
        author = getattr(inner, "from_user", None) if inner is not None else None
        if author is not None:
            return author.id
    author = getattr(event, "from_user", None)
    return author.id if author is not None else None
