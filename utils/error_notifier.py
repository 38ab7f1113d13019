import asyncio
import datetime
import logging
from collections import deque

from core.config import settings

_SENT_ALERT_TS = deque()
_DEDUP_LAST_SEEN = {}
_PENDING_TASKS = set()

_RATE_LIMIT_PER_MIN = 5
_RATE_WINDOW_SEC = 60
_DEDUP_WINDOW_SEC = 120


def _utc_now():
    return datetime.datetime.now(datetime.timezone.utc)


def _cleanup_old(now):
    threshold_rate = now - datetime.timedelta(seconds=_RATE_WINDOW_SEC)
    while _SENT_ALERT_TS and _SENT_ALERT_TS[0] < threshold_rate:
        _SENT_ALERT_TS.popleft()

    threshold_dedup = now - datetime.timedelta(seconds=_DEDUP_WINDOW_SEC)
    stale_keys = [k for k, ts in _DEDUP_LAST_SEEN.items() if ts < threshold_dedup]
    for key in stale_keys:
        _DEDUP_LAST_SEEN.pop(key, None)


def _normalize_message_short(value):
    if value is None:
        return "-"
    short = str(value).replace("\n", " ").replace("\r", " ").strip()
    return short[:200] if len(short) > 200 else short


def should_send_alert(error_type: str, message_short: str, where_ctx: str, now=None) -> bool:
    """Applies the dedup window and per-minute rate limit; records the alert if allowed."""
    now = now or _utc_now()
    _cleanup_old(now)

    dedup_key = (error_type, message_short, where_ctx)
    last_seen = _DEDUP_LAST_SEEN.get(dedup_key)
    if last_seen and (now - last_seen).total_seconds() < _DEDUP_WINDOW_SEC:
        return False
    _DEDUP_LAST_SEEN[dedup_key] = now

    if len(_SENT_ALERT_TS) >= _RATE_LIMIT_PER_MIN:
        return False
    _SENT_ALERT_TS.append(now)
    return True


async def notify_ops_error(bot, payload: dict):
    """
    Sends a compact error alert to ADMIN_ID with dedup + rate limits.
    Never raises.
    """
    try:
        if not settings.admin_id or not bot:
            return
        where_ctx = payload.get("where_ctx") or "-"
        error_type = payload.get("error_type") or "Exception"
        message_short = _normalize_message_short(payload.get("message_short"))
        if not should_send_alert(error_type, message_short, where_ctx):
            return

        text = (
            "🚨 Bot Error Alert\n"
            f"time_utc: {_utc_now().isoformat(timespec='seconds')}\n"
            f"where: {where_ctx}\n"
            f"user_id: {payload.get('user_id') or '-'}\n"
            f"error_type: {error_type}\n"
            f"message: {message_short}"
        )
        await bot.send_message(chat_id=int(settings.admin_id), text=text)
    except Exception as e:
        logging.warning(f"Failed to send ops alert to admin: {e}")


def schedule_ops_error_notification(bot, payload: dict):
    """Fire-and-forget notifier call. Never raises."""
    try:
        task = asyncio.create_task(notify_ops_error(bot, payload))
        _PENDING_TASKS.add(task)
        task.add_done_callback(_PENDING_TASKS.discard)
    except Exception as e:
        logging.warning(f"Failed to schedule ops error notification: {e}")
