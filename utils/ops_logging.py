import datetime
import json
import logging

logger = logging.getLogger("quiz.ops")


def log_structured(event: str, **fields):
    """One JSON line per lifecycle event (issued, evaluated, broadcast)."""
    payload = {
        "event": event,
        "ts": datetime.datetime.now(datetime.timezone.utc).isoformat(timespec="seconds").replace("+00:00", "Z"),
    }
    payload.update(fields)
    logger.info(json.dumps(payload, ensure_ascii=False, default=str))
