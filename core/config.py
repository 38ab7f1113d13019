import os
from dotenv import load_dotenv
from dataclasses import dataclass

load_dotenv()

_PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))

DEFAULT_SCHEDULE_INTERVAL_MINUTES = 60


def _resolve_db_path(raw_path: str) -> str:
    candidate = (raw_path or "").strip() or "./english_quiz.db"
    candidate = os.path.expanduser(candidate)
    if os.path.isabs(candidate):
        return os.path.abspath(candidate)
    return os.path.abspath(os.path.join(_PROJECT_ROOT, candidate))


def _join_webhook_url(base_url: str, path: str) -> str:
    clean_base = (base_url or "").strip().rstrip("/")
    clean_path = (path or "").strip()
    if not clean_base:
        return ""
    if not clean_path.startswith("/"):
        clean_path = "/" + clean_path
    return clean_base + clean_path


def _parse_interval_minutes(raw: str | None) -> int:
    try:
        value = int(str(raw).strip())
    except (TypeError, ValueError):
        return DEFAULT_SCHEDULE_INTERVAL_MINUTES
    return value if value > 0 else DEFAULT_SCHEDULE_INTERVAL_MINUTES


def _parse_chat_id(raw: str | None) -> int:
    try:
        return int(str(raw).strip())
    except (TypeError, ValueError):
        return 0


@dataclass(frozen=True)
class Config:
    bot_token: str = os.getenv("BOT_TOKEN", "")
    admin_id: int = _parse_chat_id(os.getenv("ADMIN_ID", "0"))

    # Storage
    db_backend: str = os.getenv("DB_BACKEND", "sqlite").strip().lower()
    database_url: str = os.getenv("DATABASE_URL", "").strip()
    db_pool_min_size: int = int(os.getenv("DB_POOL_MIN_SIZE", "1"))
    db_pool_max_size: int = int(os.getenv("DB_POOL_MAX_SIZE", "10"))
    db_path: str = _resolve_db_path(os.getenv("DATABASE_PATH", os.getenv("DB_PATH", "./english_quiz.db")))

    # Generative text service
    ai_api_key: str = os.getenv("AI_API_KEY", os.getenv("CLAUDE_API_KEY", "")).strip()
    ai_model: str = os.getenv("AI_MODEL", os.getenv("CLAUDE_MODEL", "claude-sonnet-4-20250514")).strip()
    ai_timeout_seconds: float = float(os.getenv("AI_TIMEOUT_SECONDS", "60"))

    # Scheduled broadcast
    broadcast_chat_id: int = _parse_chat_id(os.getenv("BROADCAST_CHAT_ID", "0"))
    schedule_enabled: bool = os.getenv("SCHEDULE_ENABLED", "True").lower() == "true"
    schedule_interval_minutes: int = _parse_interval_minutes(os.getenv("SCHEDULE_INTERVAL"))

    # Delivery
    delivery_mode: str = os.getenv("DELIVERY_MODE", "polling").strip().lower()
    webhook_host: str = os.getenv("WEBHOOK_HOST", "0.0.0.0").strip()
    webhook_port: int = int(os.getenv("PORT", os.getenv("WEBHOOK_PORT", "8080")))
    webhook_path: str = os.getenv("WEBHOOK_PATH", "/telegram/webhook").strip()
    webhook_secret_token: str = os.getenv("WEBHOOK_SECRET_TOKEN", "").strip()
    webhook_url: str = (
        os.getenv("WEBHOOK_URL", "").strip()
        or _join_webhook_url(os.getenv("WEBHOOK_BASE_URL", "").strip(), os.getenv("WEBHOOK_PATH", "/telegram/webhook").strip())
    )

    # Theme input bounds (settings form)
    theme_min_length: int = 1
    theme_max_length: int = 50

# Global Instance
settings = Config()
