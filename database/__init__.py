import logging

from database.connection import get_connection, is_postgres_backend

# Public API for the database package
from database.repositories.preference_repository import (
    get_or_create_preferences as get_or_create_preferences,
    get_preferences as get_preferences,
    update_preferences as update_preferences,
    update_schedule_flag as update_schedule_flag,
)
from database.repositories.exercise_repository import (
    create_exercise as create_exercise,
    get_exercise as get_exercise,
)
from database.repositories.answer_repository import (
    get_statistics as get_statistics,
    record_answer as record_answer,
)

__all__ = [
    "get_connection",
    "create_table",
    "get_or_create_preferences",
    "get_preferences",
    "update_preferences",
    "update_schedule_flag",
    "create_exercise",
    "get_exercise",
    "get_statistics",
    "record_answer",
]


def create_table():
    """Initializes the database schema."""
    pk = "BIGSERIAL PRIMARY KEY" if is_postgres_backend() else "INTEGER PRIMARY KEY AUTOINCREMENT"
    conn = get_connection()
    cursor = conn.cursor()

    # user_preferences
    cursor.execute("""
        CREATE TABLE IF NOT EXISTS user_preferences (
            account_id TEXT PRIMARY KEY,
            difficulty TEXT DEFAULT 'intermediate',
            theme TEXT DEFAULT '日常会話',
            schedule_enabled INTEGER DEFAULT 1,
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
        )
    """)

    # exercises
    cursor.execute(f"""
        CREATE TABLE IF NOT EXISTS exercises (
            id {pk},
            prompt_text TEXT NOT NULL,
            difficulty TEXT NOT NULL,
            theme TEXT NOT NULL,
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
        )
    """)

    # answers (exercise_id is informal, not a foreign key)
    cursor.execute(f"""
        CREATE TABLE IF NOT EXISTS answers (
            id {pk},
            account_id TEXT NOT NULL,
            exercise_id INTEGER NOT NULL,
            submitted_text TEXT NOT NULL,
            model_answer TEXT,
            score INTEGER,
            feedback TEXT,
            answered_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
        )
    """)
    cursor.execute("CREATE INDEX IF NOT EXISTS idx_answers_account ON answers(account_id)")

    conn.commit()
    conn.close()
    logging.info("Database schema ready (backend=%s)", "postgres" if is_postgres_backend() else "sqlite")
