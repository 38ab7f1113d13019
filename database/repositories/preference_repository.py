from database.connection import get_connection
from database.models import Preferences
from core.texts import DEFAULT_DIFFICULTY, DEFAULT_THEME


def get_preferences(account_id: str) -> Preferences | None:
    conn = get_connection()
    cursor = conn.cursor()
    try:
        cursor.execute(
            "SELECT account_id, difficulty, theme, schedule_enabled, created_at "
            "FROM user_preferences WHERE account_id = ?",
            (account_id,),
        )
        row = cursor.fetchone()
    finally:
        conn.close()
    return Preferences.from_row(row) if row else None


def get_or_create_preferences(account_id: str) -> Preferences:
    """
    Returns the preference record for account_id, inserting the defaults on
    first use. Concurrent first calls are safe: the primary key turns the
    losing insert into a no-op and both callers re-read the same row.
    """
    prefs = get_preferences(account_id)
    if prefs:
        return prefs

    conn = get_connection()
    cursor = conn.cursor()
    try:
        cursor.execute(
            "INSERT INTO user_preferences (account_id, difficulty, theme, schedule_enabled) "
            "VALUES (?, ?, ?, 1) "
            "ON CONFLICT(account_id) DO NOTHING",
            (account_id, DEFAULT_DIFFICULTY, DEFAULT_THEME),
        )
        conn.commit()
    finally:
        conn.close()

    prefs = get_preferences(account_id)
    if prefs is None:
        raise RuntimeError(f"Preference record for {account_id} vanished after insert")
    return prefs


def update_preferences(account_id: str, difficulty: str, theme: str):
    conn = get_connection()
    cursor = conn.cursor()
    try:
        cursor.execute("""
            INSERT INTO user_preferences (account_id, difficulty, theme, schedule_enabled)
            VALUES (?, ?, ?, 1)
            ON CONFLICT(account_id) DO UPDATE SET
                difficulty = excluded.difficulty,
                theme = excluded.theme
        """, (account_id, difficulty, theme))
        conn.commit()
    finally:
        conn.close()


def update_schedule_flag(account_id: str, enabled: bool):
    conn = get_connection()
    cursor = conn.cursor()
    try:
        cursor.execute("""
            INSERT INTO user_preferences (account_id, difficulty, theme, schedule_enabled)
            VALUES (?, ?, ?, ?)
            ON CONFLICT(account_id) DO UPDATE SET
                schedule_enabled = excluded.schedule_enabled
        """, (account_id, DEFAULT_DIFFICULTY, DEFAULT_THEME, 1 if enabled else 0))
        conn.commit()
    finally:
        conn.close()

