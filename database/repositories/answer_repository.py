from database.connection import get_connection, is_postgres_backend
from database.models import UserStats
import logging


def record_answer(
    account_id: str,
    exercise_id: int,
    submitted_text: str,
    model_answer: str,
    score: int,
    feedback: str,
) -> bool:
    # Append-only; the exercise id is not checked, orphaned answers are kept.
    conn = None
    try:
        conn = get_connection()
        cursor = conn.cursor()
        cursor.execute("""
            INSERT INTO answers (account_id, exercise_id, submitted_text, model_answer, score, feedback)
            VALUES (?, ?, ?, ?, ?, ?)
        """, (account_id, exercise_id, submitted_text, model_answer, score, feedback))
        conn.commit()
        return True
    except Exception as e:
        logging.error(f"Error saving answer for {account_id} on exercise #{exercise_id}: {e}")
        return False
    finally:
        if conn is not None:
            conn.close()


def _today_filter() -> str:
    if is_postgres_backend():
        return "CAST(answered_at AS DATE) = CURRENT_DATE"
    return "DATE(answered_at) = DATE('now')"


def get_statistics(account_id: str) -> UserStats:
    """
    Aggregates the account's answers on demand. Each figure is its own query;
    an account without answers gets all zeros.
    """
    stats = UserStats()
    conn = get_connection()
    cursor = conn.cursor()
    try:
        cursor.execute("SELECT COUNT(*) FROM answers WHERE account_id = ?", (account_id,))
        row = cursor.fetchone()
        stats.total_answers = int((row[0] if row else 0) or 0)

        cursor.execute("SELECT COALESCE(AVG(score), 0) FROM answers WHERE account_id = ?", (account_id,))
        row = cursor.fetchone()
        stats.average_score = float((row[0] if row else 0) or 0)

        cursor.execute("SELECT COALESCE(MAX(score), 0) FROM answers WHERE account_id = ?", (account_id,))
        row = cursor.fetchone()
        stats.highest_score = int((row[0] if row else 0) or 0)

        cursor.execute(
            f"SELECT COUNT(*) FROM answers WHERE account_id = ? AND {_today_filter()}",
            (account_id,),
        )
        row = cursor.fetchone()
        stats.answers_today = int((row[0] if row else 0) or 0)
    finally:
        conn.close()
    return stats
