from database.connection import get_connection, is_postgres_backend
from database.models import Exercise
import logging


def create_exercise(prompt_text: str, difficulty: str, theme: str) -> int | None:
    """Inserts a new exercise and returns its id, or None if the insert failed."""
    conn = None
    try:
        conn = get_connection()
        cursor = conn.cursor()
        if is_postgres_backend():
            cursor.execute(
                "INSERT INTO exercises (prompt_text, difficulty, theme) VALUES (?, ?, ?) RETURNING id",
                (prompt_text, difficulty, theme),
            )
            row = cursor.fetchone()
            exercise_id = int(row[0]) if row else None
        else:
            cursor.execute(
                "INSERT INTO exercises (prompt_text, difficulty, theme) VALUES (?, ?, ?)",
                (prompt_text, difficulty, theme),
            )
            exercise_id = int(cursor.lastrowid)
        conn.commit()
        return exercise_id
    except Exception as e:
        logging.error(f"Error saving exercise: {e}")
        return None
    finally:
        if conn is not None:
            conn.close()


def get_exercise(exercise_id: int) -> Exercise | None:
    conn = get_connection()
    cursor = conn.cursor()
    try:
        cursor.execute(
            "SELECT id, prompt_text, difficulty, theme, created_at FROM exercises WHERE id = ?",
            (exercise_id,),
        )
        row = cursor.fetchone()
    finally:
        conn.close()
    return Exercise.from_row(row) if row else None
