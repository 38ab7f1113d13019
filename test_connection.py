import dataclasses
from types import SimpleNamespace

from database import connection
from database.repositories.exercise_repository import create_exercise, get_exercise


class FakeRawCursor:
    def __init__(self, rows, columns):
        self.rows = list(rows)
        self.description = [SimpleNamespace(name=c) for c in columns]
        self.executed = []

    def execute(self, sql, params=None):
        self.executed.append((sql, params))

    def fetchone(self):
        return self.rows.pop(0) if self.rows else None


class FakeRawConnection:
    def __init__(self, cursor):
        self._cursor = cursor
        self.commits = 0

    def cursor(self):
        return self._cursor

    def commit(self):
        self.commits += 1


class FakePool:
    def __init__(self, raw_conn):
        self.raw_conn = raw_conn
        self.returned = []

    def getconn(self):
        return self.raw_conn

    def putconn(self, conn):
        self.returned.append(conn)


def _use_postgres(monkeypatch, rows, columns):
    raw_cursor = FakeRawCursor(rows, columns)
    pool = FakePool(FakeRawConnection(raw_cursor))
    monkeypatch.setattr(connection, "settings", dataclasses.replace(connection.settings, db_backend="postgres"))
    monkeypatch.setattr(connection, "_POSTGRES_POOL", pool)
    return pool, raw_cursor


def test_postgres_insert_uses_returning_and_rewrites_placeholders(monkeypatch):
    pool, raw_cursor = _use_postgres(monkeypatch, rows=[(41,)], columns=["id"])

    assert create_exercise("雨が降っています。", "beginner", "天気") == 41

    sql, params = raw_cursor.executed[0]
    assert "?" not in sql
    assert sql.count("%s") == 3
    assert "RETURNING id" in sql
    assert params == ("雨が降っています。", "beginner", "天気")
    assert pool.raw_conn.commits == 1
    assert pool.returned == [pool.raw_conn]


def test_postgres_rows_read_by_name_and_position(monkeypatch):
    columns = ["id", "prompt_text", "difficulty", "theme", "created_at"]
    pool, _ = _use_postgres(monkeypatch, rows=[(5, "本", "advanced", "趣味", None)], columns=columns)

    exercise = get_exercise(5)

    assert exercise.id == 5
    assert exercise.prompt_text == "本"
    assert exercise.created_at is None
    assert len(pool.returned) == 1


def test_pooled_connection_returns_once():
    pool = FakePool(FakeRawConnection(FakeRawCursor([], [])))
    conn = connection.PooledConnection(pool, pool.getconn())

    conn.close()
    conn.close()

    assert pool.returned == [pool.raw_conn]
