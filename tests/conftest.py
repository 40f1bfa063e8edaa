"""Shared fixtures: an in-memory stand-in for the psycopg2 connection pool."""

from dataclasses import dataclass, field
from typing import Optional

import pytest
from psycopg2 import sql

from db import connection


def render(query) -> str:
    """Render a plain or psycopg2.sql-composed query to text without a live connection."""
    if isinstance(query, str):
        return query
    if isinstance(query, sql.Composed):
        return "".join(render(part) for part in query.seq)
    if isinstance(query, sql.SQL):
        return query.string
    if isinstance(query, sql.Identifier):
        return ".".join(f'"{s}"' for s in query.strings)
    if isinstance(query, sql.Literal):
        return repr(query.wrapped)
    raise TypeError(f"Cannot render {query!r}")


@dataclass
class Scripted:
    match: str
    rows: list = field(default_factory=list)
    rowcount: int = 0
    error: Optional[Exception] = None


class FakeCursor:
    def __init__(self, conn: "FakeConnection"):
        self.conn = conn
        self.rowcount = -1
        self._rows: list = []

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False

    def execute(self, query, params=None):
        text = render(query)
        self.conn.executed.append((text, params))
        result = self.conn.take(text)
        if result.error is not None:
            raise result.error
        self._rows = list(result.rows)
        self.rowcount = result.rowcount

    def fetchone(self):
        return self._rows[0] if self._rows else None

    def fetchall(self):
        return list(self._rows)


class FakeConnection:
    def __init__(self):
        self.executed: list[tuple[str, object]] = []
        self.script: list[Scripted] = []
        self.commits = 0
        self.rollbacks = 0

    def on(self, match: str, rows=None, rowcount: int = 0, error: Exception = None):
        """Answer the next statement containing `match` with rows / rowcount / error."""
        self.script.append(Scripted(match, rows or [], rowcount, error))
        return self

    def take(self, text: str) -> Scripted:
        for i, entry in enumerate(self.script):
            if entry.match in text:
                return self.script.pop(i)
        return Scripted(match="")

    def cursor(self, *args, **kwargs):
        return FakeCursor(self)

    def commit(self):
        self.commits += 1

    def rollback(self):
        self.rollbacks += 1

    def statements(self) -> list[str]:
        return [text for text, _ in self.executed]


class FakePool:
    def __init__(self, conn: FakeConnection):
        self.conn = conn
        self.checked_out = 0

    def getconn(self):
        self.checked_out += 1
        return self.conn

    def putconn(self, conn):
        assert conn is self.conn
        self.checked_out -= 1

    def closeall(self):
        pass


@pytest.fixture
def fake_pool(monkeypatch) -> FakePool:
    pool = FakePool(FakeConnection())
    monkeypatch.setattr(connection, "_pool", pool)
    return pool


@pytest.fixture
def fake_db(fake_pool) -> FakeConnection:
    return fake_pool.conn
