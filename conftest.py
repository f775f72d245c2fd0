"""Shared fixtures: an in-memory stand-in for the Supabase query builder."""
import random
from datetime import datetime, timedelta, timezone
from types import SimpleNamespace

import pytest

from mocktest.config import SessionConfig
from mocktest.database import DatabaseClient
from mocktest.models import Identity
from mocktest.question_source import QuestionSource
from mocktest.session import TestSession


class FakeQuery:
    def __init__(self, backend, table):
        self.backend = backend
        self.table_name = table
        self.filters = []
        self.row_limit = None
        self.pending_insert = None

    def select(self, *columns, **kwargs):
        return self

    def eq(self, column, value):
        self.filters.append((column, value))
        return self

    def limit(self, n):
        self.row_limit = n
        return self

    def insert(self, rows):
        self.pending_insert = rows
        return self

    def execute(self):
        error = self.backend.errors.get(self.table_name)
        if error is not None:
            raise error
        if self.pending_insert is not None:
            self.backend.inserts.append((self.table_name, self.pending_insert))
            # RLS: inserted results are not readable back
            return SimpleNamespace(data=[], count=None)
        rows = [
            r for r in self.backend.rows.get(self.table_name, [])
            if all(r.get(c) == v for c, v in self.filters)
        ]
        if self.row_limit is not None:
            rows = rows[: self.row_limit]
        return SimpleNamespace(data=rows, count=len(rows))


class FakeSupabase:
    """Mimics `client.table(...).select(...).eq(...).limit(...).execute()`."""

    def __init__(self, rows=None, errors=None):
        self.rows = rows or {}
        self.errors = errors or {}
        self.inserts = []

    def table(self, name):
        return FakeQuery(self, name)


def question_row(qid, subject, correct=1, difficulty="easy"):
    return {
        "id": qid,
        "subject": subject,
        "question": f"Question {qid}?",
        "option_a": "A",
        "option_b": "B",
        "option_c": "C",
        "option_d": "D",
        "correct_answer": correct,
        "difficulty": difficulty,
    }


class FakeClock:
    def __init__(self, start=0.0):
        self.t = start

    def __call__(self):
        return self.t

    def advance(self, seconds):
        self.t += seconds


START = datetime(2026, 1, 10, 9, 0, tzinfo=timezone.utc)


@pytest.fixture
def remote_rows():
    return [question_row(f"q{i}", subject, correct=(i % 4) + 1)
            for i, subject in enumerate(["Math", "Science", "Reasoning"] * 4)]


@pytest.fixture
def fake_client(remote_rows):
    return FakeSupabase(rows={"questions": remote_rows})


@pytest.fixture
def db(fake_client):
    return DatabaseClient(fake_client)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def session(db, clock):
    return TestSession(
        QuestionSource(db),
        SessionConfig(session_size=6),
        rng=random.Random(7),
        clock=clock,
        now=lambda: START,
    )


@pytest.fixture
def identity():
    return Identity(id="user-1", email="student@example.com", name="Student")


@pytest.fixture
def later():
    return lambda: START + timedelta(seconds=754, microseconds=900000)
