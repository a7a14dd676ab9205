"""Shared fixtures: temporary state files, stores and a fake Gemini client."""

import sqlite3
from types import SimpleNamespace
from unittest.mock import AsyncMock

import pytest

from database.state_storage import SQLiteStateStorage
from election.models import Candidate, Office
from election.store import CandidateStore


def make_fake_genai_client(text="## Election Report\nAlice leads.", side_effect=None):
    """Stand-in for genai.Client exposing client.aio.models.generate_content"""
    generate = AsyncMock(return_value=SimpleNamespace(text=text), side_effect=side_effect)
    return SimpleNamespace(aio=SimpleNamespace(models=SimpleNamespace(generate_content=generate)))


def two_president_roster():
    """Candidates A and B for President, nobody else"""
    return [
        Candidate(id="a", name="Ada", office=Office.PRESIDENT, bio="", image_url="https://img/a", votes=0),
        Candidate(id="b", name="Bo", office=Office.PRESIDENT, bio="", image_url="https://img/b", votes=0),
    ]


@pytest.fixture
def storage(tmp_path):
    return SQLiteStateStorage(str(tmp_path / "state.db"))


@pytest.fixture
def store(storage):
    """Store seeded with the default association roster"""
    return CandidateStore(storage)


@pytest.fixture
def small_store(storage):
    return CandidateStore(storage, defaults=two_president_roster)


@pytest.fixture
def fake_client():
    return make_fake_genai_client()


@pytest.fixture
def make_client():
    """Factory for fake clients with a custom reply or side effect"""
    return make_fake_genai_client


def fail_writes_to(storage, key):
    """Install a trigger that aborts any insert of key, mid-transaction"""
    with sqlite3.connect(storage.db_path) as conn:
        conn.execute(f"""
            CREATE TRIGGER fail_{key} BEFORE INSERT ON state
            WHEN NEW.key = '{key}'
            BEGIN SELECT RAISE(ABORT, 'disk full'); END
        """)
    conn.close()


@pytest.fixture
def fail_writes():
    return fail_writes_to
