"""
Tests for CandidateStore

Seeding from storage vs defaults, persistence of every write, and the
single-transaction ballot commit.
"""

import pytest

from election.constants import default_roster
from election.models import Office
from election.store import (
    BALLOTS_SUBMITTED_KEY,
    CANDIDATES_KEY,
    CandidateStore,
    voted_key,
)
from exceptions import CandidateNotFoundError, StorageError


class TestSeeding:

    def test_empty_storage_uses_default_roster(self, store):
        ids = [c.id for c in store.candidates]
        assert ids == ["p1", "p2", "vp1", "vp2", "sec1", "sec2", "aud1", "aud2", "saa1", "saa2"]
        assert store.get("aud1").votes == 55

    def test_persisted_roster_wins_over_defaults(self, storage):
        storage.set(CANDIDATES_KEY, [{
            "id": "x1", "name": "Xena", "office": "Auditor",
            "bio": "", "image_url": "https://img/x", "votes": 7,
        }])

        store = CandidateStore(storage)

        assert len(store) == 1
        assert store.get("x1").office == Office.AUDITOR
        assert store.get("x1").votes == 7

    def test_malformed_roster_raises_storage_error(self, storage):
        storage.set(CANDIDATES_KEY, [{"id": "x1", "office": "Treasurer"}])
        with pytest.raises(StorageError):
            CandidateStore(storage)

    def test_defaults_are_fresh_copies(self, storage):
        """Mutating the live roster never leaks into the default roster"""
        store = CandidateStore(storage)
        store.candidates[0].votes = 999
        assert default_roster()[0].votes == 42


class TestReads:

    def test_candidates_returns_copy(self, store):
        snapshot = store.candidates
        snapshot.clear()
        assert len(store) == 10

    def test_for_office_keeps_roster_order(self, store):
        assert [c.id for c in store.for_office(Office.SECRETARY)] == ["sec1", "sec2"]

    def test_require_unknown_raises(self, store):
        with pytest.raises(CandidateNotFoundError):
            store.require("nobody")


class TestWrites:

    def test_replace_persists(self, storage, store):
        store.replace(store.candidates[:3])
        assert len(CandidateStore(storage)) == 3

    def test_commit_ballot_writes_roster_marker_and_counter(self, storage, store):
        updated = store.candidates
        store.commit_ballot(updated, "voter-1")

        assert storage.get(voted_key("voter-1")) is True
        assert storage.get(BALLOTS_SUBMITTED_KEY) == 1
        assert store.has_voted("voter-1")
        assert not store.has_voted("voter-2")
        assert store.ballots_submitted == 1

    def test_reset_restores_defaults_and_clears_markers(self, storage, store):
        store.replace([])
        store.commit_ballot([], "voter-1")
        store.commit_ballot([], "voter-2")

        store.reset()

        assert len(store) == 10
        assert not store.has_voted("voter-1")
        assert not store.has_voted("voter-2")
        assert store.ballots_submitted == 0
        assert len(CandidateStore(storage)) == 10
