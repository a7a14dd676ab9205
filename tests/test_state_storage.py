"""
Tests for SQLiteStateStorage

Keyed JSON blobs standing in for browser local storage: absence means
defaults, multi-key writes are atomic, prefixes can be cleared.
"""

import sqlite3

import pytest

from database.state_storage import SQLiteStateStorage
from exceptions import StorageError


class TestStateStorage:

    def test_missing_key_returns_default(self, storage):
        assert storage.get("voter_candidates") is None
        assert storage.get("has_voted:default", False) is False

    def test_values_survive_reopen(self, tmp_path):
        """A second instance on the same file sees earlier writes"""
        path = str(tmp_path / "nested" / "state.db")
        SQLiteStateStorage(path).set("roster", [{"id": "p1", "votes": 3}])

        reopened = SQLiteStateStorage(path)
        assert reopened.get("roster") == [{"id": "p1", "votes": 3}]

    def test_set_many_writes_every_key(self, storage):
        storage.set_many({"a": 1, "b": True, "c": "text"})
        assert storage.get("a") == 1
        assert storage.get("b") is True
        assert storage.get("c") == "text"

    def test_set_overwrites(self, storage):
        storage.set("counter", 1)
        storage.set("counter", 2)
        assert storage.get("counter") == 2

    def test_delete_prefix_only_touches_matching_keys(self, storage):
        storage.set_many({
            "has_voted:alice": True,
            "has_voted:bob": True,
            "voter_candidates": [],
        })

        removed = storage.delete_prefix("has_voted:")

        assert removed == 2
        assert storage.keys() == ["voter_candidates"]

    def test_keys_filters_by_prefix(self, storage):
        storage.set_many({"has_voted:x": True, "has_voted:y": True, "other": 1})
        assert storage.keys("has_voted:") == ["has_voted:x", "has_voted:y"]

    def test_delete_missing_key_is_noop(self, storage):
        storage.delete("never-written")
        assert storage.get("never-written") is None

    def test_corrupt_value_raises_storage_error(self, storage):
        with sqlite3.connect(storage.db_path) as conn:
            conn.execute(
                "INSERT INTO state (key, value, updated_at) VALUES (?, ?, ?)",
                ("voter_candidates", "{not json", 0.0),
            )
        conn.close()

        with pytest.raises(StorageError) as exc_info:
            storage.get("voter_candidates")
        assert exc_info.value.key == "voter_candidates"

    def test_write_batch_applies_everything(self, storage):
        storage.set_many({"has_voted:a": True, "has_voted:b": True, "ballots_submitted": 2})

        removed = storage.write_batch(
            values={"voter_candidates": []},
            delete_keys=["ballots_submitted"],
            delete_prefixes=["has_voted:"],
        )

        assert removed == 3
        assert storage.keys() == ["voter_candidates"]

    def test_write_batch_failure_rolls_back_deletes(self, storage, fail_writes):
        storage.set_many({"has_voted:a": True, "ballots_submitted": 1, "voter_candidates": [1]})
        fail_writes(storage, "voter_candidates")

        with pytest.raises(StorageError):
            storage.write_batch(
                values={"voter_candidates": []},
                delete_keys=["ballots_submitted"],
                delete_prefixes=["has_voted:"],
            )

        assert storage.get("has_voted:a") is True
        assert storage.get("ballots_submitted") == 1
        assert storage.get("voter_candidates") == [1]
