"""Tests for local persistence."""

from pathlib import Path

import pytest

from studyplanner.storage import LocalStore, MemoryStore, safe_load, safe_save


@pytest.fixture
def store(tmp_path: Path) -> LocalStore:
    return LocalStore(tmp_path / "data")


def test_creates_data_dir(tmp_path: Path) -> None:
    LocalStore(tmp_path / "nested" / "data")
    assert (tmp_path / "nested" / "data").is_dir()


def test_round_trip(store: LocalStore) -> None:
    store.save("sessions", [{"durationMinutes": 25, "subject": "Physics"}])
    assert store.load("sessions", []) == [{"durationMinutes": 25, "subject": "Physics"}]


def test_missing_key_returns_default(store: LocalStore) -> None:
    assert store.load("userStats", None) is None
    assert store.load("sessions", []) == []


def test_persists_to_disk(tmp_path: Path) -> None:
    data_dir = tmp_path / "data"

    LocalStore(data_dir).save("userStats", {"totalStudyTimeMinutes": 90})

    # New instance should read from disk
    assert LocalStore(data_dir).load("userStats", None) == {"totalStudyTimeMinutes": 90}


def test_corrupted_file_returns_default(store: LocalStore) -> None:
    (store.data_dir / "sessions.json").write_text("[{broken")
    assert store.load("sessions", []) == []


def test_unserializable_value_is_not_saved(store: LocalStore) -> None:
    assert store.save("sessions", [1, 2]) is True
    assert store.save("sessions", {1, 2}) is False  # sets are not JSON

    assert store.load("sessions", []) == [1, 2]


def test_write_failure_is_swallowed(store: LocalStore) -> None:
    # A directory where the file should be makes the write fail
    (store.data_dir / "tasks.json").mkdir()
    assert store.save("tasks", []) is False

    assert store.load("tasks", ["default"]) == ["default"]


class TestMemoryStore:
    def test_round_trip(self) -> None:
        store = MemoryStore()
        store.save("tasks", [{"id": "a"}])
        assert store.load("tasks", []) == [{"id": "a"}]

    def test_loaded_values_are_copies(self) -> None:
        store = MemoryStore()
        store.save("tasks", [{"id": "a"}])
        loaded = store.load("tasks", [])
        loaded.append({"id": "b"})

        assert store.load("tasks", []) == [{"id": "a"}]

    def test_missing_key_returns_default(self) -> None:
        assert MemoryStore().load("activities", []) == []

    def test_unserializable_value_reports_failure(self) -> None:
        store = MemoryStore()
        assert store.save("tasks", {1, 2}) is False
        assert store.load("tasks", []) == []


class RaisingStore:
    def load(self, key, default):
        raise OSError("quota exceeded")

    def save(self, key, value):
        raise OSError("quota exceeded")


class LegacyStore(MemoryStore):
    """Store whose save() returns nothing on success."""

    def save(self, key, value):
        super().save(key, value)


class TestGuardedAccess:
    def test_load_error_returns_default(self) -> None:
        assert safe_load(RaisingStore(), "userStats", None) is None
        assert safe_load(RaisingStore(), "sessions", []) == []

    def test_save_error_returns_false(self) -> None:
        assert safe_save(RaisingStore(), "sessions", []) is False

    def test_save_result_is_passed_through(self, store: LocalStore) -> None:
        assert safe_save(store, "tasks", []) is True
        (store.data_dir / "activities.json").mkdir()
        assert safe_save(store, "activities", []) is False

    def test_none_result_counts_as_saved(self) -> None:
        store = LegacyStore()
        assert safe_save(store, "tasks", [{"id": "a"}]) is True
        assert safe_load(store, "tasks", []) == [{"id": "a"}]
