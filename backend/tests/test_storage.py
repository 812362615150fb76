"""Unit tests for the local storage backends."""

import json
import threading
from pathlib import Path

import pytest

from fitboost.config import Settings
from fitboost.storage import (
    JsonFileStorage,
    MemoryStorage,
    SqlStorage,
    create_storage,
    history_key,
    profile_key,
)


def _settings(tmp_path: Path, backend: str) -> Settings:
    return Settings(_env_file=None, data_dir=tmp_path, storage_backend=backend)


class TestKeys:
    def test_profile_key(self) -> None:
        assert profile_key("a@x.com") == "fitboost_data_a@x.com"

    def test_history_key(self) -> None:
        assert history_key("a@x.com", "trainer") == "fitboost_history_a@x.com_trainer"


# ── JSON file backend ─────────────────────────────────────────────────────────


class TestJsonFileStorage:
    def test_missing_file_reads_empty(self, tmp_path: Path) -> None:
        storage = JsonFileStorage(tmp_path / "store.json")
        assert storage.get_item("k") is None
        assert storage.keys() == []

    def test_set_get_remove(self, tmp_path: Path) -> None:
        storage = JsonFileStorage(tmp_path / "store.json")
        storage.set_item("k", "v")
        assert storage.get_item("k") == "v"

        storage.remove_item("k")
        assert storage.get_item("k") is None

    def test_persists_across_instances(self, tmp_path: Path) -> None:
        path = tmp_path / "nested" / "store.json"
        JsonFileStorage(path).set_item("k", "ção")
        assert JsonFileStorage(path).get_item("k") == "ção"

    def test_no_temp_files_left_behind(self, tmp_path: Path) -> None:
        storage = JsonFileStorage(tmp_path / "store.json")
        storage.set_item("a", "1")
        storage.set_item("b", "2")
        assert [p.name for p in tmp_path.iterdir()] == ["store.json"]

    def test_corrupted_file_treated_as_empty(self, tmp_path: Path) -> None:
        path = tmp_path / "store.json"
        path.write_text("{not json", encoding="utf-8")
        storage = JsonFileStorage(path)
        assert storage.keys() == []

        storage.set_item("k", "v")
        assert json.loads(path.read_text(encoding="utf-8")) == {"k": "v"}

    def test_non_object_file_treated_as_empty(self, tmp_path: Path) -> None:
        path = tmp_path / "store.json"
        path.write_text("[1, 2]", encoding="utf-8")
        assert JsonFileStorage(path).get_item("0") is None

    def test_remove_missing_key_is_noop(self, tmp_path: Path) -> None:
        path = tmp_path / "store.json"
        JsonFileStorage(path).remove_item("ghost")
        assert not path.exists()

    def test_concurrent_writers_keep_every_key(self, tmp_path: Path) -> None:
        storage = JsonFileStorage(tmp_path / "store.json")

        def write_many(worker: int) -> None:
            for i in range(20):
                storage.set_item(f"w{worker}_{i}", str(i))

        threads = [threading.Thread(target=write_many, args=(n,)) for n in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert len(JsonFileStorage(tmp_path / "store.json").keys()) == 160


# ── SQLite backend ────────────────────────────────────────────────────────────


class TestSqlStorage:
    def test_set_get_remove(self, tmp_path: Path) -> None:
        storage = SqlStorage(tmp_path)
        storage.set_item("k", "v1")
        storage.set_item("k", "v2")
        assert storage.get_item("k") == "v2"
        assert storage.keys() == ["k"]

        storage.remove_item("k")
        assert storage.get_item("k") is None
        storage.remove_item("k")

    def test_keys_sorted(self, tmp_path: Path) -> None:
        storage = SqlStorage(tmp_path)
        for key in ("b", "a", "c"):
            storage.set_item(key, key)
        assert storage.keys() == ["a", "b", "c"]


# ── factory ───────────────────────────────────────────────────────────────────


class TestCreateStorage:
    def test_json_backend(self, tmp_path: Path) -> None:
        storage = create_storage(_settings(tmp_path, "json"))
        assert isinstance(storage, JsonFileStorage)
        assert storage.path == tmp_path / "local_storage.json"

    def test_sqlite_backend(self, tmp_path: Path) -> None:
        storage = create_storage(_settings(tmp_path, "sqlite"))
        assert isinstance(storage, SqlStorage)

    def test_unknown_backend(self, tmp_path: Path) -> None:
        with pytest.raises(ValueError, match="Unknown STORAGE_BACKEND"):
            create_storage(_settings(tmp_path, "redis"))


class TestMemoryStorage:
    def test_keys_reflect_contents(self) -> None:
        storage = MemoryStorage()
        storage.set_item("a", "1")
        storage.set_item("b", "2")
        storage.remove_item("a")
        assert storage.keys() == ["b"]
