"""
Tests for snapshot storage.
"""
import json

import pytest

from canonical_mapper.errors import StorageError
from canonical_mapper.storage import JsonFileStorage, MemoryStorage
from canonical_mapper.store import MappingStore


class TestJsonFileStorage:
    """File-backed session snapshot"""

    def test_missing_file_loads_nothing(self, tmp_path):
        assert JsonFileStorage(tmp_path / "session.json").load() is None

    def test_save_then_load(self, tmp_path):
        storage = JsonFileStorage(tmp_path / "nested" / "session.json")
        store = MappingStore(storage=storage)
        provider = store.add_provider("garmin", {"sleep": {"duration": 1}})
        field = store.add_canonical_field()
        store.set_mapping(field["id"], provider["id"], "sleep.duration")

        restored = MappingStore.from_storage(JsonFileStorage(tmp_path / "nested" / "session.json"))
        assert restored.dataset == store.dataset

    def test_save_overwrites(self, tmp_path):
        path = tmp_path / "session.json"
        storage = JsonFileStorage(path)
        storage.save({"name": "one", "providers": [], "canonicalFields": []})
        storage.save({"name": "two", "providers": [], "canonicalFields": []})
        assert json.loads(path.read_text(encoding="utf-8"))["name"] == "two"
        assert not (tmp_path / "session.json.tmp").exists()

    def test_corrupt_snapshot_falls_back_to_empty(self, tmp_path):
        path = tmp_path / "session.json"
        path.write_text("{broken", encoding="utf-8")

        store = MappingStore.from_storage(JsonFileStorage(path))

        assert store.dataset == {"name": "", "providers": [], "canonicalFields": []}

    def test_wrong_shape_is_treated_as_corrupt(self, tmp_path):
        path = tmp_path / "session.json"
        path.write_text(json.dumps({"providers": "nope"}), encoding="utf-8")
        assert JsonFileStorage(path).load() is None

    def test_unwritable_location_raises_storage_error(self, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("file, not a directory", encoding="utf-8")
        storage = JsonFileStorage(blocker / "session.json")
        with pytest.raises(StorageError):
            storage.save({"name": "", "providers": [], "canonicalFields": []})


class TestMemoryStorage:
    """In-memory snapshot"""

    def test_snapshots_are_copies(self):
        storage = MemoryStorage()
        dataset = {"name": "a", "providers": [], "canonicalFields": []}
        storage.save(dataset)
        dataset["name"] = "changed"
        assert storage.load()["name"] == "a"
        assert storage.save_count == 1

    def test_empty_storage_loads_nothing(self):
        assert MemoryStorage().load() is None
