import json

import pytest

from canonical_mapper.storage import MemoryStorage
from canonical_mapper.store import MappingStore

GARMIN_RAW = {"sleep": {"duration": 27540, "stage": "deep"}}
SUUNTO_RAW = [{"entry": {"Duration": 27300, "HR": [{"avg": 55}]}, "source": "SuuntoApp"}]


@pytest.fixture
def storage():
    return MemoryStorage()


@pytest.fixture
def store(storage):
    return MappingStore(storage=storage)


@pytest.fixture
def garmin(store):
    return store.add_provider("garmin", GARMIN_RAW)


@pytest.fixture
def suunto(store):
    return store.add_provider("suunto", SUUNTO_RAW)


@pytest.fixture
def write_json(tmp_path):
    def _write(name, payload):
        path = tmp_path / name
        if isinstance(payload, str):
            path.write_text(payload, encoding="utf-8")
        else:
            path.write_text(json.dumps(payload), encoding="utf-8")
        return str(path)
    return _write
