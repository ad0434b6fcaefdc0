import pytest

from gradtrack.exceptions import MalformedPersistedData
from gradtrack.io import JSONFileStorage, MemoryStorage


def test_memory_storage():
    # given
    storage = MemoryStorage()

    # when
    storage.set_item("key", "value")

    # then
    assert storage.get_item("key") == "value"
    storage.remove_item("key")
    assert storage.get_item("key") is None


def test_file_storage_of_missing_item_is_none(tmp_path):
    assert JSONFileStorage(tmp_path).get_item("gradtrack-storage") is None


def test_file_storage_writes_one_file_per_key(tmp_path):
    # given
    storage = JSONFileStorage(tmp_path / "data")

    # when
    storage.set_item("gradtrack-storage", '{"version": 4}')
    storage.set_item("gradtrack-storage", '{"version": 5}')

    # then
    assert storage.get_item("gradtrack-storage") == '{"version": 5}'
    assert [p.name for p in (tmp_path / "data").iterdir()] == ["gradtrack-storage.json"]


def test_file_storage_remove_item(tmp_path):
    # given
    storage = JSONFileStorage(tmp_path)
    storage.set_item("key", "value")

    # when
    storage.remove_item("key")
    storage.remove_item("key")

    # then
    assert storage.get_item("key") is None


def test_file_storage_rejects_path_like_keys(tmp_path):
    with pytest.raises(ValueError):
        JSONFileStorage(tmp_path).set_item("../escape", "value")


def test_file_storage_of_undecodable_item_raises_malformed(tmp_path):
    # given
    (tmp_path / "key.json").write_bytes(b"\xff\xfe{bad")

    # then
    with pytest.raises(MalformedPersistedData):
        JSONFileStorage(tmp_path).get_item("key")
