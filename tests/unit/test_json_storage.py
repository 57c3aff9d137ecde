"""
Unit tests for safetyhalo.core.persistence.json_storage.

These tests validate:
- JSON file records round-trip and missing records read as None
- corrupt files raise StorageError instead of leaking decode errors
- invalid keys are rejected
- MemoryStorage mirrors the same semantics
"""

from __future__ import annotations

import pytest

from safetyhalo.core.persistence.json_storage import JsonFileStorage, MemoryStorage, StorageError


def test_file_storage_round_trip(tmp_path) -> None:
    s = JsonFileStorage(tmp_path / "store")
    assert s.read("settings") is None

    s.write("settings", {"alertsEnabled": False, "confidenceThreshold": 0.5})

    assert (tmp_path / "store" / "settings.json").exists()
    assert s.read("settings") == {"alertsEnabled": False, "confidenceThreshold": 0.5}


def test_file_storage_overwrite_leaves_no_temp_files(tmp_path) -> None:
    s = JsonFileStorage(tmp_path)
    s.write("event_log", [1])
    s.write("event_log", [2])

    assert s.read("event_log") == [2]
    assert sorted(p.name for p in tmp_path.iterdir()) == ["event_log.json"]


def test_file_storage_corrupt_record(tmp_path) -> None:
    (tmp_path / "settings.json").write_text("{not json", encoding="utf-8")
    with pytest.raises(StorageError):
        JsonFileStorage(tmp_path).read("settings")


def test_file_storage_rejects_bad_key(tmp_path) -> None:
    with pytest.raises(StorageError):
        JsonFileStorage(tmp_path).write("../escape", 1)


def test_file_storage_unencodable_value(tmp_path) -> None:
    with pytest.raises(StorageError):
        JsonFileStorage(tmp_path).write("k", object())


def test_memory_storage_semantics() -> None:
    s = MemoryStorage()
    s.write("k", {"a": [1, 2]})
    assert s.read("k") == {"a": [1, 2]}

    s.records["bad"] = "{"
    with pytest.raises(StorageError):
        s.read("bad")
