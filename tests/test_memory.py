"""Tests for world memory store."""

import json
import threading
from pathlib import Path

import pytest

from wayfinder.memory.store import WorldMemoryStore


@pytest.fixture
def memory_store(tmp_path: Path):
    """Create a store backed by a temporary file."""
    store = WorldMemoryStore(tmp_path / "worldMemory.json")
    store.load()
    return store


def test_load_missing_file_starts_empty(memory_store: WorldMemoryStore):
    assert len(memory_store) == 0
    assert memory_store.snapshot() == {}


def test_load_corrupt_file_is_not_fatal(tmp_path: Path):
    path = tmp_path / "worldMemory.json"
    path.write_text("{not json", encoding="utf-8")

    store = WorldMemoryStore(path)
    store.load()
    assert len(store) == 0


def test_load_non_object_file_is_not_fatal(tmp_path: Path):
    path = tmp_path / "worldMemory.json"
    path.write_text("[1, 2, 3]", encoding="utf-8")

    store = WorldMemoryStore(path)
    store.load()
    assert len(store) == 0


def test_upsert_creates_record_with_defaults(memory_store: WorldMemoryStore):
    snapshot = memory_store.upsert("lamp")
    assert "lamp" in snapshot
    assert snapshot["lamp"]["action"] == "defined"
    assert snapshot["lamp"]["context"] == {}
    assert snapshot["lamp"]["commands"] == []
    assert "lastUpdated" in snapshot["lamp"]


def test_upsert_unions_commands_case_insensitively(memory_store: WorldMemoryStore):
    memory_store.upsert("lamp", commands=["turn on light"])
    first = memory_store.get("lamp").last_updated

    memory_store.upsert("lamp", commands=["TURN ON LIGHT", "dim"])
    record = memory_store.get("lamp")

    assert set(record.commands) == {"turn on light", "dim"}
    assert len(record.commands) == 2
    assert record.last_updated > first


def test_upsert_merges_context(memory_store: WorldMemoryStore):
    memory_store.upsert("lamp", context={"target": "/office", "color": "red"})
    memory_store.upsert("lamp", context={"color": "blue"})

    assert memory_store.get("lamp").context == {"target": "/office", "color": "blue"}


def test_upsert_action_only_overridden_when_given(memory_store: WorldMemoryStore):
    memory_store.upsert("lamp", action="light")
    memory_store.upsert("lamp", action="")
    memory_store.upsert("lamp", action=None)
    assert memory_store.get("lamp").action == "light"

    memory_store.upsert("lamp", action="switch")
    assert memory_store.get("lamp").action == "switch"


def test_upsert_returns_full_snapshot(memory_store: WorldMemoryStore):
    memory_store.upsert("lamp")
    snapshot = memory_store.upsert("desk")
    assert list(snapshot) == ["lamp", "desk"]


def test_snapshot_is_a_copy(memory_store: WorldMemoryStore):
    memory_store.upsert("lamp", commands=["dim"])
    snapshot = memory_store.snapshot()
    snapshot["lamp"]["commands"].append("bright")
    assert memory_store.get("lamp").commands == ["dim"]


def test_persist_and_reload(tmp_path: Path):
    path = tmp_path / "worldMemory.json"
    store = WorldMemoryStore(path)
    store.upsert("lamp", context={"target": "/office"}, commands=["turn on light"])
    assert store.persist()

    data = json.loads(path.read_text(encoding="utf-8"))
    assert data["lamp"]["commands"] == ["turn on light"]

    reloaded = WorldMemoryStore(path)
    reloaded.load()
    assert reloaded.snapshot() == store.snapshot()


def test_persist_disabled_writes_nothing(tmp_path: Path):
    path = tmp_path / "worldMemory.json"
    store = WorldMemoryStore(path, persistence_enabled=False)
    store.upsert("lamp")

    assert not store.persist()
    assert not path.exists()


def test_persist_failure_is_swallowed(tmp_path: Path):
    """A path that cannot be written is logged, never raised."""
    blocker = tmp_path / "blocker"
    blocker.write_text("", encoding="utf-8")
    store = WorldMemoryStore(blocker / "worldMemory.json")
    store.upsert("lamp")

    assert not store.persist()
    assert "lamp" in store


def test_replace_world_map(memory_store: WorldMemoryStore):
    memory_store.replace_world_map({"a": {}})
    memory_store.replace_world_map({"b": {}})
    assert memory_store.world_map == {"b": {}}


def test_persist_uses_given_snapshot(tmp_path: Path):
    path = tmp_path / "worldMemory.json"
    store = WorldMemoryStore(path)
    store.upsert("lamp")
    snapshot = store.snapshot()
    store.upsert("desk")

    assert store.persist(snapshot)
    assert list(json.loads(path.read_text(encoding="utf-8"))) == ["lamp"]


def test_persist_leaves_no_temp_files(tmp_path: Path):
    store = WorldMemoryStore(tmp_path / "worldMemory.json")
    store.upsert("lamp")
    store.persist()
    store.persist()
    assert [p.name for p in tmp_path.iterdir()] == ["worldMemory.json"]


def test_persist_from_threads_while_mutating(tmp_path: Path):
    """Writer threads never raise or corrupt the file while records change."""
    path = tmp_path / "worldMemory.json"
    store = WorldMemoryStore(path)
    errors: list[Exception] = []
    stop = threading.Event()

    def writer():
        while not stop.is_set():
            try:
                store.persist()
            except Exception as e:
                errors.append(e)

    threads = [threading.Thread(target=writer) for _ in range(4)]
    for t in threads:
        t.start()
    try:
        for i in range(600):
            snapshot = store.upsert(f"mesh-{i % 100}", commands=[f"cmd {i}"])
            store.persist(snapshot)
    finally:
        stop.set()
        for t in threads:
            t.join()

    assert errors == []
    reloaded = WorldMemoryStore(path)
    reloaded.load()
    assert len(reloaded) > 0
