"""Tests for world map ingestion."""

from pathlib import Path

import pytest

from wayfinder.memory.store import WorldMemoryStore
from wayfinder.memory.world_map import WorldMapIngestor

WORLD_MAP = {
    "lamp": {"commands": ["Turn On Light", "lamp"], "target": "/office", "label": "Desk lamp"},
    "door": {"commands": ["open door"]},
}


@pytest.fixture
def store(tmp_path: Path):
    return WorldMemoryStore(tmp_path / "worldMemory.json")


def _without_timestamps(snapshot: dict) -> dict:
    return {
        mesh: {k: v for k, v in record.items() if k != "lastUpdated"}
        for mesh, record in snapshot.items()
    }


def test_ingest_merges_into_memory(store: WorldMemoryStore):
    count = WorldMapIngestor(store).ingest(WORLD_MAP)

    assert count == 2
    lamp = store.get("lamp")
    assert lamp.commands == ["turn on light", "lamp"]
    assert lamp.context == {"target": "/office", "label": "Desk lamp"}
    assert "commands" not in lamp.context
    assert store.get("door").commands == ["open door"]


def test_ingest_replaces_world_map(store: WorldMemoryStore):
    ingestor = WorldMapIngestor(store)
    ingestor.ingest(WORLD_MAP)
    ingestor.ingest({"window": {}})

    assert store.world_map == {"window": {}}
    # Memory keeps what it learned earlier
    assert "lamp" in store
    assert "window" in store


def test_ingest_is_idempotent(store: WorldMemoryStore):
    ingestor = WorldMapIngestor(store)
    ingestor.ingest(WORLD_MAP)
    first = _without_timestamps(store.snapshot())

    ingestor.ingest(WORLD_MAP)
    assert _without_timestamps(store.snapshot()) == first


def test_ingest_persists(store: WorldMemoryStore):
    WorldMapIngestor(store).ingest(WORLD_MAP)
    assert store.path.exists()


def test_ingest_without_persist(store: WorldMemoryStore):
    WorldMapIngestor(store).ingest(WORLD_MAP, persist=False)
    assert not store.path.exists()


def test_ingest_skips_malformed_entries(store: WorldMemoryStore):
    WorldMapIngestor(store).ingest({"bad": "not an object", "ok": {"commands": "wave"}})
    assert "bad" not in store
    assert store.get("ok").commands == ["wave"]
