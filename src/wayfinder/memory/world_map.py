"""Fold front-end world maps into persistent world memory."""

from typing import Any

from wayfinder.core.logging import get_logger
from wayfinder.memory.store import WorldMemoryStore

logger = get_logger("memory.world_map")


class WorldMapIngestor:
    """Replace the cached world map and merge each mesh into memory."""

    def __init__(self, store: WorldMemoryStore):
        self.store = store

    def ingest(self, world_map: dict[str, Any], persist: bool = True) -> int:
        """Merge every (mesh, info) pair; returns the number of meshes seen.

        ``info["commands"]`` feeds the record's command set; every other
        field lands in the record's context.
        """
        self.store.replace_world_map(world_map)

        for mesh, info in world_map.items():
            if not isinstance(info, dict):
                logger.warning(f"Skipping world map entry {mesh!r}: expected object")
                continue
            commands = info.get("commands") or []
            if isinstance(commands, str):
                commands = [commands]
            context = {key: value for key, value in info.items() if key != "commands"}
            self.store.upsert(mesh, context=context, commands=commands)

        if persist:
            self.store.persist()
        return len(world_map)
