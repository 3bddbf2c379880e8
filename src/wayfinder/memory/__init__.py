"""
Memory module - learned knowledge about the 3D world.

Layers:
- world map: transient topology pushed by the front-end (replaced wholesale)
- world memory: mesh name -> learned commands, action, context (persistent)

Storage: single JSON file, rewritten on every mutation
"""

from wayfinder.memory.base import MemoryRecord, normalize_command
from wayfinder.memory.store import WorldMemoryStore
from wayfinder.memory.world_map import WorldMapIngestor

__all__ = ["MemoryRecord", "WorldMemoryStore", "WorldMapIngestor", "normalize_command"]
