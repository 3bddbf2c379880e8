"""JSON-file world memory store with best-effort write-through."""

import json
import os
import tempfile
import threading
from pathlib import Path
from typing import Any

from wayfinder.core.errors import PersistenceError
from wayfinder.core.logging import get_logger
from wayfinder.memory.base import DEFAULT_ACTION, MemoryRecord

logger = get_logger("memory.store")


class WorldMemoryStore:
    """Process-wide mesh -> MemoryRecord map plus the transient world map.

    Disk writes may run on a worker thread while requests keep mutating
    records: snapshots and mutations share one lock, and writes are
    serialized behind another so a slow disk never blocks an upsert.
    """

    def __init__(self, path: Path, persistence_enabled: bool = True):
        self.path = path
        self.persistence_enabled = persistence_enabled
        self.world_map: dict[str, Any] = {}
        self._records: dict[str, MemoryRecord] = {}
        self._lock = threading.RLock()
        self._write_lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._records)

    def __contains__(self, mesh: str) -> bool:
        return mesh in self._records

    # Lifecycle

    def load(self) -> None:
        """Read the persisted store. Never fatal: a bad file means empty memory."""
        try:
            records = self._read()
        except PersistenceError as e:
            logger.error(f"Failed to load world memory: {e}")
            records = {}

        with self._lock:
            self._records = records

        if self._records:
            logger.info(f"Loaded {len(self._records)} world memory objects from {self.path}")
        else:
            logger.info("No existing world memory, starting fresh")

    def persist(self, snapshot: dict[str, dict[str, Any]] | None = None) -> bool:
        """Write the whole store to disk. Returns True if a write happened.

        Pass ``snapshot`` to write exactly the state a request produced
        instead of whatever the records hold when the write runs.
        """
        if not self.persistence_enabled:
            logger.debug("Skipping world memory save (persistence disabled)")
            return False

        try:
            data = snapshot if snapshot is not None else self.snapshot()
            with self._write_lock:
                self._write(data)
        except PersistenceError as e:
            logger.error(f"Failed to save world memory: {e}")
            return False

        logger.info(f"World memory saved ({len(data)} objects)")
        return True

    # Records

    def get(self, mesh: str) -> MemoryRecord | None:
        return self._records.get(mesh)

    def upsert(
        self,
        mesh: str,
        action: str | None = None,
        context: dict[str, Any] | None = None,
        commands: list[str] | None = None,
    ) -> dict[str, dict[str, Any]]:
        """Create or merge a record and return the full snapshot.

        Commands are unioned, context is shallow-merged (new keys win) and
        action only changes when a non-empty value is given.
        """
        with self._lock:
            record = self._records.get(mesh)
            if record is None:
                record = MemoryRecord(action=action or DEFAULT_ACTION)
                self._records[mesh] = record
                logger.debug(f"Created memory record for {mesh!r}")

            record.add_commands(commands or [])
            if action:
                record.action = action
            if context:
                record.context.update(context)
            record.touch()

            logger.info(f"Learned about {mesh!r}: {len(record.commands)} commands, action={record.action!r}")
            return self.snapshot()

    def all(self) -> dict[str, MemoryRecord]:
        """Read-only view of the records, in insertion order."""
        with self._lock:
            return dict(self._records)

    def snapshot(self) -> dict[str, dict[str, Any]]:
        """JSON-ready copy of every record."""
        with self._lock:
            return {mesh: record.to_dict() for mesh, record in self._records.items()}

    def replace_world_map(self, world_map: dict[str, Any]) -> None:
        self.world_map = dict(world_map)
        logger.info(f"Updated world map with {len(self.world_map)} entries")

    # Storage helpers

    def _read(self) -> dict[str, MemoryRecord]:
        if not self.path.exists():
            return {}
        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
            if not isinstance(raw, dict):
                raise ValueError(f"expected an object, got {type(raw).__name__}")
            return {mesh: MemoryRecord.from_dict(data) for mesh, data in raw.items()}
        except (OSError, ValueError, TypeError, AttributeError) as e:
            raise PersistenceError(f"{self.path}: {e}") from e

    def _write(self, data: dict[str, dict[str, Any]]) -> None:
        """Write to a temp file beside the target, then swap it in."""
        tmp_name = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            payload = json.dumps(data, indent=2)
            with tempfile.NamedTemporaryFile(
                "w",
                encoding="utf-8",
                dir=self.path.parent,
                prefix=f".{self.path.name}.",
                suffix=".tmp",
                delete=False,
            ) as tmp:
                tmp_name = tmp.name
                tmp.write(payload)
            os.replace(tmp_name, self.path)
        except (OSError, TypeError, ValueError) as e:
            if tmp_name and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise PersistenceError(f"{self.path}: {e}") from e
