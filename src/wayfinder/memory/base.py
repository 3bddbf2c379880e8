"""World memory record structure."""

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any

DEFAULT_ACTION = "defined"

_RECORD_KEYS = {"action", "context", "commands", "lastUpdated"}


def normalize_command(command: str) -> str:
    """Lower-case and trim a trigger phrase."""
    return str(command).lower().strip()


def _now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class MemoryRecord:
    """What the router has learned about one mesh.

    Commands are kept as an ordered list of unique, normalized phrases so
    the JSON file stays stable between writes.
    """

    action: str = DEFAULT_ACTION
    context: dict[str, Any] = field(default_factory=dict)
    commands: list[str] = field(default_factory=list)
    last_updated: datetime = field(default_factory=_now)

    @property
    def target(self) -> str | None:
        """Navigation destination stored in context, if any."""
        return self.context.get("target") or None

    def add_commands(self, commands: list[str]) -> None:
        """Union new phrases into the command set."""
        for command in commands:
            cleaned = normalize_command(command)
            if cleaned and cleaned not in self.commands:
                self.commands.append(cleaned)

    def touch(self) -> None:
        """Refresh the timestamp, keeping it strictly increasing."""
        now = _now()
        if now <= self.last_updated:
            now = self.last_updated + timedelta(microseconds=1)
        self.last_updated = now

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the JSON shape the front-end reads."""
        return {
            "action": self.action,
            "context": dict(self.context),
            "commands": list(self.commands),
            "lastUpdated": self.last_updated.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "MemoryRecord":
        """Deserialize from stored JSON.

        Older files spread world-map fields onto the record itself; any
        unknown top-level key is folded into ``context``.
        """
        context = dict(data.get("context") or {})
        for key, value in data.items():
            if key not in _RECORD_KEYS:
                context.setdefault(key, value)

        record = cls(action=data.get("action") or DEFAULT_ACTION, context=context)
        record.add_commands(data.get("commands") or [])

        stamp = data.get("lastUpdated")
        if isinstance(stamp, str):
            parsed = datetime.fromisoformat(stamp.replace("Z", "+00:00"))
            if parsed.tzinfo is None:
                parsed = parsed.replace(tzinfo=timezone.utc)
            record.last_updated = parsed
        return record
