"""
Shared type definitions.

Request context and response payload used across modules.
"""

from dataclasses import dataclass
from typing import Any

DEFAULT_PORTAL = "root"


@dataclass
class ActionResult:
    """Action token sent back to the front-end.

    ``action=None`` is a deliberate no-op: the utterance was understood
    and intentionally ignored.
    """

    action: str | None
    target: str | None = None
    awareness: str | None = None

    @classmethod
    def noop(cls, awareness: str | None = None) -> "ActionResult":
        return cls(action=None, target=None, awareness=awareness)

    @property
    def is_noop(self) -> bool:
        return self.action is None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"action": self.action, "target": self.target}
        if self.awareness:
            data["awareness"] = self.awareness
        return data


@dataclass
class PortalContext:
    """Where the caller is when they spoke."""

    transcript: str
    current_portal: str = DEFAULT_PORTAL
    current_mesh: str | None = None

    @property
    def clean(self) -> str:
        """Normalized transcript all matching runs against."""
        return self.transcript.lower().strip()
