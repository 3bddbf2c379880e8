"""
Core module - configuration, logging, errors, shared types.

Components:
- config: Settings management via pydantic-settings
- types: Shared data structures (ActionResult, PortalContext)
- errors: Exception taxonomy mapped to HTTP status codes
- logging: Structured logging setup
"""

from wayfinder.core.config import Settings
from wayfinder.core.types import ActionResult, PortalContext

__all__ = ["Settings", "ActionResult", "PortalContext"]
