"""
Exception taxonomy.

Each error carries the HTTP status it maps to at the API boundary.
Only UpstreamError is allowed to fail a /api/think request; persistence
errors never leave the memory store.
"""


class WayfinderError(Exception):
    """Base for all wayfinder errors."""

    status_code: int = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class MissingFieldError(WayfinderError):
    """A required request field was absent or empty."""

    status_code = 400

    def __init__(self, field: str, message: str | None = None):
        super().__init__(message or f"Missing {field}")
        self.field = field


class PersistenceError(WayfinderError):
    """Durable store read or write failed."""


class UpstreamError(WayfinderError):
    """Generative fallback transport or parse failure."""
