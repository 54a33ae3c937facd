"""
Exception types raised by TodoPro.

Missing tasks are not errors: lookups return None (or False for deletes).
"""


class TodoproError(Exception):
    """Base class for all TodoPro errors."""


class ValidationError(TodoproError, ValueError):
    """A field value was rejected by the task store's rules."""


class ConflictError(TodoproError):
    """A unique field (e.g. task id) already exists."""


class UpstreamError(TodoproError):
    """The database is unavailable or misconfigured."""
