from __future__ import annotations


class TodoPortalError(Exception):
    """Base class for unexpected faults raised by the portal."""


class PersistenceError(TodoPortalError):
    """The durable store could not be read or written."""


class SnapshotCorruptError(PersistenceError):
    """A stored snapshot exists but cannot be decoded into tasks."""
