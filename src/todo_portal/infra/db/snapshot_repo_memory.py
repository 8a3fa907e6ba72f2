from __future__ import annotations
from typing import Dict, Optional

from todo_portal.infra.db.snapshot_store import SnapshotStore

class InMemorySnapshotStore(SnapshotStore):
    """
    Process-local store for tests and throwaway runs.
    Values are kept as the same encoded strings the SQLite store writes.
    """
    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._values: Dict[str, str] = dict(initial or {})

    async def get_value(self, key: str) -> Optional[str]:
        return self._values.get(key)

    async def put_value(self, key: str, value: str) -> None:
        self._values[key] = value
