from __future__ import annotations
import logging
from typing import List, Optional, Sequence

from todo_portal.domain.errors import PersistenceError, SnapshotCorruptError
from todo_portal.domain.task_models import Task
from todo_portal.infra.db.snapshot_codec import TASKS_KEY, decode_tasks, encode_tasks

logger = logging.getLogger("todo.store")


class SnapshotStore:
    """
    Key/value snapshot store holding the task collection under a fixed key.

    Subclasses provide raw access (`get_value` / `put_value`); this class turns
    it into the task-level contract:
    - load() never raises: missing, corrupt or unreadable snapshots become []
    - save() writes the whole collection at once and raises PersistenceError on failure
    """

    async def init(self) -> None:
        return None

    async def get_value(self, key: str) -> Optional[str]:
        raise NotImplementedError

    async def put_value(self, key: str, value: str) -> None:
        raise NotImplementedError

    async def close(self) -> None:
        return None

    async def load(self) -> List[Task]:
        try:
            raw = await self.get_value(TASKS_KEY)
        except PersistenceError as e:
            logger.warning(
                "store.load.failed",
                extra={"category": "store", "event": "store.load.failed", "error": str(e)},
            )
            return []

        if raw is None:
            return []

        try:
            tasks = decode_tasks(raw)
        except SnapshotCorruptError as e:
            logger.warning(
                "store.load.corrupt",
                extra={"category": "store", "event": "store.load.corrupt", "error": str(e)},
            )
            return []

        logger.info("store.load", extra={"category": "store", "event": "store.load", "count": len(tasks)})
        return tasks

    async def save(self, tasks: Sequence[Task]) -> None:
        await self.put_value(TASKS_KEY, encode_tasks(tasks))
        logger.debug("store.save", extra={"category": "store", "event": "store.save", "count": len(tasks)})
