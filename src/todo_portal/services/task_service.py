import asyncio
import logging
from datetime import datetime, timedelta, timezone
from typing import Callable, List, Optional

from todo_portal.domain.errors import PersistenceError
from todo_portal.domain.task_models import OperationResult, Task, TaskPriority, new_task_id
from todo_portal.domain.task_view import compute_stats, derive_view
from todo_portal.domain.view_models import DerivedView, TaskStats, ViewParams
from todo_portal.infra.db.snapshot_store import SnapshotStore

logger = logging.getLogger("todo.tasks")

EMPTY_TEXT = "empty_text"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TaskService:
    """
    The only writer of the task collection.

    Mutations run one at a time under a lock: build the new list, swap it in,
    then write the snapshot. Readers (snapshot/view/stats) never wait and always
    see a whole list of frozen tasks.

    Missing ids are a successful no-op (changed=False); blank text is the only
    failure (ok=False). A failed write keeps the in-memory change and comes back
    as persisted=False with a warning.
    """

    def __init__(self, store: SnapshotStore, clock: Callable[[], datetime] = _utcnow):
        self.store = store
        self._clock = clock
        self._tasks: List[Task] = []
        self._lock = asyncio.Lock()
        self._loaded = False
        self._last_created_at: Optional[datetime] = None

    async def start(self) -> None:
        async with self._lock:
            await self._ensure_loaded()

    async def _ensure_loaded(self) -> None:
        if self._loaded:
            return
        self._tasks = await self.store.load()
        if self._tasks:
            self._last_created_at = max(t.created_at for t in self._tasks)
        self._loaded = True
        logger.info("engine.start", extra={"category": "tasks", "event": "engine.start", "count": len(self._tasks)})

    def _next_created_at(self) -> datetime:
        # Strictly increasing, so creation order survives a coarse clock.
        now = self._clock()
        if self._last_created_at is not None and now <= self._last_created_at:
            now = self._last_created_at + timedelta(microseconds=1)
        self._last_created_at = now
        return now

    def _next_id(self) -> str:
        taken = {t.id for t in self._tasks}
        task_id = new_task_id()
        while task_id in taken:
            task_id = new_task_id()
        return task_id

    async def _commit(self, tasks: List[Task], event: str, task: Optional[Task] = None, **fields) -> OperationResult:
        self._tasks = tasks
        try:
            await self.store.save(tasks)
        except PersistenceError as e:
            logger.warning(
                "store.save.failed",
                extra={"category": "tasks", "event": "store.save.failed", "op": event, "error": str(e)},
            )
            return OperationResult(
                ok=True,
                task=task,
                changed=True,
                persisted=False,
                warning=f"Change applied but not saved: {e}",
            )
        logger.info(event, extra={"category": "tasks", "event": event, "count": len(tasks), **fields})
        return OperationResult(ok=True, task=task, changed=True)

    @staticmethod
    def _rejected(event: str, task_id: Optional[str] = None) -> OperationResult:
        logger.info(
            f"{event}.rejected",
            extra={"category": "tasks", "event": f"{event}.rejected", "reason": EMPTY_TEXT, "task_id": task_id},
        )
        return OperationResult(ok=False, error=EMPTY_TEXT)

    # ---- mutations ----

    async def create(self, text: str, priority: TaskPriority = TaskPriority.medium) -> OperationResult:
        clean = text.strip()
        if not clean:
            return self._rejected("task.create")

        async with self._lock:
            await self._ensure_loaded()
            task = Task(
                id=self._next_id(),
                text=clean,
                priority=TaskPriority(priority),
                created_at=self._next_created_at(),
            )
            return await self._commit(
                [task, *self._tasks], "task.create", task=task, task_id=task.id, priority=task.priority.value
            )

    async def delete(self, task_id: str) -> OperationResult:
        async with self._lock:
            await self._ensure_loaded()
            remaining = [t for t in self._tasks if t.id != task_id]
            if len(remaining) == len(self._tasks):
                return OperationResult()
            return await self._commit(remaining, "task.delete", task_id=task_id)

    async def toggle_completed(self, task_id: str) -> OperationResult:
        async with self._lock:
            await self._ensure_loaded()
            found: Optional[Task] = None
            tasks: List[Task] = []
            for t in self._tasks:
                if t.id == task_id:
                    t = found = t.model_copy(update={"completed": not t.completed})
                tasks.append(t)
            if found is None:
                return OperationResult()
            return await self._commit(
                tasks, "task.toggle", task=found, task_id=task_id, completed=found.completed
            )

    async def edit(self, task_id: str, new_text: str, new_priority: TaskPriority) -> OperationResult:
        clean = new_text.strip()
        if not clean:
            return self._rejected("task.edit", task_id)

        priority = TaskPriority(new_priority)
        async with self._lock:
            await self._ensure_loaded()
            current = self.get(task_id)
            if current is None:
                return OperationResult()
            if current.text == clean and current.priority == priority:
                return OperationResult(task=current)

            updated = current.model_copy(update={"text": clean, "priority": priority})
            tasks = [updated if t.id == task_id else t for t in self._tasks]
            return await self._commit(
                tasks, "task.edit", task=updated, task_id=task_id, priority=priority.value
            )

    async def clear_completed(self) -> OperationResult:
        async with self._lock:
            await self._ensure_loaded()
            remaining = [t for t in self._tasks if not t.completed]
            if len(remaining) == len(self._tasks):
                return OperationResult()
            return await self._commit(
                remaining, "task.clear_completed", removed=len(self._tasks) - len(remaining)
            )

    async def mark_all_completed(self) -> OperationResult:
        async with self._lock:
            await self._ensure_loaded()
            if all(t.completed for t in self._tasks):
                return OperationResult()
            tasks = [t if t.completed else t.model_copy(update={"completed": True}) for t in self._tasks]
            return await self._commit(tasks, "task.complete_all")

    async def clear_all(self) -> OperationResult:
        async with self._lock:
            await self._ensure_loaded()
            if not self._tasks:
                return OperationResult()
            return await self._commit([], "task.clear_all", removed=len(self._tasks))

    # ---- reads ----

    def get(self, task_id: str) -> Optional[Task]:
        for t in self._tasks:
            if t.id == task_id:
                return t
        return None

    def snapshot(self) -> List[Task]:
        return list(self._tasks)

    def view(self, params: Optional[ViewParams] = None) -> DerivedView:
        return derive_view(self._tasks, params)

    def stats(self) -> TaskStats:
        return compute_stats(self._tasks)
