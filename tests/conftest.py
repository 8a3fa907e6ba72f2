from __future__ import annotations

from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

from todo_portal.domain.errors import PersistenceError
from todo_portal.domain.task_models import Task, TaskPriority
from todo_portal.infra.db.snapshot_repo_memory import InMemorySnapshotStore
from todo_portal.infra.db.snapshot_repo_sqlite import SQLiteSnapshotStore
from todo_portal.services.task_service import TaskService

BASE_TIME = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def anyio_backend() -> str:
    # aiosqlite is asyncio-only
    return "asyncio"


def make_task(
    task_id: str,
    text: str = "task",
    *,
    completed: bool = False,
    priority: TaskPriority = TaskPriority.medium,
    minutes: int = 0,
) -> Task:
    return Task(
        id=task_id,
        text=text,
        completed=completed,
        priority=priority,
        created_at=BASE_TIME + timedelta(minutes=minutes),
    )


class FlakyStore(InMemorySnapshotStore):
    """In-memory store whose writes can be switched off."""

    def __init__(self) -> None:
        super().__init__()
        self.fail_writes = False

    async def put_value(self, key: str, value: str) -> None:
        if self.fail_writes:
            raise PersistenceError("disk full")
        await super().put_value(key, value)


@pytest.fixture
def memory_store() -> InMemorySnapshotStore:
    return InMemorySnapshotStore()


@pytest.fixture
def flaky_store() -> FlakyStore:
    return FlakyStore()


@pytest.fixture
def sqlite_path(tmp_path: Path) -> Path:
    return tmp_path / "data" / "todo.db"


@pytest.fixture
async def sqlite_store(sqlite_path: Path):
    store = SQLiteSnapshotStore.from_path(sqlite_path)
    yield store
    await store.close()


@pytest.fixture
def service(memory_store: InMemorySnapshotStore) -> TaskService:
    return TaskService(memory_store)
