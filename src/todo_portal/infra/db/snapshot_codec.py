from __future__ import annotations
from typing import List, Sequence

from pydantic import TypeAdapter, ValidationError

from todo_portal.domain.errors import SnapshotCorruptError
from todo_portal.domain.task_models import Task

# Fixed keys inside the snapshot store.
TASKS_KEY = "todos"
THEME_KEY = "theme"

_TASK_LIST = TypeAdapter(List[Task])


def encode_tasks(tasks: Sequence[Task]) -> str:
    return _TASK_LIST.dump_json(list(tasks), by_alias=True).decode("utf-8")


def decode_tasks(raw: str) -> List[Task]:
    """
    Parse a stored snapshot.
    Raises SnapshotCorruptError for bad JSON, a non-list payload, an invalid
    record or duplicate ids.
    """
    try:
        tasks = _TASK_LIST.validate_json(raw)
    except ValidationError as e:
        raise SnapshotCorruptError(f"invalid task snapshot: {e.error_count()} error(s)") from e

    seen = set()
    for t in tasks:
        if t.id in seen:
            raise SnapshotCorruptError(f"duplicate task id in snapshot: {t.id}")
        seen.add(t.id)
    return tasks
