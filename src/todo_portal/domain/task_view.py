"""
Derived view pipeline: filter -> search -> sort, plus statistics.

Everything here is pure. Callers pass a collection snapshot and the view
parameters and get a fresh DerivedView back; nothing is cached between calls.
"""
from __future__ import annotations

import locale
import math
import random
from typing import Callable, Dict, List, Optional, Sequence

from todo_portal.domain.task_models import PRIORITY_WEIGHT, Task, TaskPriority
from todo_portal.domain.view_models import DerivedView, FilterMode, SortKey, TaskStats, ViewParams

_FILTERS: Dict[FilterMode, Callable[[Task], bool]] = {
    FilterMode.all: lambda t: True,
    FilterMode.active: lambda t: not t.completed,
    FilterMode.completed: lambda t: t.completed,
    FilterMode.high: lambda t: t.priority == TaskPriority.high,
}

EMPTY_MESSAGES: Dict[FilterMode, str] = {
    FilterMode.all: "Start adding tasks!",
    FilterMode.active: "All tasks are done!",
    FilterMode.completed: "No completed tasks yet",
    FilterMode.high: "No important tasks",
}

MOTIVATION_MESSAGES = (
    "Small steps every day lead to big results!",
    "Now is the time to do something great!",
    "Productivity is not being busy, it is being effective!",
    "Every finished task is a step towards the goal!",
    "Today is a perfect day to start!",
)

QUICK_SUGGESTIONS = (
    "Do morning exercises",
    "Read a book",
    "Schedule a meeting",
    "Buy groceries",
)


def filter_tasks(tasks: Sequence[Task], mode: FilterMode) -> List[Task]:
    pred = _FILTERS[mode]
    return [t for t in tasks if pred(t)]


def search_tasks(tasks: Sequence[Task], query: str) -> List[Task]:
    """Case-insensitive substring match on text. Empty query keeps everything."""
    if not query:
        return list(tasks)
    needle = query.lower()
    return [t for t in tasks if needle in t.text.lower()]


def use_host_collation() -> bool:
    """Switch LC_COLLATE to the host default. Returns False when the host locale is unusable."""
    try:
        locale.setlocale(locale.LC_COLLATE, "")
    except locale.Error:
        return False
    return True


def _collation_key(task: Task):
    # Case-insensitive first so a C-locale host still puts "apple" before "Banana".
    return (locale.strxfrm(task.text.lower()), locale.strxfrm(task.text))


def sort_tasks(tasks: Sequence[Task], key: SortKey) -> List[Task]:
    # sorted() is stable, including with reverse=True, so equal keys keep
    # their incoming relative order.
    if key == SortKey.newest:
        return sorted(tasks, key=lambda t: t.created_at, reverse=True)
    if key == SortKey.oldest:
        return sorted(tasks, key=lambda t: t.created_at)
    if key == SortKey.priority:
        return sorted(tasks, key=lambda t: PRIORITY_WEIGHT[t.priority], reverse=True)
    if key == SortKey.alphabetical:
        return sorted(tasks, key=_collation_key)
    return list(tasks)


def completion_rate(completed: int, total: int) -> int:
    if total == 0:
        return 0
    # Half-up rounding; round() would use banker's rounding.
    return int(math.floor(100 * completed / total + 0.5))


def compute_stats(tasks: Sequence[Task]) -> TaskStats:
    total = len(tasks)
    completed = sum(1 for t in tasks if t.completed)
    high = sum(1 for t in tasks if t.priority == TaskPriority.high)
    return TaskStats(
        total=total,
        completed=completed,
        active=total - completed,
        high_priority=high,
        completion_rate=completion_rate(completed, total),
    )


def derive_view(tasks: Sequence[Task], params: Optional[ViewParams] = None) -> DerivedView:
    params = params or ViewParams()
    visible = filter_tasks(tasks, params.filter)
    visible = search_tasks(visible, params.search)
    visible = sort_tasks(visible, params.sort)
    return DerivedView(
        tasks=visible,
        stats=compute_stats(tasks),
        empty_message=None if visible else EMPTY_MESSAGES[params.filter],
    )


def pick_motivation(rng: Optional[random.Random] = None) -> str:
    return (rng or random).choice(MOTIVATION_MESSAGES)
