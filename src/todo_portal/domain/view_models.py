from __future__ import annotations
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from todo_portal.domain.task_models import Task

class FilterMode(str, Enum):
    all = "all"
    active = "active"
    completed = "completed"
    high = "high"

class SortKey(str, Enum):
    newest = "newest"
    oldest = "oldest"
    priority = "priority"
    alphabetical = "alphabetical"

class ViewParams(BaseModel):
    model_config = ConfigDict(frozen=True)

    filter: FilterMode = FilterMode.all
    search: str = ""
    sort: SortKey = SortKey.newest

class TaskStats(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    total: int = 0
    completed: int = 0
    active: int = 0
    high_priority: int = Field(default=0, alias="highPriority")
    completion_rate: int = Field(default=0, alias="completionRate")

class DerivedView(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    tasks: List[Task]
    stats: TaskStats
    empty_message: Optional[str] = Field(default=None, alias="emptyMessage")
