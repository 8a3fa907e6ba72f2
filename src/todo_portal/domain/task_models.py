from __future__ import annotations
from pydantic import BaseModel, ConfigDict, Field, field_validator
from enum import Enum
from datetime import datetime, timezone
from typing import Optional
import uuid

class TaskPriority(str, Enum):
    low = "low"
    medium = "medium"
    high = "high"

PRIORITY_WEIGHT = {
    TaskPriority.high: 3,
    TaskPriority.medium: 2,
    TaskPriority.low: 1,
}

class TaskCreate(BaseModel):
    # Validity is decided by the engine after trimming.
    text: str
    priority: TaskPriority = TaskPriority.medium

class TaskEdit(BaseModel):
    text: str
    priority: TaskPriority

class Task(BaseModel):
    """
    A single to-do item.

    Instances are frozen: the engine replaces a task on every change, so a
    snapshot handed to a reader never changes underneath it.
    Persisted and serialized with the `createdAt` alias.
    """
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str
    text: str
    completed: bool = False
    priority: TaskPriority = TaskPriority.medium
    created_at: datetime = Field(alias="createdAt")

    @field_validator("id", mode="before")
    @classmethod
    def _id_as_str(cls, v):
        # Older snapshots carry numeric ids.
        if isinstance(v, (int, float)) and not isinstance(v, bool):
            return str(v)
        return v

    @field_validator("text")
    @classmethod
    def _text_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("text must not be blank")
        return v

    @field_validator("created_at")
    @classmethod
    def _created_at_utc(cls, v: datetime) -> datetime:
        # Naive timestamps are taken as UTC.
        if v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v

class OperationResult(BaseModel):
    ok: bool = True
    task: Optional[Task] = None
    changed: bool = False
    persisted: bool = True
    warning: Optional[str] = None
    error: Optional[str] = None

def new_task_id() -> str:
    return str(uuid.uuid4())
