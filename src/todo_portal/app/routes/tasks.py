from typing import List

from fastapi import APIRouter, HTTPException
from pydantic import Field

from todo_portal.domain.task_models import OperationResult, Task, TaskCreate, TaskEdit
from todo_portal.domain.task_view import QUICK_SUGGESTIONS, pick_motivation
from todo_portal.domain.view_models import DerivedView, FilterMode, SortKey, TaskStats, ViewParams
from todo_portal.services.task_service import TaskService

router = APIRouter(prefix="/api/tasks", tags=["tasks"])
meta_router = APIRouter(prefix="/api", tags=["tasks"])

EMPTY_TEXT_DETAIL = "Task text must not be empty"


class TaskListResponse(DerivedView):
    motivation: str = Field(default="")


def get_service() -> TaskService:
    # Overwritten in main.py:
    # tasks.get_service = lambda: svc
    raise RuntimeError("TaskService not wired")


def _validated(result: OperationResult) -> OperationResult:
    if not result.ok:
        raise HTTPException(status_code=422, detail=EMPTY_TEXT_DETAIL)
    return result


@router.get("", response_model=TaskListResponse)
async def list_tasks(
    filter: FilterMode = FilterMode.all,
    search: str = "",
    sort: SortKey = SortKey.newest,
):
    svc = get_service()
    view = svc.view(ViewParams(filter=filter, search=search, sort=sort))
    return TaskListResponse(
        tasks=view.tasks,
        stats=view.stats,
        empty_message=view.empty_message,
        motivation=pick_motivation(),
    )


@router.post("", response_model=OperationResult, status_code=201)
async def create_task(payload: TaskCreate):
    svc = get_service()
    return _validated(await svc.create(payload.text, payload.priority))


@router.post("/clear-completed", response_model=OperationResult)
async def clear_completed():
    return await get_service().clear_completed()


@router.post("/complete-all", response_model=OperationResult)
async def complete_all():
    return await get_service().mark_all_completed()


@router.delete("", response_model=OperationResult)
async def clear_all():
    return await get_service().clear_all()


@router.get("/{task_id}", response_model=Task)
async def get_task(task_id: str):
    svc = get_service()
    task = svc.get(task_id)
    if not task:
        raise HTTPException(status_code=404, detail="Task not found")
    return task


@router.patch("/{task_id}", response_model=OperationResult)
async def edit_task(task_id: str, payload: TaskEdit):
    svc = get_service()
    return _validated(await svc.edit(task_id, payload.text, payload.priority))


@router.post("/{task_id}/toggle", response_model=OperationResult)
async def toggle_task(task_id: str):
    return await get_service().toggle_completed(task_id)


@router.delete("/{task_id}", response_model=OperationResult)
async def delete_task(task_id: str):
    return await get_service().delete(task_id)


@meta_router.get("/stats", response_model=TaskStats)
async def get_stats():
    return get_service().stats()


@meta_router.get("/suggestions", response_model=List[str])
async def get_suggestions():
    return list(QUICK_SUGGESTIONS)
