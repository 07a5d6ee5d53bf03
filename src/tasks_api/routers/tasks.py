from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, status

from ..auth import get_current_user_id
from ..repositories import Repository, get_repository
from ..schemas import ErrorOut, MessageOut, TaskCreate, TaskOut, TaskUpdate
from ..service import TaskService

router = APIRouter(
    prefix="/api/tasks",
    tags=["tasks"],
)

_AUTH_ERROR = {401: {"description": "Missing caller identity"}}
_STORE_ERROR = {500: {"model": ErrorOut, "description": "Task store failure"}}


def get_service(repo: Repository = Depends(get_repository)) -> TaskService:
    """
    Dependency building the task service over the configured repository.
    """
    return TaskService(repo)


# PUBLIC_INTERFACE
@router.post(
    "",
    response_model=TaskOut,
    status_code=status.HTTP_201_CREATED,
    summary="Create Task",
    description="Create a task owned by the caller. The title is trimmed and must not be empty.",
    responses={
        201: {"description": "Task created successfully"},
        400: {"model": ErrorOut, "description": "Empty title or malformed body"},
        **_AUTH_ERROR,
        **_STORE_ERROR,
    },
)
def create_task(
    payload: TaskCreate,
    user_id: str = Depends(get_current_user_id),
    service: TaskService = Depends(get_service),
) -> TaskOut:
    created = service.create(user_id, payload.title)
    return TaskOut(**created)


# PUBLIC_INTERFACE
@router.get(
    "",
    response_model=List[TaskOut],
    summary="List Tasks",
    description="List the caller's tasks, newest first.",
    responses={
        200: {"description": "List retrieved successfully"},
        **_AUTH_ERROR,
        **_STORE_ERROR,
    },
)
def list_tasks(
    user_id: str = Depends(get_current_user_id),
    service: TaskService = Depends(get_service),
) -> List[TaskOut]:
    return [TaskOut(**t) for t in service.list(user_id)]


# PUBLIC_INTERFACE
@router.put(
    "/{task_id}",
    response_model=TaskOut,
    summary="Update Task",
    description="Change the title and/or completion status. Omitted fields keep their value.",
    responses={
        200: {"description": "Task updated"},
        400: {"model": ErrorOut, "description": "Empty title or malformed body"},
        403: {"model": ErrorOut, "description": "Task belongs to another user"},
        404: {"model": ErrorOut, "description": "Task not found"},
        **_AUTH_ERROR,
        **_STORE_ERROR,
    },
)
def update_task(
    task_id: str,
    payload: TaskUpdate,
    user_id: str = Depends(get_current_user_id),
    service: TaskService = Depends(get_service),
) -> TaskOut:
    updated = service.update(user_id, task_id, payload)
    return TaskOut(**updated)


# PUBLIC_INTERFACE
@router.delete(
    "/{task_id}",
    response_model=MessageOut,
    summary="Delete Task",
    description="Permanently delete one of the caller's tasks.",
    responses={
        200: {"description": "Task deleted"},
        403: {"model": ErrorOut, "description": "Task belongs to another user"},
        404: {"model": ErrorOut, "description": "Task not found"},
        **_AUTH_ERROR,
        **_STORE_ERROR,
    },
)
def delete_task(
    task_id: str,
    user_id: str = Depends(get_current_user_id),
    service: TaskService = Depends(get_service),
) -> MessageOut:
    return MessageOut(message=service.delete(user_id, task_id))
