"""Task list routes: the HTTP side of the view.

Handlers are plain functions, so FastAPI runs them in its threadpool and
storage I/O stays off the event loop.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status

from ..deps import get_task_service
from ..models.task import FilterMode, Task, TaskCounts
from ..schemas import ClearCompletedResponse, TaskInput, TaskListResponse, TaskResponse
from ..services.task_service import TaskService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/tasks", tags=["tasks"])


def to_response(task: Task) -> TaskResponse:
    return TaskResponse(
        id=task.id,
        title=task.title,
        description=task.description,
        date=task.date,
        time=task.time,
        completed=task.completed,
        created_at=task.created_at,
    )


def _not_found(task_id: int) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail=f"Task {task_id} not found"
    )


@router.get("/", response_model=TaskListResponse)
def list_tasks(
    filter_mode: FilterMode = Query(FilterMode.ALL, alias="filter"),
    task_service: TaskService = Depends(get_task_service)
) -> TaskListResponse:
    """List the tasks for a filter mode together with the store counts."""
    logger.debug(f"Listing tasks with filter={filter_mode.value}")

    tasks = task_service.list_tasks(filter_mode)
    return TaskListResponse(
        tasks=[to_response(task) for task in tasks],
        counts=task_service.get_counts(),
        filter=filter_mode,
    )


@router.get("/counts", response_model=TaskCounts)
def get_counts(
    task_service: TaskService = Depends(get_task_service)
) -> TaskCounts:
    """Get total, active and completed counts."""
    return task_service.get_counts()


@router.post("/", response_model=TaskResponse, status_code=status.HTTP_201_CREATED)
def create_task(
    task_data: TaskInput,
    task_service: TaskService = Depends(get_task_service)
) -> TaskResponse:
    """Create a new task.

    Raises:
        TaskValidationError: If a required field is missing (rendered as 400)
    """
    logger.info(f"Creating new task: {task_data.title}")

    task = task_service.create_task(task_data)
    return to_response(task)


@router.post("/submit", response_model=TaskResponse)
def submit_form(
    task_data: TaskInput,
    task_service: TaskService = Depends(get_task_service)
) -> TaskResponse:
    """Submit the task form: edits the task under edit, or creates a new one."""
    task = task_service.submit(task_data)
    return to_response(task)


@router.post("/clear-completed", response_model=ClearCompletedResponse)
def clear_completed(
    task_service: TaskService = Depends(get_task_service)
) -> ClearCompletedResponse:
    """Remove every completed task."""
    removed = task_service.clear_completed()
    return ClearCompletedResponse(removed=removed, counts=task_service.get_counts())


@router.delete("/edit", status_code=status.HTTP_204_NO_CONTENT)
def cancel_edit(
    task_service: TaskService = Depends(get_task_service)
) -> Response:
    """Leave edit mode without saving."""
    task_service.cancel_edit()
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{task_id}", response_model=TaskResponse)
def get_task(
    task_id: int,
    task_service: TaskService = Depends(get_task_service)
) -> TaskResponse:
    """Get a specific task by ID."""
    task = task_service.get_task(task_id)
    if not task:
        raise _not_found(task_id)
    return to_response(task)


@router.put("/{task_id}", response_model=TaskResponse)
def edit_task(
    task_id: int,
    task_data: TaskInput,
    task_service: TaskService = Depends(get_task_service)
) -> TaskResponse:
    """Replace a task's title, description, date and time."""
    logger.info(f"Updating task: {task_id}")

    task = task_service.edit_task(task_id, task_data)
    if not task:
        raise _not_found(task_id)
    return to_response(task)


@router.post("/{task_id}/edit", response_model=TaskResponse)
def begin_edit(
    task_id: int,
    task_service: TaskService = Depends(get_task_service)
) -> TaskResponse:
    """Enter edit mode for a task; returns the values to prefill the form with."""
    task = task_service.begin_edit(task_id)
    if not task:
        raise _not_found(task_id)
    return to_response(task)


@router.post("/{task_id}/toggle", response_model=TaskResponse)
def toggle_task(
    task_id: int,
    task_service: TaskService = Depends(get_task_service)
) -> TaskResponse:
    """Flip a task between active and completed."""
    task = task_service.toggle_task(task_id)
    if not task:
        raise _not_found(task_id)
    return to_response(task)


@router.delete("/{task_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_task(
    task_id: int,
    confirm: bool = Query(False, description="Set to true to confirm the deletion"),
    task_service: TaskService = Depends(get_task_service)
) -> Response:
    """Delete a task.

    The deletion only happens with ``confirm=true``; otherwise the task is
    kept and 409 is returned.
    """
    logger.info(f"Deleting task: {task_id}")

    if not task_service.get_task(task_id):
        raise _not_found(task_id)

    if not task_service.delete_task(task_id, confirm=lambda _prompt: confirm):
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Deletion of task {task_id} was not confirmed"
        )

    return Response(status_code=status.HTTP_204_NO_CONTENT)
