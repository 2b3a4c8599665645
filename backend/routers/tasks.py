"""
Task management API endpoints.

Besides CRUD, task creation and completion feed the productivity
aggregates. Counter updates must succeed for the request to succeed;
the score recompute that follows is best-effort and never fails the
request.
"""

import logging
from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from backend.dependencies import (
    get_category_repository,
    get_config,
    get_current_user_id,
    get_now,
    get_task_repository,
    get_tracker,
)
from backend.schemas import (
    MessageResponse,
    TaskCreate,
    TaskListResponse,
    TaskResponse,
    TaskStatus,
    TaskUpdate,
    TimeLogCreate,
)
from tempo.core.config import Config
from tempo.core.errors import PersistenceError
from tempo.core.models import MAX_PRIORITY, MIN_PRIORITY, Task
from tempo.core.repositories import CategoryRepository, TaskRepository
from tempo.productivity import ProductivityTracker

router = APIRouter(prefix="/tasks", tags=["tasks"])

logger = logging.getLogger(__name__)


def _task_to_response(task: Task) -> TaskResponse:
    """Convert Task model to TaskResponse schema."""
    return TaskResponse(
        id=task.id,
        title=task.title,
        description=task.description,
        status=task.status,
        priority=task.priority,
        category_id=task.category_id,
        category_name=task.category_name,
        due_date=task.due_date.isoformat() if task.due_date else None,
        completed_at=task.completed_at.isoformat() if task.completed_at else None,
        time_spent=task.time_spent,
        created_at=task.created_at.isoformat() if task.created_at else "",
        updated_at=task.updated_at.isoformat() if task.updated_at else "",
    )


def _refresh_productivity(tracker: ProductivityTracker, user_id: str) -> None:
    """Recompute the user's score; failures are logged, not raised."""
    try:
        tracker.recompute_derived(user_id)
    except PersistenceError:
        logger.warning("Productivity recompute failed for user %s", user_id, exc_info=True)


@router.get("/", response_model=TaskListResponse)
async def list_tasks(
    status: Optional[TaskStatus] = Query(None, description="Filter by status"),
    category_id: Optional[int] = Query(None, description="Filter by category"),
    user_id: str = Depends(get_current_user_id),
    tasks: TaskRepository = Depends(get_task_repository),
):
    """List the user's tasks, highest priority and soonest due first."""
    found = tasks.list_for_user(user_id, status=status, category_id=category_id)
    return TaskListResponse(
        tasks=[_task_to_response(t) for t in found],
        total=len(found),
    )


@router.get("/{task_id}", response_model=TaskResponse)
async def get_task(
    task_id: int,
    user_id: str = Depends(get_current_user_id),
    tasks: TaskRepository = Depends(get_task_repository),
):
    """Get a single task by ID."""
    task = tasks.get(user_id, task_id)
    if task is None:
        raise HTTPException(status_code=404, detail="task not found")
    return _task_to_response(task)


@router.post("/", response_model=TaskResponse, status_code=201)
async def create_task(
    body: TaskCreate,
    user_id: str = Depends(get_current_user_id),
    tasks: TaskRepository = Depends(get_task_repository),
    categories: CategoryRepository = Depends(get_category_repository),
    tracker: ProductivityTracker = Depends(get_tracker),
    config: Config = Depends(get_config),
):
    """
    Create a new task in one of the user's categories.

    New tasks always start as 'todo'. A priority outside 1-4 (or none)
    falls back to the configured default.
    """
    title = body.title.strip()
    if not title:
        raise HTTPException(status_code=400, detail="Task title is required and cannot be empty")

    if categories.get(user_id, body.category_id) is None:
        raise HTTPException(
            status_code=400,
            detail="The selected category does not exist. Please refresh the page and try again.",
        )

    priority = body.priority
    if priority is None or not MIN_PRIORITY <= priority <= MAX_PRIORITY:
        priority = config.get("default_task_priority", "preferences", MIN_PRIORITY)

    description = body.description.strip() if body.description else None

    task_id = tasks.create(
        user_id=user_id,
        title=title,
        category_id=body.category_id,
        description=description or None,
        priority=priority,
        due_date=body.due_date,
    )
    logger.info("Created task %s for user %s", task_id, user_id)

    tracker.record_task_created(user_id)
    _refresh_productivity(tracker, user_id)

    return _task_to_response(tasks.get(user_id, task_id))


@router.put("/{task_id}", response_model=TaskResponse)
async def update_task(
    task_id: int,
    body: TaskUpdate,
    user_id: str = Depends(get_current_user_id),
    tasks: TaskRepository = Depends(get_task_repository),
    categories: CategoryRepository = Depends(get_category_repository),
    tracker: ProductivityTracker = Depends(get_tracker),
    now: datetime = Depends(get_now),
):
    """
    Update a task. Only fields present in the body are changed.

    Moving a task to 'completed' stamps completed_at and counts the
    completion for today; moving it back out clears completed_at.
    """
    existing = tasks.get(user_id, task_id)
    if existing is None:
        raise HTTPException(status_code=404, detail="task not found")

    fields = body.model_dump(exclude_unset=True)

    # These columns are NOT NULL; an explicit null means "leave as is"
    for column in ("title", "status", "priority", "category_id"):
        if column in fields and fields[column] is None:
            del fields[column]

    if "title" in fields:
        fields["title"] = fields["title"].strip()
        if not fields["title"]:
            raise HTTPException(status_code=400, detail="Task title cannot be empty")

    if "category_id" in fields and categories.get(user_id, fields["category_id"]) is None:
        raise HTTPException(status_code=400, detail="invalid category")

    if "time_spent" in fields:
        fields["time_spent"] = max(0, fields["time_spent"] or 0)

    was_completed = existing.is_completed()
    is_now_completed = fields.get("status") == "completed"

    if "status" in fields:
        if is_now_completed and not was_completed:
            fields["completed_at"] = now
        elif not is_now_completed and was_completed:
            fields["completed_at"] = None

    tasks.update(task_id, fields)

    if is_now_completed and not was_completed:
        tracker.record_task_completed(user_id)
        _refresh_productivity(tracker, user_id)

    return _task_to_response(tasks.get(user_id, task_id))


@router.post("/{task_id}/time", response_model=TaskResponse)
async def log_time(
    task_id: int,
    body: TimeLogCreate,
    user_id: str = Depends(get_current_user_id),
    tasks: TaskRepository = Depends(get_task_repository),
):
    """
    Record a finished timer session against a task.

    Only work sessions add to the task's time_spent; break sessions and
    zero-minute sessions leave it unchanged.
    """
    if tasks.get(user_id, task_id) is None:
        raise HTTPException(status_code=404, detail="task not found")

    if body.session_type == "work" and body.minutes > 0:
        tasks.add_time_spent(user_id, task_id, body.minutes * 60)
        logger.info("Logged %d minutes on task %s for user %s", body.minutes, task_id, user_id)

    return _task_to_response(tasks.get(user_id, task_id))


@router.delete("/{task_id}", response_model=MessageResponse)
async def delete_task(
    task_id: int,
    user_id: str = Depends(get_current_user_id),
    tasks: TaskRepository = Depends(get_task_repository),
):
    """Delete a task."""
    if not tasks.delete(user_id, task_id):
        raise HTTPException(status_code=404, detail="task not found")
    return MessageResponse(message="task deleted successfully")
