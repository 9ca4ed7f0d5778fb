from typing import Any

from fastapi import APIRouter, Body, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_actor
from app.core.errors import NotFoundError, ValidationError
from app.core.logging import get_logger
from app.core.validation import validate_body
from app.db.database import get_db
from app.models.enums import TaskPriority, TaskStatus
from app.models.task import Task
from app.policies.actor import Actor
from app.policies.decision import authorize
from app.policies.tasks import (
    can_create_task,
    can_delete_task,
    can_update_task,
    can_view_task,
)
from app.repository.tasks import TaskRepository
from app.repository.users import UserRepository
from app.schemas.common import MessageOut
from app.schemas.task import (
    TaskCreateIn,
    TaskListOut,
    TaskManagerUpdateIn,
    TaskMemberUpdateIn,
    TaskOut,
    UnreadCountOut,
)
from app.services import tasks as task_service
from app.services.visibility import DEFAULT_SORT_BY, DEFAULT_SORT_ORDER, TaskFilters

router = APIRouter(prefix="/tasks", tags=["tasks"])
logger = get_logger(__name__)


async def get_task_or_404(db: AsyncSession, task_id: int) -> Task:
    task = await TaskRepository.get(db, task_id)
    if task is None:
        raise NotFoundError("Task not found")
    return task


async def _ensure_assignee_exists(db: AsyncSession, user_id: int) -> None:
    if not await UserRepository.exists(db, user_id):
        raise ValidationError.for_field(
            "assigned_to_user_id", "The selected assignee does not exist."
        )


@router.get("", response_model=TaskListOut)
async def list_tasks(
    status_: TaskStatus | None = Query(default=None, alias="status"),
    priority: TaskPriority | None = Query(default=None),
    assigned_to: int | None = Query(default=None),
    search: str | None = Query(default=None, max_length=255),
    sort_by: str = Query(default=DEFAULT_SORT_BY),
    sort_order: str = Query(default=DEFAULT_SORT_ORDER),
    actor: Actor = Depends(get_actor),
    db: AsyncSession = Depends(get_db),
):
    """
    Задачи пользователя.

    Менеджер получает {"kind": "partitioned", "mine": [...], "team": [...]},
    участник -- {"kind": "flat", "items": [...]}; у участника вызов заодно
    помечает его задачи прочитанными.
    """
    filters = TaskFilters(
        status=status_.value if status_ else None,
        priority=priority.value if priority else None,
        assigned_to=assigned_to,
        search=search,
        sort_by=sort_by,
        sort_order=sort_order,
    )
    return await task_service.list_and_acknowledge(db, actor, filters)


@router.get("/unread-count", response_model=UnreadCountOut)
async def unread_count(
    actor: Actor = Depends(get_actor),
    db: AsyncSession = Depends(get_db),
):
    return {"count": await task_service.unread_count(db, actor)}


@router.post("", response_model=TaskOut, status_code=status.HTTP_201_CREATED)
async def create_task(
    payload: TaskCreateIn,
    actor: Actor = Depends(get_actor),
    db: AsyncSession = Depends(get_db),
):
    authorize(can_create_task(actor))
    await _ensure_assignee_exists(db, payload.assigned_to_user_id)

    task = await TaskRepository.create(
        db,
        title=payload.title,
        description=payload.description,
        priority=payload.priority,
        due_date=payload.due_date,
        estimated_time=payload.estimated_time,
        assigned_to_user_id=payload.assigned_to_user_id,
        created_by_user_id=actor.id,
    )
    logger.info(
        "tasks.created task_id=%s by=%s assignee=%s",
        task.id,
        actor.id,
        task.assigned_to_user_id,
    )
    return task


@router.get("/{task_id}", response_model=TaskOut)
async def get_task(
    task_id: int,
    actor: Actor = Depends(get_actor),
    db: AsyncSession = Depends(get_db),
):
    task = await get_task_or_404(db, task_id)
    authorize(can_view_task(actor, task))
    return task


@router.put("/{task_id}", response_model=TaskOut)
async def update_task(
    task_id: int,
    payload: dict[str, Any] = Body(...),
    actor: Actor = Depends(get_actor),
    db: AsyncSession = Depends(get_db),
):
    """Менеджер меняет любые поля, исполнитель -- только status и actual_time."""
    task = await get_task_or_404(db, task_id)
    authorize(can_update_task(actor, task))

    schema = TaskManagerUpdateIn if actor.is_manager else TaskMemberUpdateIn
    changes = validate_body(schema, payload).model_dump(exclude_unset=True)

    if "assigned_to_user_id" in changes:
        await _ensure_assignee_exists(db, changes["assigned_to_user_id"])

    task = await TaskRepository.update(db, task, changes)
    logger.info(
        "tasks.updated task_id=%s by=%s fields=%s",
        task.id,
        actor.id,
        sorted(changes),
    )
    return task


@router.delete("/{task_id}", response_model=MessageOut)
async def delete_task(
    task_id: int,
    actor: Actor = Depends(get_actor),
    db: AsyncSession = Depends(get_db),
):
    task = await get_task_or_404(db, task_id)
    authorize(can_delete_task(actor, task))

    await TaskRepository.soft_delete(db, task)
    logger.info("tasks.deleted task_id=%s by=%s", task_id, actor.id)
    return {"message": "Task deleted successfully"}
