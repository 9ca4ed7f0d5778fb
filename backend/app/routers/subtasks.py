from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_actor
from app.core.errors import IntegrityError, NotFoundError
from app.core.logging import get_logger
from app.db.database import get_db
from app.models.subtask import Subtask
from app.models.task import Task
from app.policies.actor import Actor
from app.policies.decision import authorize
from app.policies.tasks import can_update_task
from app.repository.subtasks import SubtaskRepository
from app.routers.tasks import get_task_or_404
from app.schemas.common import MessageOut
from app.schemas.subtask import (
    SubtaskCreateIn,
    SubtaskOut,
    SubtaskReorderIn,
    SubtaskUpdateIn,
)

router = APIRouter(prefix="/tasks/{task_id}/subtasks", tags=["subtasks"])
logger = get_logger(__name__)


async def _editable_task(db: AsyncSession, actor: Actor, task_id: int) -> Task:
    # у подзадач нет своих правил: всё решает родительская задача
    task = await get_task_or_404(db, task_id)
    authorize(can_update_task(actor, task))
    return task


async def _subtask_or_404(db: AsyncSession, task: Task, subtask_id: int) -> Subtask:
    subtask = await SubtaskRepository.get_for_task(
        db, task_id=task.id, subtask_id=subtask_id
    )
    if subtask is None:
        raise NotFoundError("Subtask not found")
    return subtask


@router.get("", response_model=list[SubtaskOut])
async def list_subtasks(
    task_id: int,
    actor: Actor = Depends(get_actor),
    db: AsyncSession = Depends(get_db),
):
    task = await _editable_task(db, actor, task_id)
    return await SubtaskRepository.list_for_task(db, task.id)


@router.post("", response_model=SubtaskOut, status_code=status.HTTP_201_CREATED)
async def create_subtask(
    task_id: int,
    payload: SubtaskCreateIn,
    actor: Actor = Depends(get_actor),
    db: AsyncSession = Depends(get_db),
):
    task = await _editable_task(db, actor, task_id)
    return await SubtaskRepository.create(
        db,
        task_id=task.id,
        title=payload.title,
        description=payload.description,
        estimated_time=payload.estimated_time,
    )


@router.post("/reorder", response_model=MessageOut)
async def reorder_subtasks(
    task_id: int,
    payload: SubtaskReorderIn,
    actor: Actor = Depends(get_actor),
    db: AsyncSession = Depends(get_db),
):
    task = await _editable_task(db, actor, task_id)

    requested = {item.id for item in payload.subtasks}
    owned = await SubtaskRepository.ids_for_task(db, task_id=task.id, ids=requested)
    foreign = sorted(requested - owned)
    if foreign:
        raise IntegrityError(f"Subtasks {foreign} do not belong to this task")

    await SubtaskRepository.reorder(
        db,
        task_id=task.id,
        items=[(item.id, item.order) for item in payload.subtasks],
    )
    logger.info("subtasks.reordered task_id=%s count=%d", task.id, len(requested))
    return {"message": "Subtasks reordered successfully"}


@router.put("/{subtask_id}", response_model=SubtaskOut)
async def update_subtask(
    task_id: int,
    subtask_id: int,
    payload: SubtaskUpdateIn,
    actor: Actor = Depends(get_actor),
    db: AsyncSession = Depends(get_db),
):
    task = await _editable_task(db, actor, task_id)
    subtask = await _subtask_or_404(db, task, subtask_id)

    changes = payload.model_dump(exclude_unset=True)
    new_parent = changes.pop("task_id", None)
    if new_parent is not None and new_parent != task.id:
        raise IntegrityError("Subtask cannot be moved to another task")

    return await SubtaskRepository.update(db, subtask, changes)


@router.delete("/{subtask_id}", response_model=MessageOut)
async def delete_subtask(
    task_id: int,
    subtask_id: int,
    actor: Actor = Depends(get_actor),
    db: AsyncSession = Depends(get_db),
):
    task = await _editable_task(db, actor, task_id)
    subtask = await _subtask_or_404(db, task, subtask_id)

    await SubtaskRepository.delete(db, subtask)
    return {"message": "Subtask deleted successfully"}
