"""
Список задач с учётом видимости.

list_tasks -- чистый запрос. list_and_acknowledge -- то, что отдаёт GET /tasks:
тот же список, после которого все непрочитанные задачи участника
помечаются прочитанными (посмотрел список = увидел задачи).
"""

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.logging import get_logger
from app.policies.actor import Actor
from app.repository.tasks import TaskRepository
from app.schemas.task import FlatTaskList, PartitionedTaskList, TaskOut
from app.services.visibility import (
    PARTITION_ITEMS,
    PARTITION_MINE,
    PARTITION_TEAM,
    TaskFilters,
    build_query_spec,
)

logger = get_logger(__name__)


def _render(tasks) -> list[TaskOut]:
    return [TaskOut.model_validate(t) for t in tasks]


async def list_tasks(
    db: AsyncSession, actor: Actor, filters: TaskFilters | None = None
) -> PartitionedTaskList | FlatTaskList:
    spec = build_query_spec(actor, filters)
    partitions = await TaskRepository.list_for_spec(db, spec)

    if spec.kind == "partitioned":
        listing = PartitionedTaskList(
            mine=_render(partitions[PARTITION_MINE]),
            team=_render(partitions[PARTITION_TEAM]),
        )
        logger.info(
            "tasks.list user_id=%s role=%s mine=%d team=%d",
            actor.id,
            actor.role,
            len(listing.mine),
            len(listing.team),
        )
        return listing

    listing = FlatTaskList(items=_render(partitions[PARTITION_ITEMS]))
    logger.info(
        "tasks.list user_id=%s role=%s items=%d",
        actor.id,
        actor.role,
        len(listing.items),
    )
    return listing


async def acknowledge_tasks(db: AsyncSession, actor: Actor) -> int:
    """Помечает непрочитанные задачи участника прочитанными. У менеджеров ничего не делает."""
    if actor.is_manager:
        return 0
    marked = await TaskRepository.mark_read(db, actor.id)
    if marked:
        logger.info("tasks.acknowledged user_id=%s marked=%d", actor.id, marked)
    return marked


async def list_and_acknowledge(
    db: AsyncSession, actor: Actor, filters: TaskFilters | None = None
) -> PartitionedTaskList | FlatTaskList:
    # ответ собирается до отметки: в нём видно, какие задачи были новыми
    listing = await list_tasks(db, actor, filters)
    await acknowledge_tasks(db, actor)
    return listing


async def unread_count(db: AsyncSession, actor: Actor) -> int:
    # непрочитанные бывают только у участников
    if actor.is_manager:
        return 0
    return await TaskRepository.unread_count(db, actor.id)
