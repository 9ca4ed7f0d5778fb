from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import DASHBOARD_LIST_LIMIT
from app.core.time_utils import utcnow
from app.models.enums import TaskPriority
from app.policies.actor import Actor
from app.repository.tasks import TaskRepository
from app.schemas.dashboard import (
    DashboardOut,
    PriorityBreakdown,
    TaskSection,
    TaskStats,
)
from app.schemas.task import TaskOut
from app.services.visibility import partitions_for, scope_condition


async def _section(db: AsyncSession, condition, now, limit: int) -> TaskSection:
    recent = await TaskRepository.list_recent(db, condition, limit)
    upcoming = await TaskRepository.list_upcoming(db, condition, now, limit)
    return TaskSection(
        recent=[TaskOut.model_validate(t) for t in recent],
        upcoming=[TaskOut.model_validate(t) for t in upcoming],
    )


async def build_dashboard(
    db: AsyncSession, actor: Actor, *, limit: int = DASHBOARD_LIST_LIMIT
) -> DashboardOut:
    now = utcnow()
    counters = await TaskRepository.stats(db, scope_condition(actor), now)

    stats = TaskStats(**{k: counters[k] for k in TaskStats.model_fields})
    breakdown = PriorityBreakdown(
        **{p.value: counters[f"open_{p.value}"] for p in TaskPriority}
    )

    # у менеджера два раздела (mine/team), у участника один
    sections = [
        await _section(db, partition.condition, now, limit)
        for partition in partitions_for(actor)
    ]

    return DashboardOut(
        stats=stats,
        priority_breakdown=breakdown,
        mine=sections[0],
        team=sections[1] if len(sections) > 1 else None,
        can_manage_tasks=actor.is_manager,
    )
