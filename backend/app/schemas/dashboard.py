from pydantic import BaseModel

from app.schemas.task import TaskOut


class TaskStats(BaseModel):
    total: int
    completed: int
    pending: int
    in_progress: int
    urgent: int
    overdue: int


class PriorityBreakdown(BaseModel):
    """Открытые задачи по приоритетам."""

    low: int
    medium: int
    high: int
    urgent: int


class TaskSection(BaseModel):
    recent: list[TaskOut]
    upcoming: list[TaskOut]


class DashboardOut(BaseModel):
    stats: TaskStats
    priority_breakdown: PriorityBreakdown
    # у менеджера mine и team, у участника только mine
    mine: TaskSection
    team: TaskSection | None = None
    can_manage_tasks: bool
