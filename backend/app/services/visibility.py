"""
Какие задачи видит пользователь и как делится список.

Модуль ничего не выполняет в БД: он строит спецификацию запроса
(разделы + фильтры), а исполняет её TaskRepository.

- менеджер: два непересекающихся раздела, "mine" (назначены ему) и "team"
  (назначены другим или никому); все фильтры применяются к обоим одинаково;
- остальные: один раздел "items" (назначены ему).
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Literal

from sqlalchemy import ColumnElement, Select, and_, or_, select, true

from app.models.task import Task
from app.policies.actor import Actor

DEFAULT_SORT_BY = "created_at"
DEFAULT_SORT_ORDER = "desc"

# только собственные колонки задачи; строку от клиента в ORDER BY не подставляем
SORTABLE_COLUMNS = {
    "id": Task.id,
    "title": Task.title,
    "priority": Task.priority,
    "status": Task.status,
    "due_date": Task.due_date,
    "estimated_time": Task.estimated_time,
    "actual_time": Task.actual_time,
    "created_at": Task.created_at,
    "updated_at": Task.updated_at,
}

PARTITION_MINE = "mine"
PARTITION_TEAM = "team"
PARTITION_ITEMS = "items"


@dataclass(frozen=True)
class TaskFilters:
    status: str | None = None
    priority: str | None = None
    assigned_to: int | None = None
    search: str | None = None
    sort_by: str = DEFAULT_SORT_BY
    sort_order: str = DEFAULT_SORT_ORDER

    def normalized(self) -> TaskFilters:
        """Неизвестные sort_by / sort_order откатываются к значениям по умолчанию."""
        sort_by = self.sort_by if self.sort_by in SORTABLE_COLUMNS else DEFAULT_SORT_BY
        sort_order = (self.sort_order or "").lower()
        if sort_order not in ("asc", "desc"):
            sort_order = DEFAULT_SORT_ORDER
        search = self.search.strip() if self.search else None
        return replace(
            self, sort_by=sort_by, sort_order=sort_order, search=search or None
        )


@dataclass(frozen=True)
class Partition:
    name: str
    condition: ColumnElement[bool]


@dataclass(frozen=True)
class TaskQuerySpec:
    kind: Literal["partitioned", "flat"]
    partitions: tuple[Partition, ...]
    filters: TaskFilters = field(default_factory=TaskFilters)


def not_deleted() -> ColumnElement[bool]:
    return Task.deleted_at.is_(None)


def assigned_to(user_id: int) -> ColumnElement[bool]:
    return Task.assigned_to_user_id == user_id


def not_assigned_to(user_id: int) -> ColumnElement[bool]:
    # NULL != x в SQL не true, поэтому неназначенные добавляем явно
    return or_(Task.assigned_to_user_id != user_id, Task.assigned_to_user_id.is_(None))


def scope_condition(actor: Actor) -> ColumnElement[bool]:
    """Все задачи, которые пользователь вправе видеть (без учёта удаления)."""
    if actor.is_manager:
        return true()
    return assigned_to(actor.id)


def unread_condition(user_id: int) -> ColumnElement[bool]:
    return and_(assigned_to(user_id), Task.viewed_at.is_(None), not_deleted())


def partitions_for(actor: Actor) -> tuple[Partition, ...]:
    if actor.is_manager:
        return (
            Partition(PARTITION_MINE, assigned_to(actor.id)),
            Partition(PARTITION_TEAM, not_assigned_to(actor.id)),
        )
    return (Partition(PARTITION_ITEMS, assigned_to(actor.id)),)


def build_query_spec(actor: Actor, filters: TaskFilters | None = None) -> TaskQuerySpec:
    filters = (filters or TaskFilters()).normalized()
    if not actor.is_manager:
        # фильтр по исполнителю доступен только менеджерам
        filters = replace(filters, assigned_to=None)

    kind = "partitioned" if actor.is_manager else "flat"
    return TaskQuerySpec(kind=kind, partitions=partitions_for(actor), filters=filters)


def _like_pattern(term: str) -> str:
    escaped = term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


def filter_conditions(filters: TaskFilters) -> list[ColumnElement[bool]]:
    conditions: list[ColumnElement[bool]] = [not_deleted()]

    if filters.status:
        conditions.append(Task.status == filters.status)

    if filters.priority:
        conditions.append(Task.priority == filters.priority)

    if filters.assigned_to is not None:
        conditions.append(Task.assigned_to_user_id == filters.assigned_to)

    if filters.search:
        pattern = _like_pattern(filters.search)
        conditions.append(
            or_(
                Task.title.ilike(pattern, escape="\\"),
                Task.description.ilike(pattern, escape="\\"),
            )
        )

    return conditions


def partition_statement(partition: Partition, filters: TaskFilters) -> Select:
    column = SORTABLE_COLUMNS[filters.sort_by]
    ordering = column.asc() if filters.sort_order == "asc" else column.desc()
    tiebreak = Task.id.asc() if filters.sort_order == "asc" else Task.id.desc()

    return (
        select(Task)
        .where(partition.condition, *filter_conditions(filters))
        .order_by(ordering, tiebreak)
    )
