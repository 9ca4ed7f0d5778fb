from datetime import datetime
from typing import Any

from sqlalchemy import ColumnElement, case, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.time_utils import utcnow
from app.models.enums import CLOSED_TASK_STATUSES, TaskPriority, TaskStatus
from app.models.task import Task
from app.services.visibility import (
    TaskQuerySpec,
    not_deleted,
    partition_statement,
    unread_condition,
)


def _count_where(condition: ColumnElement[bool]):
    return func.coalesce(func.sum(case((condition, 1), else_=0)), 0)


class TaskRepository:
    @staticmethod
    async def get(db: AsyncSession, task_id: int) -> Task | None:
        """Задача по id без удалённых; связи перечитываются заново."""
        res = await db.execute(
            select(Task)
            .where(Task.id == task_id, not_deleted())
            .execution_options(populate_existing=True)
        )
        return res.scalar_one_or_none()

    @staticmethod
    async def create(
        db: AsyncSession,
        *,
        title: str,
        description: str | None,
        priority: str,
        due_date: datetime | None,
        estimated_time: int | None,
        assigned_to_user_id: int,
        created_by_user_id: int,
    ) -> Task:
        task = Task(
            title=title,
            description=description,
            priority=priority,
            status=TaskStatus.pending.value,
            due_date=due_date,
            estimated_time=estimated_time,
            assigned_to_user_id=assigned_to_user_id,
            created_by_user_id=created_by_user_id,
        )
        db.add(task)
        await db.commit()
        return await TaskRepository.get(db, task.id)

    @staticmethod
    async def update(db: AsyncSession, task: Task, changes: dict[str, Any]) -> Task:
        if (
            "assigned_to_user_id" in changes
            and changes["assigned_to_user_id"] != task.assigned_to_user_id
        ):
            # новый исполнитель ещё не видел задачу
            task.viewed_at = None

        for key, value in changes.items():
            setattr(task, key, value)

        await db.commit()
        return await TaskRepository.get(db, task.id)

    @staticmethod
    async def soft_delete(db: AsyncSession, task: Task) -> None:
        task.deleted_at = utcnow()
        await db.commit()

    @staticmethod
    async def touch(db: AsyncSession, task_id: int) -> None:
        await db.execute(
            update(Task)
            .where(Task.id == task_id)
            .values(updated_at=utcnow())
            .execution_options(synchronize_session=False)
        )

    @staticmethod
    async def list_for_spec(
        db: AsyncSession, spec: TaskQuerySpec
    ) -> dict[str, list[Task]]:
        result: dict[str, list[Task]] = {}
        for partition in spec.partitions:
            res = await db.execute(partition_statement(partition, spec.filters))
            result[partition.name] = list(res.scalars().all())
        return result

    @staticmethod
    async def mark_read(db: AsyncSession, user_id: int) -> int:
        """
        Отмечает все непрочитанные задачи пользователя прочитанными.

        Один условный UPDATE (viewed_at IS NULL в WHERE), без чтения перед
        записью: повторный вызов ничего не меняет.
        """
        res = await db.execute(
            update(Task)
            .where(unread_condition(user_id))
            .values(viewed_at=utcnow())
            .execution_options(synchronize_session=False)
        )
        await db.commit()
        return int(res.rowcount or 0)

    @staticmethod
    async def unread_count(db: AsyncSession, user_id: int) -> int:
        res = await db.execute(
            select(func.count(Task.id)).where(unread_condition(user_id))
        )
        return int(res.scalar_one())

    @staticmethod
    async def latest_update(
        db: AsyncSession, scope: ColumnElement[bool]
    ) -> datetime | None:
        res = await db.execute(select(func.max(Task.updated_at)).where(scope))
        return res.scalar_one_or_none()

    @staticmethod
    async def stats(
        db: AsyncSession, scope: ColumnElement[bool], now: datetime
    ) -> dict[str, int]:
        """Счётчики для дашборда одним агрегатным запросом."""
        is_open = Task.status.not_in(CLOSED_TASK_STATUSES)

        columns = [
            func.count(Task.id).label("total"),
            _count_where(Task.status == TaskStatus.completed.value).label("completed"),
            _count_where(Task.status == TaskStatus.pending.value).label("pending"),
            _count_where(Task.status == TaskStatus.in_progress.value).label(
                "in_progress"
            ),
            _count_where(
                (Task.priority == TaskPriority.urgent.value) & is_open
            ).label("urgent"),
            _count_where(
                Task.due_date.is_not(None) & (Task.due_date < now) & is_open
            ).label("overdue"),
        ]
        for priority in TaskPriority:
            columns.append(
                _count_where((Task.priority == priority.value) & is_open).label(
                    f"open_{priority.value}"
                )
            )

        res = await db.execute(select(*columns).where(scope, not_deleted()))
        return {key: int(value) for key, value in res.one()._mapping.items()}

    @staticmethod
    async def list_recent(
        db: AsyncSession, scope: ColumnElement[bool], limit: int
    ) -> list[Task]:
        res = await db.execute(
            select(Task)
            .where(scope, not_deleted())
            .order_by(Task.created_at.desc(), Task.id.desc())
            .limit(limit)
        )
        return list(res.scalars().all())

    @staticmethod
    async def list_upcoming(
        db: AsyncSession, scope: ColumnElement[bool], now: datetime, limit: int
    ) -> list[Task]:
        res = await db.execute(
            select(Task)
            .where(
                scope,
                not_deleted(),
                Task.due_date.is_not(None),
                Task.due_date >= now,
                Task.status.not_in(CLOSED_TASK_STATUSES),
            )
            .order_by(Task.due_date.asc(), Task.id.asc())
            .limit(limit)
        )
        return list(res.scalars().all())
