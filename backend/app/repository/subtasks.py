from typing import Any

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.subtask import Subtask
from app.repository.tasks import TaskRepository


class SubtaskRepository:
    @staticmethod
    async def list_for_task(db: AsyncSession, task_id: int) -> list[Subtask]:
        res = await db.execute(
            select(Subtask)
            .where(Subtask.task_id == task_id)
            .order_by(Subtask.order.asc(), Subtask.id.asc())
        )
        return list(res.scalars().all())

    @staticmethod
    async def get_for_task(
        db: AsyncSession, *, task_id: int, subtask_id: int
    ) -> Subtask | None:
        """Подзадача, только если она принадлежит указанной задаче."""
        res = await db.execute(
            select(Subtask).where(
                Subtask.id == subtask_id,
                Subtask.task_id == task_id,
            )
        )
        return res.scalar_one_or_none()

    @staticmethod
    async def next_order(db: AsyncSession, task_id: int) -> int:
        res = await db.execute(
            select(func.max(Subtask.order)).where(Subtask.task_id == task_id)
        )
        last = res.scalar_one_or_none()
        return 0 if last is None else last + 1

    @staticmethod
    async def create(
        db: AsyncSession,
        *,
        task_id: int,
        title: str,
        description: str | None,
        estimated_time: int | None,
    ) -> Subtask:
        order = await SubtaskRepository.next_order(db, task_id)
        subtask = Subtask(
            task_id=task_id,
            title=title,
            description=description,
            estimated_time=estimated_time,
            order=order,
        )
        db.add(subtask)
        await TaskRepository.touch(db, task_id)
        await db.commit()
        await db.refresh(subtask)
        return subtask

    @staticmethod
    async def update(
        db: AsyncSession, subtask: Subtask, changes: dict[str, Any]
    ) -> Subtask:
        for key, value in changes.items():
            setattr(subtask, key, value)
        await TaskRepository.touch(db, subtask.task_id)
        await db.commit()
        await db.refresh(subtask)
        return subtask

    @staticmethod
    async def delete(db: AsyncSession, subtask: Subtask) -> None:
        task_id = subtask.task_id
        await db.delete(subtask)
        await TaskRepository.touch(db, task_id)
        await db.commit()

    @staticmethod
    async def ids_for_task(
        db: AsyncSession, *, task_id: int, ids: set[int]
    ) -> set[int]:
        if not ids:
            return set()
        res = await db.execute(
            select(Subtask.id).where(Subtask.task_id == task_id, Subtask.id.in_(ids))
        )
        return set(res.scalars().all())

    @staticmethod
    async def reorder(
        db: AsyncSession, *, task_id: int, items: list[tuple[int, int]]
    ) -> None:
        """
        Применяет пары (id, order). Каждая пара -- отдельный UPDATE,
        порядок между параллельными reorder не гарантируется.
        """
        for subtask_id, order in items:
            await db.execute(
                update(Subtask)
                .where(Subtask.id == subtask_id, Subtask.task_id == task_id)
                .values(order=order)
                .execution_options(synchronize_session=False)
            )
        await TaskRepository.touch(db, task_id)
        await db.commit()
