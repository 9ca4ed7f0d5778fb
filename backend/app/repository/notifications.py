from typing import Any

from sqlalchemy import update
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.time_utils import utcnow
from app.models.enums import NotificationKind
from app.models.notification import Notification


class NotificationRepository:
    @staticmethod
    def add(
        db: AsyncSession,
        *,
        user_id: int,
        kind: NotificationKind,
        payload: dict[str, Any] | None = None,
    ) -> Notification:
        """Кладёт уведомление в текущую транзакцию; коммитит вызывающий."""
        notification = Notification(
            user_id=user_id, kind=kind.value, payload=payload or {}
        )
        db.add(notification)
        return notification

    @staticmethod
    async def consume(db: AsyncSession, user_id: int) -> list[dict[str, Any]]:
        """
        Забирает все непрочитанные уведомления пользователя.

        Один условный UPDATE ... RETURNING: два параллельных запроса
        не получат одно и то же уведомление.
        """
        stmt = (
            update(Notification)
            .where(
                Notification.user_id == user_id,
                Notification.consumed_at.is_(None),
            )
            .values(consumed_at=utcnow())
            .returning(
                Notification.id,
                Notification.kind,
                Notification.payload,
                Notification.created_at,
            )
            .execution_options(synchronize_session=False)
        )
        res = await db.execute(stmt)
        rows = [dict(row._mapping) for row in res.all()]
        await db.commit()
        return sorted(rows, key=lambda r: r["id"])
