from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_actor
from app.db.database import get_db
from app.policies.actor import Actor
from app.repository.notifications import NotificationRepository
from app.schemas.notification import NotificationOut

router = APIRouter(prefix="/notifications", tags=["notifications"])


@router.get("", response_model=list[NotificationOut])
async def consume_notifications(
    actor: Actor = Depends(get_actor),
    db: AsyncSession = Depends(get_db),
):
    """Отдаёт непрочитанные уведомления и сразу помечает их прочитанными."""
    return await NotificationRepository.consume(db, actor.id)
