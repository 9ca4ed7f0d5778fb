"""
Проверки "изменилось ли что-нибудь" для опроса из UI.

Клиент присылает последнее увиденное значение (last_known -- время,
last_count -- число), сервер считает текущее одним агрегатным запросом.
has_update = True только если значение прислали и текущее строго новее
(или для счётчика -- отличается). Первый вызов без значения лишь
инициализирует состояние клиента и обновления не сигналит.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import ValidationError
from app.core.logging import get_logger
from app.core.time_utils import parse_instant
from app.models.enums import MembershipStatus
from app.policies.actor import Actor
from app.repository.tasks import TaskRepository
from app.repository.users import UserRepository
from app.services.visibility import scope_condition

logger = get_logger(__name__)


@dataclass(frozen=True)
class TimestampCheck:
    last_update: datetime | None
    has_update: bool


@dataclass(frozen=True)
class CountCheck:
    count: int
    has_update: bool


def _parse_last_known(last_known: str | None) -> datetime | None:
    if last_known is None or not last_known.strip():
        return None
    try:
        return parse_instant(last_known)
    except ValueError as e:
        raise ValidationError(
            [{"loc": ["query", "last_known"], "msg": str(e), "type": "value_error"}]
        ) from e


def timestamp_has_update(current: datetime | None, last_known: str | None) -> bool:
    known = _parse_last_known(last_known)
    if known is None or current is None:
        return False
    return current > known


def timestamp_changed(current: datetime | None, last_known: str | None) -> bool:
    """
    Любое расхождение с last_known, включая откат назад и None.

    Для наборов, из которых строки уходят (одобренная заявка больше не pending),
    max(updated_at) может уменьшиться или пропасть.
    """
    known = _parse_last_known(last_known)
    if known is None:
        return False
    return current != known


def count_has_update(current: int, last_count: int | None) -> bool:
    return last_count is not None and current != last_count


async def check_tasks(
    db: AsyncSession, actor: Actor, last_known: str | None
) -> TimestampCheck:
    # удалённые (soft) задачи тоже учитываем, иначе удаление не заметить
    latest = await TaskRepository.latest_update(db, scope_condition(actor))
    has_update = timestamp_has_update(latest, last_known)

    logger.debug(
        "updates.tasks user_id=%s last_known=%s latest=%s has_update=%s",
        actor.id,
        last_known,
        latest,
        has_update,
    )
    return TimestampCheck(latest, has_update)


async def check_dashboard(
    db: AsyncSession, actor: Actor, last_known: str | None
) -> TimestampCheck:
    return await check_tasks(db, actor, last_known)


async def check_unread(
    db: AsyncSession, actor: Actor, last_count: int | None
) -> CountCheck:
    if actor.is_manager:
        return CountCheck(0, False)

    count = await TaskRepository.unread_count(db, actor.id)
    return CountCheck(count, count_has_update(count, last_count))


async def check_users(
    db: AsyncSession, actor: Actor, last_known: str | None
) -> TimestampCheck:
    if actor.team_id is None:
        return TimestampCheck(None, False)

    latest = await UserRepository.latest_update(
        db, team_id=actor.team_id, status=MembershipStatus.approved
    )
    has_update = timestamp_has_update(latest, last_known)

    logger.debug(
        "updates.users user_id=%s team_id=%s latest=%s has_update=%s",
        actor.id,
        actor.team_id,
        latest,
        has_update,
    )
    return TimestampCheck(latest, has_update)


async def check_pending_members(
    db: AsyncSession, actor: Actor, last_known: str | None
) -> TimestampCheck:
    if not actor.is_manager or actor.team_id is None:
        return TimestampCheck(None, False)

    latest = await UserRepository.latest_update(
        db, team_id=actor.team_id, status=MembershipStatus.pending
    )
    return TimestampCheck(latest, timestamp_changed(latest, last_known))
