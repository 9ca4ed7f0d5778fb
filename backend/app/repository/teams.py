from __future__ import annotations

import secrets
import string

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import TEAM_CODE_LENGTH
from app.core.logging import get_logger
from app.models.enums import MembershipStatus, NotificationKind
from app.models.team import Team
from app.models.user import User
from app.repository.notifications import NotificationRepository

logger = get_logger(__name__)

ALPHABET = string.ascii_uppercase + string.digits  # A-Z 0-9


class TeamRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    def _new_code(self, length: int = TEAM_CODE_LENGTH) -> str:
        return "".join(secrets.choice(ALPHABET) for _ in range(length))

    async def create_team_with_creator(
        self,
        *,
        name: str,
        description: str | None,
        photo: str | None,
        creator_id: int,
    ) -> Team:
        """
        Создаёт команду и делает создателя её одобренным участником.

        Обе записи (teams и users.team_id/membership_status) уходят одним
        коммитом: команда без владельца-участника не остаётся.
        """
        if not creator_id:
            raise ValueError("creator_id is required")

        # не делаем SELECT на уникальность кода,
        # полагаемся на UNIQUE-индекс в БД и ретраим только при коллизии
        last_err: Exception | None = None

        for _ in range(5):
            code = self._new_code()

            team = Team(
                name=name,
                description=description,
                code=code,
                photo=photo,
                created_by=creator_id,
            )
            self.session.add(team)

            try:
                await self.session.flush()  # получаем team.id, может упасть из-за UNIQUE

                creator = await self.session.get(User, creator_id)
                if creator is None:
                    raise ValueError("creator not found")
                creator.team_id = team.id
                creator.membership_status = MembershipStatus.approved.value

                NotificationRepository.add(
                    self.session,
                    user_id=creator_id,
                    kind=NotificationKind.team_created,
                    payload={"team_name": team.name, "team_code": team.code},
                )

                await self.session.commit()
                await self.session.refresh(team)
                return team

            except IntegrityError as e:
                await self.session.rollback()
                last_err = e
                # коллизия кода -- пробуем ещё раз, остальное пробрасываем
                msg = str(getattr(e, "orig", e))
                if "code" in msg or "unique" in msg.lower():
                    logger.warning("teams.code_collision attempt_code=%s", code)
                    continue
                raise

            except Exception:
                await self.session.rollback()
                raise

        raise RuntimeError("Failed to generate unique team code") from last_err

    async def get_team(self, team_id: int) -> Team | None:
        return await self.session.get(Team, team_id)

    async def get_team_by_code(self, code: str) -> Team | None:
        res = await self.session.execute(select(Team).where(Team.code == code))
        return res.scalar_one_or_none()

    async def list_teams(self) -> list[Team]:
        res = await self.session.execute(select(Team).order_by(Team.name.asc()))
        return list(res.scalars().all())

    async def update_team(self, team: Team, changes: dict) -> Team:
        for key, value in changes.items():
            setattr(team, key, value)
        await self.session.commit()
        await self.session.refresh(team)
        return team
