from datetime import datetime

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.enums import MembershipStatus, Role
from app.models.user import User


class UserRepository:
    @staticmethod
    async def get(db: AsyncSession, user_id: int) -> User | None:
        return await db.get(User, user_id)

    @staticmethod
    async def get_by_email(db: AsyncSession, email: str) -> User | None:
        res = await db.execute(select(User).where(User.email == email))
        return res.scalar_one_or_none()

    @staticmethod
    async def exists(db: AsyncSession, user_id: int) -> bool:
        res = await db.execute(select(User.id).where(User.id == user_id))
        return res.scalar_one_or_none() is not None

    @staticmethod
    async def upsert(db: AsyncSession, *, email: str, name: str) -> User:
        user = await UserRepository.get_by_email(db, email)

        if user is None:
            user = User(email=email, name=name)
            db.add(user)
        else:
            user.name = name

        await db.commit()
        await db.refresh(user)
        return user

    @staticmethod
    async def list_all(db: AsyncSession) -> list[User]:
        res = await db.execute(select(User).order_by(User.name.asc(), User.id.asc()))
        return list(res.scalars().all())

    @staticmethod
    async def list_team(
        db: AsyncSession, *, team_id: int, status: MembershipStatus
    ) -> list[User]:
        res = await db.execute(
            select(User)
            .where(User.team_id == team_id, User.membership_status == status.value)
            .order_by(User.name.asc(), User.id.asc())
        )
        return list(res.scalars().all())

    @staticmethod
    async def latest_update(
        db: AsyncSession, *, team_id: int, status: MembershipStatus
    ) -> datetime | None:
        res = await db.execute(
            select(func.max(User.updated_at)).where(
                User.team_id == team_id,
                User.membership_status == status.value,
            )
        )
        return res.scalar_one_or_none()

    @staticmethod
    async def set_role(db: AsyncSession, user: User, role: Role) -> User:
        user.role = role.value
        await db.commit()
        await db.refresh(user)
        return user

    @staticmethod
    async def set_membership(
        db: AsyncSession,
        user: User,
        *,
        team_id: int | None,
        status: MembershipStatus | None,
        commit: bool = True,
    ) -> User:
        user.team_id = team_id
        user.membership_status = status.value if status is not None else None
        if commit:
            await db.commit()
            await db.refresh(user)
        return user

    @staticmethod
    async def delete(db: AsyncSession, user: User) -> None:
        await db.delete(user)
        await db.commit()
