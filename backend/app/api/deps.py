from fastapi import Depends, Header, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.database import get_db
from app.models.user import User
from app.policies.actor import Actor
from app.policies.decision import authorize
from app.policies.teams import can_access_team_area
from app.repository.users import UserRepository


async def get_current_user(
    x_user_id: int | None = Header(
        default=None, description="User id forwarded by the auth gateway"
    ),
    db: AsyncSession = Depends(get_db),
) -> User:
    # аутентификация снаружи: шлюз кладёт id пользователя в заголовок
    if x_user_id is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
        )

    user = await UserRepository.get(db, x_user_id)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="User not found. Call /users/upsert first.",
        )
    return user


async def get_actor(user: User = Depends(get_current_user)) -> Actor:
    return Actor.from_user(user)


async def require_team_access(actor: Actor = Depends(get_actor)) -> Actor:
    """Роль выбрана, команда есть, членство одобрено."""
    authorize(can_access_team_area(actor))
    return actor
