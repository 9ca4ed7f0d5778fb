from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_actor, get_current_user
from app.core.errors import NotFoundError
from app.core.logging import get_logger
from app.db.database import get_db
from app.models.user import User
from app.policies.actor import Actor
from app.policies.decision import authorize
from app.policies.users import can_list_users, can_update_user_role
from app.repository.users import UserRepository
from app.schemas.user import (
    RoleUpdateIn,
    RoleUpdateOut,
    UserListOut,
    UserOut,
    UserUpsertIn,
)

router = APIRouter(prefix="/users", tags=["users"])
logger = get_logger(__name__)


@router.post("/upsert", response_model=UserOut)
async def upsert_user(payload: UserUpsertIn, db: AsyncSession = Depends(get_db)):
    """Вызывается провайдером аутентификации при входе пользователя."""
    return await UserRepository.upsert(db, email=payload.email, name=payload.name)


@router.get("/me", response_model=UserOut)
async def get_me(user: User = Depends(get_current_user)):
    return user


@router.get("", response_model=UserListOut)
async def list_users(
    actor: Actor = Depends(get_actor),
    db: AsyncSession = Depends(get_db),
):
    """Все пользователи для выбора исполнителя. Только для менеджеров."""
    authorize(can_list_users(actor))
    return {"data": await UserRepository.list_all(db)}


@router.patch("/{user_id}/role", response_model=RoleUpdateOut)
async def update_user_role(
    user_id: int,
    payload: RoleUpdateIn,
    actor: Actor = Depends(get_actor),
    db: AsyncSession = Depends(get_db),
):
    target = await UserRepository.get(db, user_id)
    if target is None:
        raise NotFoundError("User not found")

    authorize(can_update_user_role(actor, Actor.from_user(target), payload.role))

    target = await UserRepository.set_role(db, target, payload.role)
    logger.info(
        "users.role_updated user_id=%s role=%s by=%s",
        target.id,
        target.role,
        actor.id,
    )
    return {"message": "Role updated successfully", "user": target}
