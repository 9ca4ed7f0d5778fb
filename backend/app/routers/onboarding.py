from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_current_user
from app.core.logging import get_logger
from app.db.database import get_db
from app.models.enums import Role
from app.models.user import User
from app.policies.actor import Actor
from app.policies.decision import authorize
from app.policies.users import can_choose_role, can_discard_account
from app.repository.users import UserRepository
from app.schemas.user import OnboardingCancelOut, RoleChoiceIn, UserOut

router = APIRouter(prefix="/onboarding", tags=["onboarding"])
logger = get_logger(__name__)

CHOICE_ROLES = {
    "pm": Role.project_manager,
    "member": Role.member_pending_assignment,
}


@router.post("/role", response_model=UserOut)
async def choose_role(
    payload: RoleChoiceIn,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """pm -> дальше создаёт команду, member -> вступает в команду по коду."""
    authorize(can_choose_role(Actor.from_user(user)))
    return await UserRepository.set_role(db, user, CHOICE_ROLES[payload.choice])


@router.delete("", response_model=OnboardingCancelOut)
async def cancel_onboarding(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """
    Отказ от онбординга.

    Аккаунт удаляется, только если роль так и не выбрана и команды нет;
    в остальных случаях ничего не удаляется.
    """
    if not can_discard_account(Actor.from_user(user)):
        return {"deleted": False}

    user_id = user.id
    await UserRepository.delete(db, user)
    logger.info("onboarding.account_discarded user_id=%s", user_id)
    return {"deleted": True}
