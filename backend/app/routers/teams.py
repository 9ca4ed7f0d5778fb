from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_actor, get_current_user
from app.core.errors import NotFoundError
from app.core.logging import get_logger
from app.db.database import get_db
from app.models.enums import MembershipStatus, NotificationKind
from app.models.team import Team
from app.models.user import User
from app.policies.actor import Actor
from app.policies.decision import authorize
from app.policies.teams import (
    can_create_team,
    can_join_team,
    can_review_member,
    can_review_members,
    can_update_team,
    can_view_team,
)
from app.repository.notifications import NotificationRepository
from app.repository.teams import TeamRepository
from app.repository.users import UserRepository
from app.schemas.team import (
    TeamCreateIn,
    TeamJoinIn,
    TeamJoinOut,
    TeamOut,
    TeamPublicOut,
    TeamUpdateIn,
)
from app.schemas.user import TeamMemberOut, UserOut

router = APIRouter(prefix="/teams", tags=["teams"])
logger = get_logger(__name__)


async def _team_or_404(repo: TeamRepository, team_id: int) -> Team:
    team = await repo.get_team(team_id)
    if team is None:
        raise NotFoundError("Team not found")
    return team


async def _reviewable_member(db: AsyncSession, actor: Actor, user_id: int) -> User:
    member = await UserRepository.get(db, user_id)
    if member is None:
        raise NotFoundError("User not found")
    authorize(can_review_member(actor, Actor.from_user(member)))
    return member


@router.post("", response_model=TeamOut, status_code=status.HTTP_201_CREATED)
async def create_team(
    payload: TeamCreateIn,
    actor: Actor = Depends(get_actor),
    db: AsyncSession = Depends(get_db),
):
    """Создаёт команду; код для вступления приходит создателю уведомлением."""
    authorize(can_create_team(actor))

    repo = TeamRepository(db)
    team = await repo.create_team_with_creator(
        name=payload.name,
        description=payload.description,
        photo=payload.photo,
        creator_id=actor.id,
    )
    logger.info("teams.created team_id=%s by=%s", team.id, actor.id)
    return team


@router.get("", response_model=list[TeamPublicOut])
async def list_teams(
    actor: Actor = Depends(get_actor),
    db: AsyncSession = Depends(get_db),
):
    return await TeamRepository(db).list_teams()


@router.post("/join", response_model=TeamJoinOut)
async def request_join(
    payload: TeamJoinIn,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    authorize(can_join_team(Actor.from_user(user)))

    team = await TeamRepository(db).get_team(payload.team_id)
    # неверный код не отличаем от несуществующей команды
    if team is None or team.code != payload.team_code.strip().upper():
        raise NotFoundError("Invalid team code for the selected team.")

    await UserRepository.set_membership(
        db, user, team_id=team.id, status=MembershipStatus.pending
    )
    logger.info("teams.join_requested team_id=%s user_id=%s", team.id, user.id)
    return {
        "team_id": team.id,
        "name": team.name,
        "membership_status": user.membership_status,
    }


@router.get("/members", response_model=list[TeamMemberOut])
async def list_members(
    actor: Actor = Depends(get_actor),
    db: AsyncSession = Depends(get_db),
):
    """Одобренные участники своей команды."""
    if actor.team_id is None:
        return []
    users = await UserRepository.list_team(
        db, team_id=actor.team_id, status=MembershipStatus.approved
    )
    return [TeamMemberOut.from_user(u) for u in users]


@router.get("/pending-members", response_model=list[UserOut])
async def list_pending_members(
    actor: Actor = Depends(get_actor),
    db: AsyncSession = Depends(get_db),
):
    authorize(can_review_members(actor))
    return await UserRepository.list_team(
        db, team_id=actor.team_id, status=MembershipStatus.pending
    )


@router.post("/members/{user_id}/approve", response_model=UserOut)
async def approve_member(
    user_id: int,
    actor: Actor = Depends(get_actor),
    db: AsyncSession = Depends(get_db),
):
    member = await _reviewable_member(db, actor, user_id)

    newly_approved = member.membership_status != MembershipStatus.approved.value
    await UserRepository.set_membership(
        db,
        member,
        team_id=member.team_id,
        status=MembershipStatus.approved,
        commit=False,
    )
    if newly_approved:
        team = await TeamRepository(db).get_team(member.team_id)
        NotificationRepository.add(
            db,
            user_id=member.id,
            kind=NotificationKind.member_approved,
            payload={"team_name": team.name if team else None},
        )

    await db.commit()
    await db.refresh(member)
    logger.info("teams.member_approved user_id=%s by=%s", member.id, actor.id)
    return member


@router.post("/members/{user_id}/reject", response_model=UserOut)
async def reject_member(
    user_id: int,
    actor: Actor = Depends(get_actor),
    db: AsyncSession = Depends(get_db),
):
    member = await _reviewable_member(db, actor, user_id)

    await UserRepository.set_membership(
        db, member, team_id=None, status=MembershipStatus.rejected
    )
    logger.info("teams.member_rejected user_id=%s by=%s", member.id, actor.id)
    return member


@router.get("/{team_id}", response_model=TeamOut)
async def get_team(
    team_id: int,
    actor: Actor = Depends(get_actor),
    db: AsyncSession = Depends(get_db),
):
    team = await _team_or_404(TeamRepository(db), team_id)
    authorize(can_view_team(actor, team))
    return team


@router.put("/{team_id}", response_model=TeamOut)
async def update_team(
    team_id: int,
    payload: TeamUpdateIn,
    actor: Actor = Depends(get_actor),
    db: AsyncSession = Depends(get_db),
):
    repo = TeamRepository(db)
    team = await _team_or_404(repo, team_id)
    authorize(can_update_team(actor, team))

    # code не меняется никогда, его нет в TeamUpdateIn
    team = await repo.update_team(team, payload.model_dump(exclude_unset=True))
    logger.info("teams.updated team_id=%s by=%s", team.id, actor.id)
    return team
