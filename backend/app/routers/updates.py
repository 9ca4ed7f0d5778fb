from typing import Annotated

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_actor
from app.db.database import get_db
from app.policies.actor import Actor
from app.schemas.updates import CountCheckOut, TimestampCheckOut
from app.services import updates as update_checks

router = APIRouter(prefix="/check-updates", tags=["updates"])

LastKnown = Annotated[
    str | None,
    Query(max_length=64, description="Последнее значение last_update, которое видел клиент"),
]


@router.get("/tasks", response_model=TimestampCheckOut)
async def check_tasks(
    last_known: LastKnown = None,
    actor: Actor = Depends(get_actor),
    db: AsyncSession = Depends(get_db),
):
    return await update_checks.check_tasks(db, actor, last_known)


@router.get("/dashboard", response_model=TimestampCheckOut)
async def check_dashboard(
    last_known: LastKnown = None,
    actor: Actor = Depends(get_actor),
    db: AsyncSession = Depends(get_db),
):
    return await update_checks.check_dashboard(db, actor, last_known)


@router.get("/unread", response_model=CountCheckOut)
async def check_unread(
    last_count: int | None = Query(default=None, ge=0),
    actor: Actor = Depends(get_actor),
    db: AsyncSession = Depends(get_db),
):
    return await update_checks.check_unread(db, actor, last_count)


@router.get("/users", response_model=TimestampCheckOut)
async def check_users(
    last_known: LastKnown = None,
    actor: Actor = Depends(get_actor),
    db: AsyncSession = Depends(get_db),
):
    return await update_checks.check_users(db, actor, last_known)


@router.get("/pending-members", response_model=TimestampCheckOut)
async def check_pending_members(
    last_known: LastKnown = None,
    actor: Actor = Depends(get_actor),
    db: AsyncSession = Depends(get_db),
):
    return await update_checks.check_pending_members(db, actor, last_known)
