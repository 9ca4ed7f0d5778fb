from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import require_team_access
from app.db.database import get_db
from app.policies.actor import Actor
from app.schemas.dashboard import DashboardOut
from app.services.dashboard import build_dashboard

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


@router.get("", response_model=DashboardOut)
async def get_dashboard(
    actor: Actor = Depends(require_team_access),
    db: AsyncSession = Depends(get_db),
):
    """Доступен после одобрения членства в команде."""
    return await build_dashboard(db, actor)
