import os
from datetime import datetime
from itertools import count

# engine из app.db.database требует DATABASE_URL при импорте; в тестах get_db подменяется
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from app.db.database import get_db
from app.db.registry import Base, Subtask, Task, Team, User
from app.main import app
from app.models.enums import MembershipStatus, Role


class Store:
    """Создание и перечитывание данных в обход API, каждый раз в новой сессии."""

    def __init__(self, session_factory: async_sessionmaker):
        self.session_factory = session_factory
        self._seq = count(1)

    async def _save(self, obj):
        async with self.session_factory() as s:
            s.add(obj)
            await s.commit()
            await s.refresh(obj)
            return obj

    async def user(
        self,
        name: str | None = None,
        *,
        role: Role | None = None,
        team_id: int | None = None,
        membership_status: MembershipStatus | None = None,
    ) -> User:
        n = next(self._seq)
        return await self._save(
            User(
                name=name or f"user{n}",
                email=f"user{n}@example.com",
                role=role.value if role else None,
                team_id=team_id,
                membership_status=membership_status.value if membership_status else None,
            )
        )

    async def manager(
        self, name: str | None = None, *, team_id: int | None = None, role=Role.project_manager
    ) -> User:
        status = MembershipStatus.approved if team_id else None
        return await self.user(
            name, role=role, team_id=team_id, membership_status=status
        )

    async def member(
        self, name: str | None = None, *, team_id: int | None = None, role=Role.backend_developer
    ) -> User:
        status = MembershipStatus.approved if team_id else None
        return await self.user(
            name, role=role, team_id=team_id, membership_status=status
        )

    async def team(self, creator: User, name: str = "Core", code: str | None = None) -> Team:
        n = next(self._seq)
        async with self.session_factory() as s:
            team = Team(name=name, code=code or f"CODE{n:04d}", created_by=creator.id)
            s.add(team)
            await s.flush()
            owner = await s.get(User, creator.id)
            owner.team_id = team.id
            owner.membership_status = MembershipStatus.approved.value
            await s.commit()
            await s.refresh(team)
            return team

    async def task(
        self,
        *,
        creator: User,
        assignee: User | None,
        title: str = "Task",
        description: str | None = None,
        priority: str = "medium",
        status: str = "pending",
        due_date: datetime | None = None,
        viewed_at: datetime | None = None,
    ) -> Task:
        return await self._save(
            Task(
                title=title,
                description=description,
                priority=priority,
                status=status,
                due_date=due_date,
                viewed_at=viewed_at,
                assigned_to_user_id=assignee.id if assignee else None,
                created_by_user_id=creator.id,
            )
        )

    async def subtask(
        self, task: Task, *, title: str = "Step", status: str = "pending", order: int = 0
    ) -> Subtask:
        return await self._save(
            Subtask(task_id=task.id, title=title, status=status, order=order)
        )

    async def get(self, model, obj_id: int):
        async with self.session_factory() as s:
            res = await s.execute(select(model).where(model.id == obj_id))
            return res.scalar_one_or_none()


def auth(user: User) -> dict[str, str]:
    return {"X-User-Id": str(user.id)}


@pytest.fixture
async def session_factory(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)

    await engine.dispose()


@pytest.fixture
def store(session_factory) -> Store:
    return Store(session_factory)


@pytest.fixture
async def client(session_factory) -> AsyncClient:
    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()
