from collections.abc import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from app.core.config import DATABASE_URL, DB_ECHO

if not DATABASE_URL:
    raise RuntimeError("DATABASE_URL is not set. Put it into backend/.env")

# pool_pre_ping: опрос /check-updates держит соединения подолгу, отвалившиеся отбрасываем
engine = create_async_engine(DATABASE_URL, echo=DB_ECHO, pool_pre_ping=True)

SessionLocal = async_sessionmaker(
    bind=engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Одна сессия на запрос. Коммитят репозитории, откат при ошибке делает контекст."""
    async with SessionLocal() as session:
        yield session
