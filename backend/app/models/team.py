from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from app.core.time_utils import utcnow
from app.db.base import Base


class Team(Base):
    __tablename__ = "teams"

    id: Mapped[int] = mapped_column(primary_key=True)
    # название команды можно не уникальным
    name: Mapped[str] = mapped_column(String(255))
    description: Mapped[str | None] = mapped_column(Text, nullable=True)

    # код для вступления (уникальный, не меняется после выдачи)
    code: Mapped[str] = mapped_column(String(16), unique=True, index=True)

    # путь к фото в хранилище, само хранилище снаружи
    photo: Mapped[str | None] = mapped_column(String(255), nullable=True)

    # users.team_id -> teams и teams.created_by -> users образуют цикл
    created_by: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE", use_alter=True),
        nullable=False,
    )

    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=utcnow, onupdate=utcnow
    )
