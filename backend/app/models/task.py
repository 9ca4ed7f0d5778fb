from collections.abc import Iterable
from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.core.time_utils import utcnow
from app.db.base import Base
from app.models.enums import SubtaskStatus, TaskStatus


def compute_progress(status: str, subtask_statuses: Iterable[str]) -> int:
    """
    Процент выполнения задачи.

    Без подзадач: 100 для completed, иначе 0.
    С подзадачами: floor(100 * completed / total), без округления вверх
    (1 из 3 -> 33).
    """
    statuses = list(subtask_statuses)
    if not statuses:
        return 100 if status == TaskStatus.completed.value else 0

    done = sum(1 for s in statuses if s == SubtaskStatus.completed.value)
    return (100 * done) // len(statuses)


class Task(Base):
    __tablename__ = "tasks"

    id: Mapped[int] = mapped_column(primary_key=True)
    title: Mapped[str] = mapped_column(String(255))
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    priority: Mapped[str] = mapped_column(String(16))
    status: Mapped[str] = mapped_column(String(16), default=TaskStatus.pending.value)

    due_date: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    estimated_time: Mapped[int | None] = mapped_column(Integer, nullable=True)
    actual_time: Mapped[int | None] = mapped_column(Integer, nullable=True)

    # NULL = исполнитель ещё не открыл список задач
    viewed_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)

    assigned_to_user_id: Mapped[int | None] = mapped_column(
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    created_by_user_id: Mapped[int | None] = mapped_column(
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )

    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=utcnow, onupdate=utcnow, index=True
    )
    deleted_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)

    subtasks: Mapped[list["Subtask"]] = relationship(
        "Subtask",
        back_populates="task",
        lazy="selectin",
        order_by="[Subtask.order, Subtask.id]",
        cascade="all, delete-orphan",
    )
    assignee: Mapped["User | None"] = relationship(
        "User",
        lazy="selectin",
        foreign_keys=[assigned_to_user_id],
    )
    creator: Mapped["User | None"] = relationship(
        "User",
        lazy="selectin",
        foreign_keys=[created_by_user_id],
    )

    @property
    def progress_percentage(self) -> int:
        return compute_progress(self.status, (s.status for s in self.subtasks))

    @property
    def is_unread(self) -> bool:
        return self.assigned_to_user_id is not None and self.viewed_at is None
