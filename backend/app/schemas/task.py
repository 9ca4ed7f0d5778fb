from datetime import datetime
from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field, field_validator

from app.core.time_utils import to_naive_utc
from app.models.enums import TaskPriority, TaskStatus
from app.schemas.subtask import SubtaskOut
from app.schemas.user import UserBrief


class TaskCreateIn(BaseModel):
    title: str = Field(min_length=1, max_length=255)
    description: str | None = None
    priority: TaskPriority
    due_date: datetime | None = None
    estimated_time: int | None = Field(default=None, ge=1)
    assigned_to_user_id: int

    class Config:
        use_enum_values = True

    @field_validator("due_date")
    @classmethod
    def normalize_due_date(cls, v: datetime | None) -> datetime | None:
        return to_naive_utc(v)


class TaskMemberUpdateIn(BaseModel):
    """
    Что исполнитель может менять в своей задаче: статус и фактическое время.

    Остальные поля из тела запроса молча игнорируются.
    """

    status: TaskStatus | None = None
    actual_time: int | None = Field(default=None, ge=0)

    class Config:
        use_enum_values = True

    @field_validator("status")
    @classmethod
    def status_not_null(cls, v):
        if v is None:
            raise ValueError("Field may not be null")
        return v


class TaskManagerUpdateIn(TaskMemberUpdateIn):
    title: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = None
    priority: TaskPriority | None = None
    due_date: datetime | None = None
    estimated_time: int | None = Field(default=None, ge=1)
    assigned_to_user_id: int | None = None

    @field_validator("title", "priority", "assigned_to_user_id")
    @classmethod
    def not_null(cls, v):
        if v is None:
            raise ValueError("Field may not be null")
        return v

    @field_validator("due_date")
    @classmethod
    def normalize_due_date(cls, v: datetime | None) -> datetime | None:
        return to_naive_utc(v)


class TaskOut(BaseModel):
    id: int
    title: str
    description: str | None
    priority: str
    status: str
    due_date: datetime | None
    estimated_time: int | None
    actual_time: int | None
    viewed_at: datetime | None
    is_unread: bool
    assigned_to_user_id: int | None
    created_by_user_id: int | None
    progress_percentage: int
    created_at: datetime
    updated_at: datetime

    subtasks: list[SubtaskOut] = []
    assignee: UserBrief | None = None
    creator: UserBrief | None = None

    class Config:
        from_attributes = True


class PartitionedTaskList(BaseModel):
    """Ответ менеджеру: свои задачи и задачи команды."""

    kind: Literal["partitioned"] = "partitioned"
    mine: list[TaskOut]
    team: list[TaskOut]


class FlatTaskList(BaseModel):
    """Ответ участнику: только назначенные ему задачи."""

    kind: Literal["flat"] = "flat"
    items: list[TaskOut]


TaskListOut = Annotated[
    Union[PartitionedTaskList, FlatTaskList], Field(discriminator="kind")
]


class UnreadCountOut(BaseModel):
    count: int
