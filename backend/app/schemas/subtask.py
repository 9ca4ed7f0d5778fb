from datetime import datetime

from pydantic import BaseModel, Field, field_validator

from app.models.enums import SubtaskStatus


class SubtaskCreateIn(BaseModel):
    title: str = Field(min_length=1, max_length=255)
    description: str | None = None
    estimated_time: int | None = Field(default=None, ge=1)


class SubtaskUpdateIn(BaseModel):
    title: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = None
    status: SubtaskStatus | None = None
    estimated_time: int | None = Field(default=None, ge=1)
    order: int | None = Field(default=None, ge=0)
    # перенос в другую задачу запрещён; поле есть, чтобы явно отклонить попытку
    task_id: int | None = None

    class Config:
        use_enum_values = True

    @field_validator("title", "status")
    @classmethod
    def not_null(cls, v):
        if v is None:
            raise ValueError("Field may not be null")
        return v


class SubtaskOut(BaseModel):
    id: int
    task_id: int
    title: str
    description: str | None
    status: str
    order: int
    estimated_time: int | None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class SubtaskOrderItem(BaseModel):
    id: int
    order: int = Field(ge=0)


class SubtaskReorderIn(BaseModel):
    subtasks: list[SubtaskOrderItem] = Field(min_length=1)
