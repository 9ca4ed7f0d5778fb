from datetime import datetime

from pydantic import BaseModel, Field, field_validator


class TeamCreateIn(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    description: str | None = Field(default=None, max_length=1000)
    photo: str | None = Field(default=None, max_length=255)


class TeamUpdateIn(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = Field(default=None, max_length=1000)
    photo: str | None = Field(default=None, max_length=255)

    @field_validator("name")
    @classmethod
    def name_not_null(cls, v):
        if v is None:
            raise ValueError("Field may not be null")
        return v


class TeamOut(BaseModel):
    id: int
    name: str
    description: str | None
    code: str
    photo: str | None
    created_by: int
    created_at: datetime

    class Config:
        from_attributes = True


class TeamPublicOut(BaseModel):
    """Для выбора команды при вступлении: без кода."""

    id: int
    name: str
    photo: str | None

    class Config:
        from_attributes = True


class TeamJoinIn(BaseModel):
    team_id: int
    team_code: str = Field(min_length=1, max_length=64)


class TeamJoinOut(BaseModel):
    team_id: int
    name: str
    membership_status: str
