from typing import Literal

from pydantic import BaseModel, Field, field_validator

from app.models.enums import ASSIGNABLE_ROLES, Role, role_label


class UserUpsertIn(BaseModel):
    email: str = Field(min_length=3, max_length=255, pattern=r"^[^@\s]+@[^@\s]+$")
    name: str = Field(min_length=1, max_length=255)


class UserOut(BaseModel):
    id: int
    name: str
    email: str
    role: str | None
    team_id: int | None
    membership_status: str | None

    class Config:
        from_attributes = True


class UserBrief(BaseModel):
    """Для выпадающего списка исполнителей."""

    id: int
    name: str
    email: str
    role: str | None

    class Config:
        from_attributes = True


class TeamMemberOut(UserBrief):
    role_label: str = ""

    @classmethod
    def from_user(cls, user) -> "TeamMemberOut":
        out = cls.model_validate(user)
        out.role_label = role_label(user.role)
        return out


class UserListOut(BaseModel):
    data: list[UserBrief]


class RoleUpdateIn(BaseModel):
    role: Role

    @field_validator("role")
    @classmethod
    def validate_assignable(cls, v: Role) -> Role:
        if v not in ASSIGNABLE_ROLES:
            raise ValueError("Role cannot be assigned")
        return v


class RoleUpdateOut(BaseModel):
    message: str
    user: UserBrief


class RoleChoiceIn(BaseModel):
    """Выбор на онбординге: менеджер создаёт команду, участник вступает."""

    choice: Literal["pm", "member"]


class OnboardingCancelOut(BaseModel):
    deleted: bool
