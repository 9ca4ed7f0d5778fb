"""
Кто делает запрос.

Роль пользователя хранится строкой, но политики работают не со строкой,
а с закрытым набором вариантов: Manager, Member или Unassigned (роль не выбрана).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from app.models.enums import MANAGER_ROLES, MembershipStatus, Role


@dataclass(frozen=True)
class Manager:
    role: Role

    @property
    def is_superadmin(self) -> bool:
        return self.role is Role.superadmin


@dataclass(frozen=True)
class Member:
    kind: Role


@dataclass(frozen=True)
class Unassigned:
    pass


Standing = Union[Manager, Member, Unassigned]


def standing_for(role: str | None) -> Standing:
    if not role:
        return Unassigned()
    try:
        parsed = Role(role)
    except ValueError:
        return Unassigned()
    if parsed in MANAGER_ROLES:
        return Manager(parsed)
    return Member(parsed)


@dataclass(frozen=True)
class Actor:
    id: int
    standing: Standing
    team_id: int | None = None
    membership_status: str | None = None

    @classmethod
    def from_user(cls, user) -> Actor:
        return cls(
            id=user.id,
            standing=standing_for(user.role),
            team_id=user.team_id,
            membership_status=user.membership_status,
        )

    @property
    def is_manager(self) -> bool:
        return isinstance(self.standing, Manager)

    @property
    def is_superadmin(self) -> bool:
        return isinstance(self.standing, Manager) and self.standing.is_superadmin

    @property
    def has_role(self) -> bool:
        return not isinstance(self.standing, Unassigned)

    @property
    def role(self) -> Role | None:
        if isinstance(self.standing, Manager):
            return self.standing.role
        if isinstance(self.standing, Member):
            return self.standing.kind
        return None

    @property
    def is_approved(self) -> bool:
        return (
            self.team_id is not None
            and self.membership_status == MembershipStatus.approved.value
        )

    @property
    def is_pending(self) -> bool:
        return (
            self.team_id is not None
            and self.membership_status == MembershipStatus.pending.value
        )
