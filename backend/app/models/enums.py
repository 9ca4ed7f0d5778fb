from enum import Enum


class Role(str, Enum):
    superadmin = "superadmin"
    project_manager = "project_manager"
    frontend_developer = "frontend_developer"
    backend_developer = "backend_developer"
    technical_writer = "technical_writer"
    system_analyst = "system_analyst"
    member_pending_assignment = "member_pending_assignment"


MANAGER_ROLES = frozenset({Role.superadmin, Role.project_manager})

# роли, которые можно выставить через PATCH /users/{id}/role
ASSIGNABLE_ROLES = frozenset(
    {
        Role.superadmin,
        Role.project_manager,
        Role.frontend_developer,
        Role.backend_developer,
        Role.technical_writer,
        Role.system_analyst,
    }
)

ROLE_LABELS = {
    Role.superadmin: "Project Manager",
    Role.project_manager: "Project Manager",
    Role.frontend_developer: "Frontend Developer",
    Role.backend_developer: "Backend Developer",
    Role.technical_writer: "Technical Writer",
    Role.system_analyst: "System Analyst",
    Role.member_pending_assignment: "Team Member",
}


def role_label(role: str | None) -> str:
    try:
        return ROLE_LABELS[Role(role)]
    except ValueError:
        return "Unknown"


class MembershipStatus(str, Enum):
    pending = "pending"
    approved = "approved"
    rejected = "rejected"


class TaskPriority(str, Enum):
    low = "low"
    medium = "medium"
    high = "high"
    urgent = "urgent"


class TaskStatus(str, Enum):
    pending = "pending"
    in_progress = "in_progress"
    completed = "completed"
    cancelled = "cancelled"


# задачи в этих статусах не считаются "открытыми"
CLOSED_TASK_STATUSES = (TaskStatus.completed.value, TaskStatus.cancelled.value)


class SubtaskStatus(str, Enum):
    pending = "pending"
    in_progress = "in_progress"
    completed = "completed"


class NotificationKind(str, Enum):
    team_created = "team_created"
    member_approved = "member_approved"
