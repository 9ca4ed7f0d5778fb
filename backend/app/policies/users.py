from app.models.enums import MANAGER_ROLES, Role
from app.policies.actor import Actor
from app.policies.decision import ALLOW, Decision, allow_if, deny


def can_list_users(actor: Actor) -> Decision:
    return allow_if(actor.is_manager)


def can_update_user_role(actor: Actor, target: Actor, new_role: Role) -> Decision:
    """
    Смена роли пользователя.

    Суперадмин может всё. Project manager:
    - не трогает других менеджеров;
    - меняет роли только участникам своей команды;
    - не выдаёт роли superadmin и project_manager.
    """
    if not actor.is_manager:
        return deny("Unauthorized. Only Project Managers can update roles.")

    if actor.is_superadmin:
        return ALLOW

    if target.is_manager:
        return deny("Cannot change another Project Manager's role.")

    if target.team_id != actor.team_id:
        return deny("You can only update roles for members in your team.")

    if new_role in MANAGER_ROLES:
        return deny("Project Managers cannot assign PM or admin roles.")

    return ALLOW


def can_choose_role(actor: Actor) -> Decision:
    # после вступления в команду роль меняет только менеджер
    return allow_if(actor.team_id is None, "Role is already set for your team.")


def can_discard_account(actor: Actor) -> Decision:
    """Отмена онбординга удаляет аккаунт, только если роль не выбрана и команды нет."""
    return allow_if(not actor.has_role and actor.team_id is None)
