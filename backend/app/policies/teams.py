from app.policies.actor import Actor
from app.policies.decision import ALLOW, Decision, allow_if, deny


def can_create_team(actor: Actor) -> Decision:
    if not actor.is_manager:
        return deny("Only Project Managers can create teams.")
    # один менеджер -- одна команда
    return allow_if(actor.team_id is None, "You already belong to a team.")


def can_view_team(actor: Actor, team) -> Decision:
    return allow_if(actor.team_id is not None and actor.team_id == team.id)


def can_update_team(actor: Actor, team) -> Decision:
    if not actor.is_manager:
        return deny()
    return allow_if(actor.team_id is not None and actor.team_id == team.id)


def can_join_team(actor: Actor) -> Decision:
    if actor.is_manager:
        return deny("Project Managers create teams instead of joining them.")
    if not actor.has_role:
        return deny("Select a role before joining a team.")
    return allow_if(not actor.is_approved, "You already belong to a team.")


def can_review_members(actor: Actor) -> Decision:
    return allow_if(actor.is_manager and actor.team_id is not None)


def can_review_member(actor: Actor, member: Actor) -> Decision:
    """Одобрить или отклонить можно только заявку в свою команду."""
    if not can_review_members(actor) or member.id == actor.id:
        return deny()
    return allow_if(member.team_id == actor.team_id)


def can_access_team_area(actor: Actor) -> Decision:
    if not actor.has_role:
        return deny("Select a role to continue.")
    if actor.team_id is None:
        return deny("Join or create a team to continue.")
    if actor.is_pending:
        return deny("Membership pending approval.")
    if actor.is_approved:
        return ALLOW
    return deny()
