"""
Правила доступа к задачам.

Чистые функции: (actor, task) -> Decision. Подзадачи своих правил не имеют
и проверяются через can_update_task родительской задачи.
"""

from app.policies.actor import Actor
from app.policies.decision import ALLOW, Decision, allow_if


def can_view_task(actor: Actor, task) -> Decision:
    if actor.is_manager:
        return ALLOW
    return allow_if(actor.id == task.assigned_to_user_id)


def can_create_task(actor: Actor) -> Decision:
    return allow_if(actor.is_manager)


def can_update_task(actor: Actor, task) -> Decision:
    # какие поля участник может менять, решает роутер (status, actual_time)
    if actor.is_manager:
        return ALLOW
    return allow_if(actor.id == task.assigned_to_user_id)


def can_delete_task(actor: Actor, task) -> Decision:
    # назначенный исполнитель удалить задачу не может
    return allow_if(actor.is_manager and actor.id == task.created_by_user_id)


def can_assign_tasks(actor: Actor) -> Decision:
    return allow_if(actor.is_manager)
