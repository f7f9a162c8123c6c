"""
Politique d'accès aux tâches et aux équipes.

Fonctions pures : elles ne font aucune requête, on leur passe la tâche,
l'équipe (chargée) et l'id de l'utilisateur.

- tâche perso (pas de team_id) : seul le créateur lit / modifie / supprime
- tâche d'équipe : tout membre lit et modifie, seul le créateur (encore membre) supprime
"""

from typing import Optional

from tasknest.models.task import Task
from tasknest.models.team import Team, TeamMember, ROLE_ADMIN


def get_membership(team: Optional[Team], user_id: int) -> Optional[TeamMember]:
    if team is None:
        return None
    for member in team.members:
        if member.user_id == user_id:
            return member
    return None


def is_member(team: Optional[Team], user_id: int) -> bool:
    return get_membership(team, user_id) is not None


def is_admin(team: Optional[Team], user_id: int) -> bool:
    member = get_membership(team, user_id)
    return member is not None and member.role == ROLE_ADMIN


def can_view_task(task: Task, user_id: int, team: Optional[Team] = None) -> bool:
    if task.team_id is None:
        return task.user_id == user_id
    return is_member(team, user_id)


def can_update_task(task: Task, user_id: int, team: Optional[Team] = None) -> bool:
    if task.team_id is None:
        return task.user_id == user_id
    return is_member(team, user_id)


def can_delete_task(task: Task, user_id: int, team: Optional[Team] = None) -> bool:
    if task.team_id is None:
        return task.user_id == user_id
    return is_member(team, user_id) and task.user_id == user_id


def can_assign(team: Optional[Team], owner_id: int, assignee_id: Optional[int]) -> bool:
    """Un assigné doit être membre de l'équipe ; une tâche perso ne s'assigne qu'à son créateur."""
    if assignee_id is None:
        return True
    if team is None:
        return assignee_id == owner_id
    return is_member(team, assignee_id)
