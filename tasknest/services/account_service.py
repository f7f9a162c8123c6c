"""Suppression de compte"""

import logging

from sqlalchemy.orm import Session

from tasknest.models.task import Task
from tasknest.models.team import Team, TeamMember, TeamInvitation
from tasknest.models.user import User

logger = logging.getLogger(__name__)


def delete_account(db: Session, user: User):
    """
    Supprime l'utilisateur et ce qui lui appartient :
    - les équipes dont il est propriétaire (avec leurs tâches, membres, invitations)
    - ses tâches, ses adhésions aux autres équipes
    Les tâches qui lui étaient assignées redeviennent non assignées.
    """
    owned_teams = db.query(Team).filter(Team.owner_id == user.id).all()
    owned_ids = [team.id for team in owned_teams]

    if owned_ids:
        db.query(Task).filter(Task.team_id.in_(owned_ids)).delete(synchronize_session=False)
    for team in owned_teams:
        db.delete(team)
    db.flush()

    db.query(Task).filter(Task.user_id == user.id).delete(synchronize_session=False)
    db.query(Task).filter(Task.assigned_to == user.id).update(
        {Task.assigned_to: None}, synchronize_session=False
    )
    db.query(TeamMember).filter(TeamMember.user_id == user.id).delete(synchronize_session=False)
    db.query(TeamInvitation).filter(TeamInvitation.invited_by == user.id).update(
        {TeamInvitation.invited_by: None}, synchronize_session=False
    )

    db.delete(user)
    db.commit()
    logger.info(f"Account {user.id} deleted ({len(owned_ids)} owned teams removed)")
