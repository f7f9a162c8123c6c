"""
Service équipes - code d'équipe, invitations, adhésion

Cycle de vie d'une invitation :
    invited -> accepted (ajout aux membres, invitation supprimée)
    invited -> removed  (échec d'envoi de l'email, suppression par token)

Rejoindre par code est un chemin séparé : pas d'invitation ni de token.
"""

import logging
import random
import secrets
from typing import List

from sqlalchemy.orm import Session

from tasknest.core.config import settings
from tasknest.core.errors import BadRequestError, ForbiddenError, NotFoundError, ServerError
from tasknest.models.team import Team, TeamMember, TeamInvitation, ROLE_ADMIN, ROLE_MEMBER
from tasknest.models.user import User
from tasknest.services.email_service import EmailError, send_email
from tasknest.services.permissions import is_admin, is_member

logger = logging.getLogger(__name__)

CODE_MIN = 100000
CODE_MAX = 999999


def generate_team_code(db: Session) -> str:
    # on tire jusqu'à tomber sur un code libre
    while True:
        code = str(random.randint(CODE_MIN, CODE_MAX))
        existing = db.query(Team).filter(Team.team_code == code).first()
        if not existing:
            return code


def get_team_or_404(db: Session, team_id: int) -> Team:
    team = db.query(Team).filter(Team.id == team_id).first()
    if not team:
        raise NotFoundError("Team not found")
    return team


def get_user_teams(db: Session, user_id: int) -> List[Team]:
    return db.query(Team).join(TeamMember).filter(
        TeamMember.user_id == user_id
    ).order_by(Team.created_at.desc(), Team.id.desc()).all()


def create_team(db: Session, owner: User, name: str, description: str = None) -> Team:
    team = Team(
        name=name,
        description=description,
        team_code=generate_team_code(db),
        owner_id=owner.id
    )
    team.members.append(TeamMember(user_id=owner.id, role=ROLE_ADMIN))
    db.add(team)
    db.commit()
    db.refresh(team)
    logger.info(f"Team {team.id} created by user {owner.id}")
    return team


def ensure_team_code(db: Session, team: Team) -> str:
    # anciennes équipes créées sans code
    if not team.team_code:
        team.team_code = generate_team_code(db)
        db.commit()
    return team.team_code


def add_invitation(db: Session, team: Team, email: str, role: str, invited_by: int) -> TeamInvitation:
    invitation = TeamInvitation(
        email=email.lower(),
        token=secrets.token_hex(20),
        role=role,
        invited_by=invited_by
    )
    team.invitations.append(invitation)
    db.commit()
    return invitation


def remove_invitation(db: Session, team: Team, token: str) -> bool:
    for invitation in list(team.invitations):
        if invitation.token == token:
            team.invitations.remove(invitation)
            db.commit()
            return True
    return False


def build_invitation_message(team: Team, invitation: TeamInvitation) -> str:
    accept_url = f"{settings.FRONTEND_URL}/accept-invite?token={invitation.token}&teamId={team.id}"
    return (
        "Hello,\n\n"
        f'You have been invited to join the "{team.name}" workspace on TaskNest.\n\n'
        "To accept this invitation, log in to your TaskNest account and open:\n"
        f"{accept_url}\n\n"
        'You can also click "Join Team" on the Teams dashboard and enter this Team Code:\n\n'
        f"{team.team_code}\n\n"
        "Best regards,\nThe TaskNest Team"
    )


def invite_member(db: Session, team: Team, inviter: User, email: str, role: str = ROLE_MEMBER) -> TeamInvitation:
    if not is_admin(team, inviter.id):
        raise ForbiddenError("Not authorized to invite members")

    email = email.lower()
    user_to_invite = db.query(User).filter(User.email == email).first()
    if user_to_invite and is_member(team, user_to_invite.id):
        raise BadRequestError("User is already a member")

    if any(i.email == email for i in team.invitations):
        raise BadRequestError("User already invited")

    ensure_team_code(db, team)
    invitation = add_invitation(db, team, email, role, inviter.id)

    try:
        send_email(
            to=email,
            subject=f"Invitation to join {team.name} on TaskNest",
            message=build_invitation_message(team, invitation)
        )
    except EmailError as e:
        logger.error(f"Invitation to {email} for team {team.id} rolled back: {e}")
        remove_invitation(db, team, invitation.token)
        raise ServerError(f"Email could not be sent: {e}") from e

    logger.info(f"User {inviter.id} invited {email} to team {team.id}")
    return invitation


def accept_invitation(db: Session, team_id: int, token: str, user: User) -> Team:
    team = get_team_or_404(db, team_id)

    # token ET email doivent correspondre
    invitation = next(
        (i for i in team.invitations if i.token == token and i.email == user.email.lower()),
        None
    )
    if invitation is None:
        raise BadRequestError("Invalid or expired invitation")

    if is_member(team, user.id):
        raise BadRequestError("You are already a member of this team")

    team.members.append(TeamMember(user_id=user.id, role=invitation.role))
    team.invitations.remove(invitation)
    db.commit()
    db.refresh(team)
    logger.info(f"User {user.id} accepted invitation to team {team.id}")
    return team


def join_team_by_code(db: Session, team_code: str, user: User) -> Team:
    if not team_code:
        raise BadRequestError("Please provide a team code")

    team = db.query(Team).filter(Team.team_code == str(team_code).strip()).first()
    if not team:
        raise BadRequestError("Invalid Team Code")

    if is_member(team, user.id):
        raise BadRequestError("You are already a member of this team")

    team.members.append(TeamMember(user_id=user.id, role=ROLE_MEMBER))
    db.commit()
    db.refresh(team)
    logger.info(f"User {user.id} joined team {team.id} with code")
    return team


def get_team_members(db: Session, team_id: int, user: User) -> List[TeamMember]:
    team = get_team_or_404(db, team_id)
    if not is_member(team, user.id):
        raise ForbiddenError("Not authorized")
    return team.members
