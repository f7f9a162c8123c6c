from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from tasknest.core.database import get_db
from tasknest.core.security import get_current_user
from tasknest.models.user import User
from tasknest.schemas.team import (
    TeamCreate,
    JoinTeamRequest,
    InviteRequest,
    AcceptInviteRequest,
    MemberResponse,
    TeamResponse
)
from tasknest.services import team_service

router = APIRouter(prefix="/api/teams", tags=["teams"])


@router.get("")
def list_teams(db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    # équipes dont l'user est membre
    teams = team_service.get_user_teams(db, current_user.id)
    return {
        "success": True,
        "count": len(teams),
        "data": {"teams": [TeamResponse.model_validate(t) for t in teams]}
    }


@router.post("", status_code=status.HTTP_201_CREATED)
def create_team(
    team_data: TeamCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    team = team_service.create_team(db, current_user, team_data.name, team_data.description)
    return {
        "success": True,
        "message": "Team created successfully",
        "data": {"team": TeamResponse.model_validate(team)}
    }


@router.post("/join")
def join_team(
    request: JoinTeamRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Rejoindre une équipe avec son code à 6 chiffres (sans invitation)"""
    team = team_service.join_team_by_code(db, request.team_code, current_user)
    return {
        "success": True,
        "message": "Joined team successfully",
        "data": {"team": TeamResponse.model_validate(team)}
    }


@router.post("/accept-invite")
def accept_invite(
    request: AcceptInviteRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    team = team_service.accept_invitation(db, request.team_id, request.token, current_user)
    return {
        "success": True,
        "message": "Joined team successfully",
        "data": {"team": TeamResponse.model_validate(team)}
    }


@router.post("/{team_id}/invite")
def invite_member(
    team_id: int,
    request: InviteRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """
    Inviter quelqu'un par email (admins uniquement).

    Si l'email ne part pas, l'invitation est retirée et on renvoie une 500.
    """
    team = team_service.get_team_or_404(db, team_id)
    team_service.invite_member(db, team, current_user, request.email, request.role)
    return {"success": True, "message": "Invitation email sent"}


@router.get("/{team_id}/members")
def team_members(
    team_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    members = team_service.get_team_members(db, team_id, current_user)
    return {
        "success": True,
        "data": {"members": [MemberResponse.model_validate(m) for m in members]}
    }
