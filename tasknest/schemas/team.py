from pydantic import EmailStr, StringConstraints, field_validator
from datetime import datetime
from typing import Annotated, Optional, List, Literal

from tasknest.schemas.base import CamelModel
from tasknest.schemas.user import UserSummary

# Schemas équipes / invitations

class TeamCreate(CamelModel):
    name: Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=50)]
    description: Optional[Annotated[str, StringConstraints(strip_whitespace=True, max_length=500)]] = None

class JoinTeamRequest(CamelModel):
    team_code: Optional[str] = None

    @field_validator("team_code", mode="before")
    @classmethod
    def code_as_string(cls, v):
        # le front peut envoyer le code en nombre
        if v is None:
            return v
        return str(v).strip()

class InviteRequest(CamelModel):
    email: EmailStr
    role: Literal["Admin", "Member"] = "Member"

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v):
        return v.lower()

class AcceptInviteRequest(CamelModel):
    token: str
    team_id: int

class MemberResponse(CamelModel):
    user: UserSummary
    role: str
    joined_at: datetime

class TeamResponse(CamelModel):
    id: int
    name: str
    description: Optional[str]
    team_code: Optional[str]
    owner_id: int
    members: List[MemberResponse]
    created_at: datetime
