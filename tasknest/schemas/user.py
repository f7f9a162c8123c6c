from pydantic import EmailStr, Field, StringConstraints, field_validator
from datetime import datetime
from typing import Annotated, Optional

from tasknest.schemas.base import CamelModel

Name = Annotated[str, StringConstraints(strip_whitespace=True, min_length=2, max_length=50)]


class UserRegister(CamelModel):
    name: Name
    email: EmailStr
    password: str = Field(min_length=6)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v):
        return v.lower()

class LoginRequest(CamelModel):
    email: EmailStr
    password: str = Field(min_length=1)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v):
        return v.lower()

class ProfileUpdate(CamelModel):
    name: Optional[Name] = None
    email: Optional[EmailStr] = None

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v):
        return v.lower() if v else v

class PasswordUpdate(CamelModel):
    current_password: str = Field(min_length=1)
    new_password: str = Field(min_length=6)

class UserResponse(CamelModel):
    id: int
    name: str
    email: str
    created_at: datetime

class UserSummary(CamelModel):
    id: int
    name: str
    email: str
