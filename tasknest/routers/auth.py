import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from tasknest.core.database import get_db
from tasknest.core.errors import BadRequestError, UnauthorizedError
from tasknest.core.security import create_access_token, get_current_user
from tasknest.models.user import User
from tasknest.schemas.user import UserRegister, LoginRequest, ProfileUpdate, PasswordUpdate, UserResponse
from tasknest.services.account_service import delete_account

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["auth"])


def _auth_payload(user: User) -> dict:
    return {
        "user": UserResponse.model_validate(user),
        "token": create_access_token(user.id, user.email)
    }


@router.post("/register", status_code=status.HTTP_201_CREATED)
def register(user_data: UserRegister, db: Session = Depends(get_db)):
    """Créer un nouvel utilisateur"""

    # Vérifie si l'email existe déjà
    existing_user = db.query(User).filter(User.email == user_data.email).first()
    if existing_user:
        raise BadRequestError("User already exists with this email")

    new_user = User(name=user_data.name, email=user_data.email)
    new_user.set_password(user_data.password)

    db.add(new_user)
    db.commit()
    db.refresh(new_user)
    logger.info(f"User {new_user.id} registered")

    return {
        "success": True,
        "message": "User registered successfully",
        "data": _auth_payload(new_user)
    }

@router.post("/login")
def login(credentials: LoginRequest, db: Session = Depends(get_db)):
    """Se connecter et recevoir le token"""

    user = db.query(User).filter(User.email == credentials.email).first()
    if not user or not user.verify_password(credentials.password):
        raise UnauthorizedError("Invalid email or password")

    return {
        "success": True,
        "message": "Login successful",
        "data": _auth_payload(user)
    }

@router.get("/profile")
def get_profile(current_user: User = Depends(get_current_user)):
    return {"success": True, "data": {"user": UserResponse.model_validate(current_user)}}

@router.put("/profile")
def update_profile(
    profile_data: ProfileUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    if profile_data.email and profile_data.email != current_user.email:
        taken = db.query(User).filter(User.email == profile_data.email).first()
        if taken:
            raise BadRequestError("Email already in use")
        current_user.email = profile_data.email

    if profile_data.name is not None:
        current_user.name = profile_data.name

    db.commit()
    db.refresh(current_user)

    return {
        "success": True,
        "message": "Profile updated successfully",
        "data": {"user": UserResponse.model_validate(current_user)}
    }

@router.put("/update-password")
def update_password(
    passwords: PasswordUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    if not current_user.verify_password(passwords.current_password):
        raise UnauthorizedError("Current password is incorrect")

    current_user.set_password(passwords.new_password)
    db.commit()
    db.refresh(current_user)

    return {
        "success": True,
        "message": "Password updated successfully",
        "data": _auth_payload(current_user)
    }

@router.delete("/profile")
def delete_profile(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    delete_account(db, current_user)
    return {"success": True, "message": "Account deleted successfully", "data": {}}
