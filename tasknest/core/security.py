from datetime import timedelta
from typing import Optional

from fastapi import Depends, Header
from jose import JWTError, jwt
from sqlalchemy.orm import Session

from tasknest.core.config import settings
from tasknest.core.database import get_db, utcnow
from tasknest.core.errors import UnauthorizedError
from tasknest.models.user import User


def create_access_token(user_id: int, email: str) -> str:
    # token d'accès JWT, durée configurable (7 jours par défaut)
    payload = {
        "user_id": user_id,
        "email": email,
        "exp": utcnow() + timedelta(minutes=settings.JWT_EXPIRE_MIN),
        "type": "access"
    }
    token = jwt.encode(payload, settings.JWT_SECRET, algorithm="HS256")
    return token

def verify_token(token: str) -> Optional[dict]:
    try:
        payload = jwt.decode(token, settings.JWT_SECRET, algorithms=["HS256"])
        return payload
    except JWTError:
        return None

def decode_token(token: str) -> Optional[int]:
    payload = verify_token(token)
    if payload is None or payload.get("type") != "access":
        return None
    return payload.get("user_id")


def get_current_user(
    db: Session = Depends(get_db),
    authorization: Optional[str] = Header(None)
) -> User:
    """
    Récupère l'utilisateur depuis le JWT token.

    Utilisée comme dépendance sur toutes les routes protégées.
    """
    if not authorization or not authorization.startswith("Bearer "):
        raise UnauthorizedError("Not authorized, no token")

    token = authorization.replace("Bearer ", "", 1)
    user_id = decode_token(token)
    if not user_id:
        raise UnauthorizedError("Not authorized, token failed")

    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise UnauthorizedError("User not found")

    return user
