from typing import Optional

from fastapi import Cookie, Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session

from ..database import get_db
from ..models.user import User
from .logging_config import user_id_var
from .security import verify_access_token

bearer = HTTPBearer(auto_error=False)

UNKNOWN_PRINCIPAL = "Unknown"


def get_current_user(
    creds: Optional[HTTPAuthorizationCredentials] = Depends(bearer),
    access_token: Optional[str] = Cookie(None, alias="access_token"),
    db: Session = Depends(get_db),
) -> User:
    """Resolve the principal from the access_token cookie, falling back to a Bearer header"""
    token = access_token or (creds.credentials if creds else None)
    if not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )

    payload = verify_access_token(token)
    if not payload:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
            headers={"WWW-Authenticate": "Bearer"},
        )

    user = db.get(User, payload.get("sub"))
    if not user or not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found or inactive",
        )

    user_id_var.set(user.id)
    return user


def get_principal_name(current_user: User = Depends(get_current_user)) -> str:
    """Identity name stamped on check-ins"""
    return current_user.display_name or UNKNOWN_PRINCIPAL
