from fastapi import APIRouter, Depends, HTTPException, status, Response, Request
from sqlalchemy.orm import Session

from ..config import settings
from ..database import get_db, utcnow
from ..models.user import User
from ..schemas.auth import (
    ChangePasswordRequest, LoginRequest, MeResponse, MessageResponse, TokenResponse
)
from ..utils.audit_logger import get_client_ip, get_request_id, log_auth_event
from ..utils.dependencies import get_current_user
from ..utils.rate_limiter import limiter
from ..utils.security import (
    create_access_token, hash_password, validate_password_strength, verify_password
)

router = APIRouter(prefix="/api/auth", tags=["Auth"])


def set_auth_cookie(response: Response, access_token: str):
    """HttpOnly cookie carrying the access token"""
    response.set_cookie(
        key="access_token",
        value=access_token,
        httponly=True,
        secure=settings.cookie_secure,
        samesite=settings.cookie_samesite,
        domain=settings.cookie_domain or None,
        max_age=settings.access_token_expire_minutes * 60,
        path="/"
    )


def clear_auth_cookie(response: Response):
    response.delete_cookie(
        "access_token",
        path="/",
        domain=settings.cookie_domain or None,
        secure=settings.cookie_secure,
        httponly=True,
        samesite=settings.cookie_samesite,
    )


@router.post("/login", response_model=TokenResponse)
@limiter.limit(settings.login_rate_limit)
async def login(
    request: Request,
    response: Response,
    payload: LoginRequest,
    db: Session = Depends(get_db)
):
    request_id = get_request_id(request)
    client_ip = get_client_ip(request)
    email = payload.email.strip()

    user = db.query(User).filter(User.email == email).first()

    if not user or not verify_password(payload.password, user.hashed_password):
        log_auth_event(
            "LOGIN",
            email=email,
            success=False,
            details="Invalid credentials",
            ip_address=client_ip,
            request_id=request_id
        )
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials.",
            headers={"WWW-Authenticate": "Bearer"},
        )

    if not user.is_active:
        log_auth_event(
            "LOGIN",
            email=email,
            user_id=user.id,
            success=False,
            details="Account disabled",
            ip_address=client_ip,
            request_id=request_id
        )
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Account disabled."
        )

    access_token = create_access_token(data={"sub": user.id, "name": user.display_name})

    user.last_login = utcnow()
    db.commit()

    set_auth_cookie(response, access_token)

    log_auth_event(
        "LOGIN",
        email=user.email,
        user_id=user.id,
        success=True,
        ip_address=client_ip,
        request_id=request_id
    )
    return TokenResponse(token=access_token)


@router.post("/logout", response_model=MessageResponse)
async def logout(
    request: Request,
    response: Response,
    current_user: User = Depends(get_current_user)
):
    clear_auth_cookie(response)
    log_auth_event(
        "LOGOUT",
        email=current_user.email,
        user_id=current_user.id,
        success=True,
        request_id=get_request_id(request)
    )
    return MessageResponse(message="Logged out")


@router.get("/me", response_model=MeResponse)
async def me(current_user: User = Depends(get_current_user)):
    return MeResponse(
        user_id=current_user.id,
        email=current_user.email,
        name=current_user.display_name,
        is_admin=current_user.is_admin,
    )


@router.post("/change-password", response_model=MessageResponse)
async def change_password(
    request: Request,
    payload: ChangePasswordRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    user = db.query(User).filter(User.email == payload.email.strip()).first()
    if not user:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found.")

    if not verify_password(payload.current_password, user.hashed_password):
        log_auth_event(
            "CHANGE_PASSWORD",
            email=user.email,
            user_id=user.id,
            success=False,
            details="Wrong current password",
            ip_address=get_client_ip(request),
            request_id=get_request_id(request)
        )
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Current password is incorrect.")

    is_valid, error_msg = validate_password_strength(payload.new_password)
    if not is_valid:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=error_msg)

    user.hashed_password = hash_password(payload.new_password)
    db.commit()

    log_auth_event(
        "CHANGE_PASSWORD",
        email=user.email,
        user_id=user.id,
        success=True,
        ip_address=get_client_ip(request),
        request_id=get_request_id(request)
    )
    return MessageResponse(message="Password changed successfully.")
