"""Auth router: registration, login, password reset and account info."""

import logging

from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.orm import Session

from planner.config import settings
from planner.database import get_db
from planner.models.user import User
from planner.schemas.auth import (
    RegisterRequest,
    LoginRequest,
    TokenResponse,
    UserResponse,
    ForgotPasswordRequest,
    ResetPasswordRequest,
)
from planner.middleware.auth import (
    hash_password,
    verify_password,
    create_access_token,
    create_password_reset_token,
    decode_password_reset_token,
    get_current_user,
)
from planner.middleware.rate_limit import limiter
from planner.services import user_service
from planner.services.email_sender import EmailSender, get_email_sender
from planner.services.errors import ConflictError

router = APIRouter(prefix="/api/auth", tags=["auth"])
logger = logging.getLogger(__name__)


def _user_to_response(user: User) -> UserResponse:
    return UserResponse(
        id=user.id,
        email=user.email,
        first_name=user.first_name,
        last_name=user.last_name,
        full_name=user.full_name,
        created_at=user.created_at.isoformat(),
    )


@router.post("/register", response_model=UserResponse, status_code=201)
@limiter.limit(settings.AUTH_RATE_LIMIT)
def register(request: Request, req: RegisterRequest, db: Session = Depends(get_db)):
    """Register a new user."""
    try:
        user = user_service.register_user(
            db,
            email=req.email,
            password_hash=hash_password(req.password),
            first_name=req.first_name,
            last_name=req.last_name,
        )
    except ConflictError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return _user_to_response(user)


@router.post("/login", response_model=TokenResponse)
@limiter.limit(settings.AUTH_RATE_LIMIT)
def login(request: Request, req: LoginRequest, db: Session = Depends(get_db)):
    """Login and get JWT token."""
    user = user_service.get_user_by_email(db, req.email)
    if not user or not verify_password(req.password, user.password_hash):
        raise HTTPException(status_code=401, detail="Invalid email or password")

    token = create_access_token({"sub": user.id})
    return TokenResponse(access_token=token)


@router.get("/me", response_model=UserResponse)
def get_me(current_user: User = Depends(get_current_user)):
    """Get current user info."""
    return _user_to_response(current_user)


@router.delete("/me", status_code=204)
def delete_me(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Delete the current account with its courses and project memberships."""
    user_service.delete_user(db, current_user.id)


@router.post("/forgot-password", status_code=202)
@limiter.limit(settings.AUTH_RATE_LIMIT)
def forgot_password(
    request: Request,
    req: ForgotPasswordRequest,
    db: Session = Depends(get_db),
    sender: EmailSender = Depends(get_email_sender),
):
    """Email a password reset link. The response never reveals whether the address is registered."""
    user = user_service.get_user_by_email(db, req.email)
    if user:
        token = create_password_reset_token(user)
        link = f"{settings.FRONTEND_URL.rstrip('/')}/reset-password?token={token}"
        body = (
            f"Hi {user.first_name},\n\n"
            f"Use the link below to reset your password. It expires in "
            f"{settings.PASSWORD_RESET_EXPIRE_MINUTES} minutes.\n\n{link}\n\n"
            "If you did not ask for a reset you can ignore this email."
        )
        if not sender.send(user.email, "Reset your password", body):
            logger.warning("Password reset email for user %s was not delivered", user.id)
    return {"message": "If that email is registered, a reset link has been sent."}


@router.post("/reset-password")
def reset_password(req: ResetPasswordRequest, db: Session = Depends(get_db)):
    """Set a new password using a reset token."""
    user_id = decode_password_reset_token(req.token)
    user = user_service.get_user(db, user_id)
    if not user:
        raise HTTPException(status_code=400, detail="Invalid or expired reset token")

    user_service.set_password_hash(db, user, hash_password(req.new_password))
    return {"message": "Password has been reset."}
