import uuid
from typing import Any

import jwt
from fastapi import APIRouter, Depends, HTTPException, status

from app import crud
from app.api.deps import CurrentUser, SessionDep
from app.api.rate_limit import auth_limiter
from app.core.config import settings
from app.core.errors import InvalidRequestError
from app.core.security import (
    create_access_token,
    create_refresh_token,
    decode_token,
    verify_password,
)
from app.models import (
    AuthSession,
    AuthTokens,
    Envelope,
    Message,
    RefreshRequest,
    UpdatePassword,
    User,
    UserLogin,
    UserPublic,
    UserRegister,
)
from app.project_config import validate_password

router = APIRouter(prefix="/auth", tags=["auth"])

INVALID_CREDENTIALS = "Invalid email or password"


def _issue_tokens(user: User) -> AuthTokens:
    return AuthTokens(
        access_token=create_access_token(user.id),
        refresh_token=create_refresh_token(user.id),
        expires_in=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
    )


def _check_password_strength(password: str, field: str) -> None:
    result = validate_password(password)
    if not result.valid:
        raise InvalidRequestError(
            [{**error.model_dump(), "field": field} for error in result.errors],
            message="Password does not meet requirements",
        )


@router.post(
    "/register",
    status_code=status.HTTP_201_CREATED,
    response_model=Envelope[AuthSession],
    dependencies=[Depends(auth_limiter)],
)
def register(session: SessionDep, user_in: UserRegister) -> Any:
    """
    Create a new account and sign it in.
    """
    _check_password_strength(user_in.password, "password")
    if crud.get_user_by_email(session=session, email=user_in.email):
        raise HTTPException(status_code=409, detail="An account with this email already exists")
    user = crud.create_user(session=session, user_create=user_in)
    return Envelope(data=AuthSession(user=UserPublic.model_validate(user), tokens=_issue_tokens(user)))


@router.post("/login", response_model=Envelope[AuthSession], dependencies=[Depends(auth_limiter)])
def login(session: SessionDep, credentials: UserLogin) -> Any:
    user = crud.authenticate(session=session, email=credentials.email, password=credentials.password)
    # Unknown email, wrong password and inactive accounts are indistinguishable
    if not user or not user.is_active:
        raise HTTPException(status_code=401, detail=INVALID_CREDENTIALS)
    return Envelope(data=AuthSession(user=UserPublic.model_validate(user), tokens=_issue_tokens(user)))


@router.post("/refresh", response_model=Envelope[AuthTokens], dependencies=[Depends(auth_limiter)])
def refresh(session: SessionDep, body: RefreshRequest) -> Any:
    try:
        subject = decode_token(body.refresh_token, expected_type="refresh")
        user = session.get(User, uuid.UUID(subject))
    except (jwt.InvalidTokenError, ValueError):
        user = None
    if not user or not user.is_active:
        raise HTTPException(status_code=401, detail="Invalid refresh token")
    return Envelope(data=_issue_tokens(user))


@router.get("/me", response_model=Envelope[UserPublic])
def read_me(current_user: CurrentUser) -> Any:
    return Envelope(data=UserPublic.model_validate(current_user))


@router.post("/change-password", response_model=Message)
def change_password(session: SessionDep, current_user: CurrentUser, body: UpdatePassword) -> Any:
    verified, _ = verify_password(body.current_password, current_user.hashed_password)
    if not verified:
        raise HTTPException(status_code=400, detail="Incorrect password")
    if body.current_password == body.new_password:
        raise HTTPException(status_code=400, detail="New password cannot be the same as the current one")
    _check_password_strength(body.new_password, "new_password")
    crud.update_user_password(session=session, db_user=current_user, new_password=body.new_password)
    return Message(message="Password updated successfully")


@router.post("/logout", response_model=Message)
def logout(current_user: CurrentUser) -> Any:
    # Tokens are stateless; the client discards them
    return Message(message="Logged out successfully")
