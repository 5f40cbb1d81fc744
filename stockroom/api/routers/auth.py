from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.security import OAuth2PasswordRequestForm
from jose import JWTError
from sqlalchemy.ext.asyncio import AsyncSession

from stockroom.api.deps import get_current_user, get_optional_user, oauth2_scheme
from stockroom.core.config import settings
from stockroom.core.logging import get_logger, security_alert
from stockroom.core.metrics import record_login_attempt
from stockroom.core.security import (
    create_access_token,
    create_refresh_token,
    decode_access_token,
    decode_refresh_token,
    seconds_until_expiry,
)
from stockroom.core.token_blacklist import revoke_token
from stockroom.db.operations import commit_async
from stockroom.db.session_async import get_async_db
from stockroom.domain.enums import UserRole
from stockroom.middleware.observability import client_ip
from stockroom.models.user import User
from stockroom.schemas.auth import RefreshRequest, TokenPair, TokenRefresh
from stockroom.schemas.common import MessageResponse
from stockroom.schemas.user import ProfileUpdate, UserCreate, UserEnvelope, UserRead
from stockroom.services import user_service

router = APIRouter(prefix="/auth", tags=["auth"])

auth_logger = get_logger("stockroom.auth")


def _issue_tokens(user: User) -> dict:
    return {
        "access_token": create_access_token(subject=user.id, extra={"role": user.role.value}),
        "refresh_token": create_refresh_token(subject=user.id),
        "token_type": "bearer",
        "expires_in": settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
    }


@router.post("/register", response_model=UserEnvelope, status_code=status.HTTP_201_CREATED)
async def register(
    payload: UserCreate,
    db: AsyncSession = Depends(get_async_db),
    caller: User | None = Depends(get_optional_user),
):
    # Only an admin may hand out a role other than viewer.
    role = payload.role if caller is not None and caller.role is UserRole.admin else UserRole.viewer
    user = await user_service.create_user(db, payload, role=role)
    await commit_async(db)
    auth_logger.info("User registered", extra={"user_id": str(user.id), "role": user.role.value})
    return {"message": "User created successfully", "user": UserRead.model_validate(user)}


@router.post("/login", response_model=TokenPair)
async def login(
    request: Request,
    form_data: OAuth2PasswordRequestForm = Depends(),
    db: AsyncSession = Depends(get_async_db),
):
    user = await user_service.authenticate(db, form_data.username, form_data.password)
    if not user or not user.is_active:
        record_login_attempt("failure")
        security_alert(
            "Failed login attempt",
            email=form_data.username,
            client_ip=client_ip(request),
            inactive=bool(user),
        )
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials" if not user else "User is inactive",
            headers={"WWW-Authenticate": "Bearer"},
        )

    record_login_attempt("success")
    await user_service.mark_login(db, user)
    await commit_async(db)

    auth_logger.info(
        "User authenticated",
        extra={"user_id": str(user.id), "email": user.email, "client_ip": client_ip(request)},
    )
    return {**_issue_tokens(user), "user": UserRead.model_validate(user)}


@router.post("/logout", response_model=MessageResponse)
async def logout(
    token: str = Depends(oauth2_scheme),
    current_user: User = Depends(get_current_user),
):
    payload = decode_access_token(token)
    if payload.get("jti"):
        revoke_token(payload["jti"], seconds_until_expiry(payload))
    auth_logger.info("User logged out", extra={"user_id": str(current_user.id)})
    return {"message": "Logout successful"}


@router.post("/refresh", response_model=TokenRefresh)
async def refresh_token(payload: RefreshRequest, db: AsyncSession = Depends(get_async_db)):
    try:
        data = decode_refresh_token(payload.refresh_token)
        user_id = data["sub"]
    except (JWTError, KeyError) as exc:
        security_alert("Refresh token validation failed", reason=str(exc))
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid refresh token",
        ) from exc

    user = await user_service.get_by_id(db, user_id)
    if user is None or not user.is_active:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid refresh token")

    # Refresh tokens are single use.
    if data.get("jti"):
        revoke_token(data["jti"], seconds_until_expiry(data))
    return _issue_tokens(user)


@router.get("/me", response_model=UserEnvelope)
async def me(current_user: User = Depends(get_current_user)):
    return {"user": current_user}


@router.put("/profile", response_model=UserEnvelope)
async def update_profile(
    payload: ProfileUpdate,
    db: AsyncSession = Depends(get_async_db),
    current_user: User = Depends(get_current_user),
):
    user = await user_service.update_profile(db, current_user, payload)
    await commit_async(db)
    return {"message": "Profile updated successfully", "user": user}
