from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Cookie, Depends, Response, status
from sqlalchemy.orm import Session

from ..config import Settings
from ..databases.database import get_db
from ..errors import NotFound, RefreshTokenInvalid
from ..schemas.user import AccessToken, AuthResponse, Message, Profile, User as UserSchema, UserCreate, UserLogin
from ..services import users as user_ops
from ..utils.dependencies import Identity, get_current_identity, get_settings_dep, get_token_issuer
from ..utils.tokens import TokenIssuer

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])

REFRESH_COOKIE = "refreshToken"
REFRESH_PATH = "/auth/refresh"


def _cookie_settings(settings: Settings) -> dict:
    return {"path": REFRESH_PATH, "httponly": True, "samesite": "lax", "secure": settings.is_production}


def _set_refresh_cookie(response: Response, token: str, issuer: TokenIssuer, settings: Settings) -> None:
    response.set_cookie(
        REFRESH_COOKIE,
        token,
        max_age=int(issuer.refresh_ttl.total_seconds()),
        **_cookie_settings(settings),
    )


def _start_session(user, response: Response, issuer: TokenIssuer, settings: Settings) -> AuthResponse:
    _set_refresh_cookie(response, issuer.issue_refresh(user.id), issuer, settings)
    return AuthResponse(access_token=issuer.issue_access(user.id), user=UserSchema.model_validate(user))


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def register(
        data: UserCreate,
        response: Response,
        db: Session = Depends(get_db),
        issuer: TokenIssuer = Depends(get_token_issuer),
        settings: Settings = Depends(get_settings_dep),
):
    user = user_ops.register_user(db, data)
    return _start_session(user, response, issuer, settings)


@router.post("/login", response_model=AuthResponse)
def login(
        data: UserLogin,
        response: Response,
        db: Session = Depends(get_db),
        issuer: TokenIssuer = Depends(get_token_issuer),
        settings: Settings = Depends(get_settings_dep),
):
    user = user_ops.authenticate_user(db, data)
    return _start_session(user, response, issuer, settings)


@router.post("/refresh", response_model=AccessToken)
def refresh(
        refresh_token: Optional[str] = Cookie(default=None, alias=REFRESH_COOKIE),
        issuer: TokenIssuer = Depends(get_token_issuer),
):
    if not refresh_token:
        raise RefreshTokenInvalid("No refresh token")
    return AccessToken(access_token=issuer.refresh_access(refresh_token))


@router.post("/logout", response_model=Message)
@router.delete("/refresh", response_model=Message)
def logout(
        response: Response,
        refresh_token: Optional[str] = Cookie(default=None, alias=REFRESH_COOKIE),
        issuer: TokenIssuer = Depends(get_token_issuer),
        settings: Settings = Depends(get_settings_dep),
):
    """Revoke the refresh session and clear its cookie.

    Browsers only send the refresh cookie to paths under ``/auth/refresh``,
    so clients should log out with ``DELETE /auth/refresh``. ``POST
    /auth/logout`` still answers 200 and expires the cookie, but it only
    revokes the server-side session when the cookie is sent explicitly.
    """
    issuer.revoke_refresh(refresh_token)
    logger.info("Logout (refresh cookie %s)", "present" if refresh_token else "absent")
    response.delete_cookie(REFRESH_COOKIE, **_cookie_settings(settings))
    return Message(message="Logged out")


@router.get("/profile", response_model=Profile)
def profile(
        db: Session = Depends(get_db),
        identity: Identity = Depends(get_current_identity),
):
    user = user_ops.get_user(db, identity.user_id)
    if user is None:
        raise NotFound("User not found")
    return Profile.model_validate(user)
