from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from fastapi import Depends, Request

from ..config import Settings
from ..errors import Unauthenticated
from .tokens import TokenIssuer


@dataclass(frozen=True)
class Identity:
    user_id: int


def _bearer_token(authorization: Optional[str]) -> Optional[str]:
    if not authorization:
        return None
    scheme, _, token = authorization.strip().partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


def authenticate(authorization: Optional[str], issuer: TokenIssuer) -> Identity:
    """Turn an ``Authorization`` header into an Identity.

    Trust is purely signature based: nothing is looked up in the database.
    """
    token = _bearer_token(authorization)
    if token is None:
        raise Unauthenticated("No token provided")
    return Identity(user_id=issuer.verify_access(token))


def get_settings_dep(request: Request) -> Settings:
    return request.app.state.settings


def get_token_issuer(request: Request) -> TokenIssuer:
    return request.app.state.token_issuer


async def get_current_identity(
    request: Request,
    issuer: TokenIssuer = Depends(get_token_issuer),
) -> Identity:
    identity = authenticate(request.headers.get("Authorization"), issuer)
    request.state.identity = identity
    return identity
