from __future__ import annotations

import secrets
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

from jose import JWTError, jwt

from ..errors import Unauthenticated
from .sessions import SessionStore

Clock = Callable[[], datetime]

REFRESH_TOKEN_BYTES = 64


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TokenIssuer:
    """Issues JWT access tokens and opaque refresh tokens backed by a SessionStore."""

    def __init__(
        self,
        secret: str,
        sessions: SessionStore,
        *,
        algorithm: str = "HS256",
        access_ttl: timedelta = timedelta(minutes=15),
        refresh_ttl: timedelta = timedelta(days=7),
        clock: Optional[Clock] = None,
    ) -> None:
        self._secret = secret
        self._algorithm = algorithm
        self.sessions = sessions
        self.access_ttl = access_ttl
        self.refresh_ttl = refresh_ttl
        self._clock = clock or _utcnow

    def now(self) -> datetime:
        return self._clock()

    def issue_access(self, user_id: int) -> str:
        issued_at = int(self.now().timestamp())
        claims = {
            "sub": str(user_id),
            "iat": issued_at,
            "exp": issued_at + int(self.access_ttl.total_seconds()),
        }
        return jwt.encode(claims, self._secret, algorithm=self._algorithm)

    def verify_access(self, token: str) -> int:
        invalid = Unauthenticated("Invalid or expired token")
        if not token:
            raise invalid
        try:
            # expiry is checked below against our own clock
            claims = jwt.decode(
                token,
                self._secret,
                algorithms=[self._algorithm],
                options={"verify_exp": False},
            )
        except JWTError:
            raise invalid
        exp = claims.get("exp")
        sub = claims.get("sub")
        if not isinstance(exp, (int, float)) or not isinstance(sub, str):
            raise invalid
        if self.now().timestamp() > exp:
            raise invalid
        try:
            user_id = int(sub)
        except ValueError:
            raise invalid
        if user_id < 1:
            raise invalid
        return user_id

    def issue_refresh(self, user_id: int) -> str:
        now = self.now()
        self.sessions.purge_expired(now)
        token = secrets.token_hex(REFRESH_TOKEN_BYTES)
        self.sessions.add(token, user_id, now + self.refresh_ttl)
        return token

    def refresh_access(self, refresh_token: str) -> str:
        user_id = self.sessions.resolve(refresh_token, self.now())
        return self.issue_access(user_id)

    def revoke_refresh(self, refresh_token: Optional[str]) -> None:
        if refresh_token:
            self.sessions.revoke(refresh_token)
