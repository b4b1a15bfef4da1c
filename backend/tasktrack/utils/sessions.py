"""In-process refresh token store.

Entries live only in this process's memory: a restart logs everybody out and
several workers do not share sessions. A deployment that needs either must
move this mapping into a shared keyed store.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from datetime import datetime

from ..errors import RefreshTokenExpired, RefreshTokenInvalid

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionRecord:
    user_id: int
    expires_at: datetime


class SessionStore:
    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._records: dict[str, SessionRecord] = {}

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)

    def __contains__(self, token: str) -> bool:
        with self._lock:
            return token in self._records

    def add(self, token: str, user_id: int, expires_at: datetime) -> None:
        with self._lock:
            self._records[token] = SessionRecord(user_id=user_id, expires_at=expires_at)

    def resolve(self, token: str, now: datetime) -> int:
        """Return the user id behind ``token``.

        Raises RefreshTokenInvalid for unknown tokens and RefreshTokenExpired
        for tokens past their expiry; the latter are evicted.
        """
        with self._lock:
            record = self._records.get(token)
            if record is None:
                raise RefreshTokenInvalid()
            if now > record.expires_at:
                del self._records[token]
                raise RefreshTokenExpired()
            return record.user_id

    def revoke(self, token: str) -> bool:
        """Drop ``token``; returns whether it was present."""
        with self._lock:
            return self._records.pop(token, None) is not None

    def purge_expired(self, now: datetime) -> int:
        with self._lock:
            stale = [t for t, r in self._records.items() if now > r.expires_at]
            for t in stale:
                del self._records[t]
        if stale:
            logger.debug("Purged %d expired refresh tokens", len(stale))
        return len(stale)
