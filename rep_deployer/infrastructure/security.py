"""Security helpers for signed session cookies."""

from __future__ import annotations

import threading
import time
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from uuid import uuid4

from jose import JWTError, jwt

SESSION_COOKIE_NAME = "rep_deployer_session"
ALGORITHM = "HS256"


@dataclass(frozen=True)
class SessionClaims:
    username: str
    token_id: str
    expires_at: float


class RevokedSessions:
    """Identifiers of session tokens ended by logout before they expired.

    Entries are dropped once the token would have expired anyway.
    """

    def __init__(self, *, clock=time.time) -> None:
        self._entries: dict[str, float] = {}
        self._lock = threading.Lock()
        self._clock = clock

    def revoke(self, claims: SessionClaims) -> None:
        with self._lock:
            now = self._clock()
            self._entries = {
                token_id: expires_at
                for token_id, expires_at in self._entries.items()
                if expires_at > now
            }
            self._entries[claims.token_id] = claims.expires_at

    def is_revoked(self, token_id: str) -> bool:
        with self._lock:
            return token_id in self._entries

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)


def create_session_token(username: str, secret_key: str, expires_delta: timedelta) -> str:
    """Return a signed token identifying ``username`` until it expires."""

    now = datetime.now(timezone.utc)
    claims = {"sub": username, "jti": uuid4().hex, "iat": now, "exp": now + expires_delta}
    return jwt.encode(claims, secret_key, algorithm=ALGORITHM)


def decode_session_token(token: str, secret_key: str) -> dict:
    try:
        return jwt.decode(token, secret_key, algorithms=[ALGORITHM])
    except JWTError as exc:
        raise ValueError("Could not validate session") from exc


def read_session(token: str | None, secret_key: str) -> SessionClaims | None:
    """Return the claims carried by a valid ``token``, or ``None``."""

    if not token:
        return None
    try:
        claims = decode_session_token(token, secret_key)
    except ValueError:
        return None
    username = claims.get("sub")
    token_id = claims.get("jti")
    expires_at = claims.get("exp")
    if not (isinstance(username, str) and username and isinstance(token_id, str) and token_id):
        return None
    if not isinstance(expires_at, (int, float)):
        return None
    return SessionClaims(username=username, token_id=token_id, expires_at=float(expires_at))


def session_username(
    token: str | None,
    secret_key: str,
    revoked: RevokedSessions | None = None,
) -> str | None:
    """Return the username stored in ``token`` unless it is invalid or revoked."""

    claims = read_session(token, secret_key)
    if claims is None:
        return None
    if revoked is not None and revoked.is_revoked(claims.token_id):
        return None
    return claims.username


__all__ = [
    "RevokedSessions",
    "SESSION_COOKIE_NAME",
    "SessionClaims",
    "create_session_token",
    "decode_session_token",
    "read_session",
    "session_username",
]
