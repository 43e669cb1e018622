"""
Session token signing and verification.

Tokens are HS256 JWTs carrying ``sub`` (user id), ``email``, ``role``,
``iat`` and ``exp``. Nothing is stored server-side; a token is valid until
it expires or the client drops the cookie carrying it.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Mapping

import jwt

from user_access_platform.config import ConfigurationError
from user_access_platform.errors import AuthError, AuthErrorKind

JWT_ALGORITHM = "HS256"
REQUIRED_CLAIMS = ("sub", "email", "role", "iat", "exp")


@dataclass(frozen=True)
class SessionClaims:
    user_id: int
    email: str
    role: str
    issued_at: datetime
    expires_at: datetime


def sign_token(claims: Mapping[str, Any], secret: str, ttl: timedelta) -> str:
    """Sign ``claims`` with ``iat``/``exp`` stamped from ``ttl``."""
    if not secret:
        raise ConfigurationError("jwt secret is blank")
    if ttl.total_seconds() <= 0:
        raise ValueError("token ttl must be positive")

    now = datetime.now(timezone.utc)
    payload: Dict[str, Any] = dict(claims)
    payload["sub"] = str(payload["sub"])
    payload["iat"] = int(now.timestamp())
    payload["exp"] = int((now + ttl).timestamp())
    return jwt.encode(payload, secret, algorithm=JWT_ALGORITHM)


def verify_token(token: str, secret: str) -> SessionClaims:
    """Decode ``token`` or raise ``AuthError(INVALID_TOKEN)``."""
    if not secret:
        raise ConfigurationError("jwt secret is blank")
    if not token:
        raise AuthError(AuthErrorKind.INVALID_TOKEN, "Missing session token")

    try:
        payload = jwt.decode(
            token,
            secret,
            algorithms=[JWT_ALGORITHM],
            options={"require": list(REQUIRED_CLAIMS)},
        )
    except jwt.ExpiredSignatureError:
        raise AuthError(AuthErrorKind.INVALID_TOKEN, "Session token expired")
    except jwt.InvalidTokenError:
        raise AuthError(AuthErrorKind.INVALID_TOKEN, "Invalid session token")

    try:
        user_id = int(payload["sub"])
    except (TypeError, ValueError):
        raise AuthError(AuthErrorKind.INVALID_TOKEN, "Invalid session token")

    return SessionClaims(
        user_id=user_id,
        email=str(payload["email"]),
        role=str(payload["role"]),
        issued_at=datetime.fromtimestamp(payload["iat"], tz=timezone.utc),
        expires_at=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
    )
