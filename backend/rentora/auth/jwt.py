"""Signed access and refresh tokens (python-jose, HS256 by default).

Both token kinds share one claim layout: ``sub`` (user id), ``iat``, ``exp``
and a ``type`` claim of ``"access"`` or ``"refresh"``. Callers that accept a
token must check ``type`` themselves.
"""

from datetime import datetime, timedelta, timezone

from jose import jwt

from rentora.config import settings

ACCESS = "access"
REFRESH = "refresh"


def _access_lifetime() -> timedelta:
    return timedelta(minutes=settings.jwt_access_token_expire_minutes)


def _refresh_lifetime() -> timedelta:
    return timedelta(days=settings.jwt_refresh_token_expire_days)


def _encode(claims: dict, token_type: str, lifetime: timedelta) -> str:
    issued_at = datetime.now(timezone.utc)
    body = {**claims, "iat": issued_at, "exp": issued_at + lifetime, "type": token_type}
    return jwt.encode(body, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def create_access_token(data: dict, expires_delta: timedelta | None = None) -> str:
    """Sign a short-lived access token. ``data`` must carry ``sub``."""
    return _encode(data, ACCESS, expires_delta or _access_lifetime())


def create_refresh_token(data: dict, expires_delta: timedelta | None = None) -> str:
    """Sign a long-lived refresh token. ``data`` must carry ``sub``."""
    return _encode(data, REFRESH, expires_delta or _refresh_lifetime())


def decode_token(token: str) -> dict:
    """Verify signature and expiry and return the claims.

    Raises:
        jose.JWTError: On a bad signature, a malformed token, or expiry
            (``ExpiredSignatureError`` is a subclass).
    """
    return jwt.decode(token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm])


def create_token_pair(user_id: str, email: str | None = None, role: str | None = None) -> dict[str, str | int]:
    """Issue the access/refresh pair returned by register, login and refresh.

    ``email`` and ``role`` ride along in the access token for clients only;
    authorization always re-reads the role from the database. The refresh
    token carries nothing but the subject.
    """
    extra = {key: value for key, value in (("email", email), ("role", role)) if value is not None}
    return {
        "access_token": create_access_token({"sub": user_id, **extra}),
        "refresh_token": create_refresh_token({"sub": user_id}),
        "token_type": "bearer",
        "expires_in": int(_access_lifetime().total_seconds()),
    }
