"""Bearer access tokens: HS256 JWTs carrying the user id and role."""

import os
from datetime import UTC, datetime, timedelta

from jose import JWTError, jwt

from marketplace.exceptions import Unauthenticated

ALGORITHM = "HS256"
DEFAULT_EXPIRES_MINUTES = 60 * 24 * 7


def _secret() -> str:
    return os.getenv("JWT_SECRET", "dev-secret-change")


def _expires_delta() -> timedelta:
    return timedelta(minutes=int(os.getenv("JWT_EXPIRES_MINUTES", DEFAULT_EXPIRES_MINUTES)))


def issue_token(user_id: str, role: str, expires_delta: timedelta | None = None) -> str:
    expire = datetime.now(UTC) + (expires_delta or _expires_delta())
    claims = {"sub": str(user_id), "role": role, "exp": expire}
    return jwt.encode(claims, _secret(), algorithm=ALGORITHM)


def decode_token(token: str) -> dict:
    """Return the token's claims, or raise ``Unauthenticated``."""
    try:
        claims = jwt.decode(token, _secret(), algorithms=[ALGORITHM])
    except JWTError as exc:
        raise Unauthenticated("Not authorized, token failed") from exc

    if not claims.get("sub"):
        raise Unauthenticated("Not authorized, token failed")
    return claims
