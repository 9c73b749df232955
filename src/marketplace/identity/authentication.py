"""Credential checks for login and for bearer-token requests."""

from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from marketplace.exceptions import Unauthenticated
from marketplace.identity.access import Actor
from marketplace.identity.passwords import verify_password
from marketplace.identity.tokens import decode_token
from marketplace.identity.user.user import User


def authenticate(email: str, password: str) -> User:
    """Return the user owning these credentials or raise ``Unauthenticated``."""
    user = current_domain.repository_for(User).find_by_email(email)
    if user is None:
        raise Unauthenticated("Invalid credentials")
    if not user.is_active:
        raise Unauthenticated("Account is deactivated")
    if not verify_password(password, user.password_hash):
        raise Unauthenticated("Invalid credentials")
    return user


def actor_from_token(token: str) -> Actor:
    """Resolve a bearer token to the active user it was issued for."""
    claims = decode_token(token)
    try:
        user = current_domain.repository_for(User).get(claims["sub"])
    except ObjectNotFoundError as exc:
        raise Unauthenticated("Not authorized, user not found") from exc

    if not user.is_active:
        raise Unauthenticated("Account is deactivated")

    return Actor(user_id=str(user.id), role=user.role_enum, name=user.name, email=user.email)
