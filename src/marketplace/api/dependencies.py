"""FastAPI dependencies resolving the caller from the bearer token."""

from fastapi import Depends, Header

from marketplace.exceptions import Unauthenticated
from marketplace.identity.access import Actor, Permission, ensure_allowed
from marketplace.identity.authentication import actor_from_token


async def current_actor(authorization: str | None = Header(default=None)) -> Actor:
    if not authorization or not authorization.startswith("Bearer "):
        raise Unauthenticated("Not authorized, no token")
    return actor_from_token(authorization.split(" ", 1)[1].strip())


def requires(permission: Permission):
    """Dependency admitting only callers whose role holds ``permission``.

    Ownership of the specific resource is checked later, where the resource
    is loaded.
    """

    async def dependency(actor: Actor = Depends(current_actor)) -> Actor:
        ensure_allowed(actor, permission)
        return actor

    return dependency
