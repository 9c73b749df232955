"""Role-based authorization.

Every access decision goes through ``is_allowed(role, permission, ownership)``:
a pure function of the caller's role, the action, and whether the caller owns
the resource. Routes and handlers call ``ensure_allowed`` which raises
``Forbidden`` on a negative decision.
"""

from dataclasses import dataclass
from enum import Enum

from marketplace.exceptions import Forbidden
from marketplace.identity.user.user import Role


class Permission(Enum):
    MANAGE_CART = "manage_cart"
    PLACE_ORDER = "place_order"
    VIEW_ORDER = "view_order"
    CONFIRM_PAYMENT = "confirm_payment"
    CREATE_PRODUCT = "create_product"
    MODIFY_PRODUCT = "modify_product"
    ASSIGN_VENDOR = "assign_vendor"
    MANAGE_USERS = "manage_users"
    CONFIGURE_GATEWAY = "configure_gateway"


class Ownership(Enum):
    """The caller's relation to the resource being acted on."""

    NOT_APPLICABLE = "not_applicable"
    OWNER = "owner"
    NON_OWNER = "non_owner"

    @classmethod
    def of(cls, actor_id, owner_ids) -> "Ownership":
        """Ownership of a resource owned by any of ``owner_ids``."""
        if isinstance(owner_ids, str):
            owner_ids = [owner_ids]
        return cls.OWNER if str(actor_id) in {str(o) for o in owner_ids} else cls.NON_OWNER


# Grant levels
_ANY = "any"  # role may act regardless of ownership
_OWN = "own"  # role may act only on resources it owns

_POLICY: dict[Permission, dict[Role, str]] = {
    Permission.MANAGE_CART: {Role.BUYER: _ANY},
    Permission.PLACE_ORDER: {Role.BUYER: _ANY},
    Permission.VIEW_ORDER: {Role.BUYER: _OWN, Role.VENDOR: _OWN, Role.ADMIN: _ANY},
    Permission.CONFIRM_PAYMENT: {Role.BUYER: _OWN},
    Permission.CREATE_PRODUCT: {Role.VENDOR: _ANY, Role.ADMIN: _ANY},
    Permission.MODIFY_PRODUCT: {Role.VENDOR: _OWN, Role.ADMIN: _ANY},
    Permission.ASSIGN_VENDOR: {Role.ADMIN: _ANY},
    Permission.MANAGE_USERS: {Role.ADMIN: _ANY},
    Permission.CONFIGURE_GATEWAY: {Role.ADMIN: _ANY},
}


@dataclass(frozen=True)
class Actor:
    """The authenticated caller of a request."""

    user_id: str
    role: Role
    name: str = ""
    email: str = ""

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN

    @property
    def is_vendor(self) -> bool:
        return self.role == Role.VENDOR

    @property
    def is_buyer(self) -> bool:
        return self.role == Role.BUYER


def is_allowed(role: Role, permission: Permission, ownership: Ownership = Ownership.NOT_APPLICABLE) -> bool:
    grant = _POLICY.get(permission, {}).get(Role(role))
    if grant is None:
        return False
    if grant == _ANY:
        return True
    return ownership != Ownership.NON_OWNER


def ensure_allowed(
    actor: Actor,
    permission: Permission,
    ownership: Ownership = Ownership.NOT_APPLICABLE,
    message: str | None = None,
) -> None:
    if not is_allowed(actor.role, permission, ownership):
        raise Forbidden(message or f"User role {actor.role.value} is not authorized to access this route")
