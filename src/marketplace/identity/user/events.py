"""Domain events for the User aggregate."""

from protean.fields import DateTime, Identifier, String

from marketplace.domain import marketplace


@marketplace.event(part_of="User")
class UserRegistered:
    """A new account was created, either by self-registration or by seeding."""

    __version__ = 1

    user_id: Identifier(required=True)
    name: String(required=True)
    email: String(required=True)
    role: String(required=True)
    registered_at: DateTime(required=True)


@marketplace.event(part_of="User")
class ProfileUpdated:
    """A user changed their display name or contact details."""

    __version__ = 1

    user_id: Identifier(required=True)
    name: String(required=True)
    address: String(max_length=500)
    phone: String(max_length=30)


@marketplace.event(part_of="User")
class PasswordChanged:
    """The account password was replaced through the reset flow."""

    __version__ = 1

    user_id: Identifier(required=True)
    changed_at: DateTime(required=True)


@marketplace.event(part_of="User")
class UserDeactivated:
    """An admin soft-deleted the account. Login is refused from now on."""

    __version__ = 1

    user_id: Identifier(required=True)
    deactivated_at: DateTime(required=True)
