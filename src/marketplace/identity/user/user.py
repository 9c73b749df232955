"""User aggregate root with Profile value object."""

from datetime import UTC, datetime
from enum import Enum

from protean.fields import Boolean, DateTime, String, ValueObject

from marketplace.domain import marketplace

# Sentinel for distinguishing "not provided" from None in partial updates
_UNSET = object()


class Role(Enum):
    """Closed set of account roles. A user's role never changes after creation."""

    BUYER = "buyer"
    VENDOR = "vendor"
    ADMIN = "admin"

    @classmethod
    def self_registrable(cls, value):
        """Role granted on public registration: buyer or vendor, buyer otherwise.

        Admin accounts are only created by seeding.
        """
        if value in (cls.BUYER.value, cls.VENDOR.value):
            return cls(value)
        return cls.BUYER


@marketplace.value_object(part_of="User")
class Profile:
    """Contact details attached to a user. Replaced wholesale on update."""

    address: String(max_length=500)
    phone: String(max_length=30)


@marketplace.aggregate
class User:
    """A person with an account on the marketplace: a buyer, a vendor or an admin.

    Email addresses are stored lower-cased and are unique across all accounts.
    Deactivation is a soft delete; the record is kept and login is refused.
    """

    name: String(required=True, max_length=100)
    email: String(required=True, max_length=254, unique=True)
    password_hash: String(required=True, max_length=255)
    role: String(choices=Role, default=Role.BUYER.value)
    is_active: Boolean(default=True)
    profile: ValueObject(Profile)
    created_at: DateTime()
    updated_at: DateTime()

    @classmethod
    def register(cls, name, email, password_hash, role=Role.BUYER.value, address=None, phone=None):
        from marketplace.identity.user.events import UserRegistered

        now = datetime.now(UTC)
        user = cls(
            name=name.strip(),
            email=email.strip().lower(),
            password_hash=password_hash,
            role=Role(role).value,
            is_active=True,
            profile=Profile(address=address, phone=phone),
            created_at=now,
            updated_at=now,
        )
        user.raise_(
            UserRegistered(
                user_id=user.id,
                name=user.name,
                email=user.email,
                role=user.role,
                registered_at=now,
            )
        )
        return user

    def update_profile(self, name=_UNSET, address=_UNSET, phone=_UNSET):
        from marketplace.identity.user.events import ProfileUpdated

        current = self.profile or Profile()
        new_address = address if address is not _UNSET else current.address
        new_phone = phone if phone is not _UNSET else current.phone

        if name is not _UNSET and name:
            self.name = name.strip()
        self.profile = Profile(address=new_address, phone=new_phone)
        self.updated_at = datetime.now(UTC)

        self.raise_(
            ProfileUpdated(
                user_id=self.id,
                name=self.name,
                address=new_address,
                phone=new_phone,
            )
        )

    def change_password(self, password_hash):
        from marketplace.identity.user.events import PasswordChanged

        now = datetime.now(UTC)
        self.password_hash = password_hash
        self.updated_at = now
        self.raise_(PasswordChanged(user_id=self.id, changed_at=now))

    def deactivate(self):
        from marketplace.identity.user.events import UserDeactivated

        if not self.is_active:
            return

        now = datetime.now(UTC)
        self.is_active = False
        self.updated_at = now
        self.raise_(UserDeactivated(user_id=self.id, deactivated_at=now))

    @property
    def role_enum(self) -> Role:
        return Role(self.role)

