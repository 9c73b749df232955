"""Tests for the User aggregate."""

import pytest

from marketplace.identity.user.events import PasswordChanged, ProfileUpdated, UserDeactivated, UserRegistered
from marketplace.identity.user.user import Profile, Role, User


def _register(**overrides):
    defaults = {
        "name": "Jane Doe",
        "email": "Jane@Example.com ",
        "password_hash": "$2b$12$hash",
    }
    defaults.update(overrides)
    return User.register(**defaults)


class TestRegistration:
    def test_email_is_lower_cased_and_trimmed(self):
        user = _register()
        assert user.email == "jane@example.com"

    def test_defaults_to_active_buyer(self):
        user = _register()
        assert user.role == Role.BUYER.value
        assert user.role_enum == Role.BUYER
        assert user.is_active is True

    def test_vendor_role(self):
        user = _register(role="vendor")
        assert user.role == "vendor"

    def test_unknown_role_is_rejected(self):
        with pytest.raises(ValueError):
            _register(role="superuser")

    def test_profile_is_attached(self):
        user = _register(address="1 Main St", phone="555-0100")
        assert user.profile == Profile(address="1 Main St", phone="555-0100")

    def test_raises_user_registered(self):
        user = _register()
        assert len(user._events) == 1
        event = user._events[0]
        assert isinstance(event, UserRegistered)
        assert event.email == "jane@example.com"
        assert event.role == "buyer"


class TestSelfRegistrableRole:
    @pytest.mark.parametrize(
        "requested, granted",
        [("buyer", Role.BUYER), ("vendor", Role.VENDOR), ("admin", Role.BUYER), (None, Role.BUYER)],
    )
    def test_public_registration_never_grants_admin(self, requested, granted):
        assert Role.self_registrable(requested) == granted


class TestProfileUpdate:
    def test_partial_update_keeps_other_fields(self):
        user = _register(address="Old St", phone="111")
        user._events.clear()

        user.update_profile(phone="222")

        assert user.profile.address == "Old St"
        assert user.profile.phone == "222"
        assert user.name == "Jane Doe"

    def test_name_update(self):
        user = _register()
        user.update_profile(name="  Janet  ")
        assert user.name == "Janet"

    def test_raises_profile_updated(self):
        user = _register()
        user._events.clear()

        user.update_profile(address="New St")

        assert isinstance(user._events[0], ProfileUpdated)
        assert user._events[0].address == "New St"


class TestPasswordChange:
    def test_replaces_hash(self):
        user = _register()
        user._events.clear()

        user.change_password("$2b$12$other")

        assert user.password_hash == "$2b$12$other"
        assert isinstance(user._events[0], PasswordChanged)


class TestDeactivation:
    def test_deactivate(self):
        user = _register()
        user._events.clear()

        user.deactivate()

        assert user.is_active is False
        assert isinstance(user._events[0], UserDeactivated)

    def test_deactivate_twice_is_a_no_op(self):
        user = _register()
        user.deactivate()
        user._events.clear()

        user.deactivate()

        assert user.is_active is False
        assert user._events == []
