"""Profile updates: command and handler.

Only fields that are provided (non-empty) are changed.
"""

from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from marketplace.domain import marketplace
from marketplace.identity.user.lookup import load_user
from marketplace.identity.user.user import User


@marketplace.command(part_of="User")
class UpdateProfile:
    user_id: Identifier(required=True)
    name: String(max_length=100)
    address: String(max_length=500)
    phone: String(max_length=30)


@marketplace.command_handler(part_of=User)
class UpdateProfileHandler:
    @handle(UpdateProfile)
    def update_profile(self, command):
        repo = current_domain.repository_for(User)
        user = load_user(command.user_id)

        changes = {
            field: getattr(command, field)
            for field in ("name", "address", "phone")
            if getattr(command, field)
        }
        user.update_profile(**changes)
        repo.add(user)
