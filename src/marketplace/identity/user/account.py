"""Account deactivation: command and handler."""

from protean import handle
from protean.fields import Identifier
from protean.utils.globals import current_domain

from marketplace.domain import marketplace
from marketplace.identity.user.lookup import load_user
from marketplace.identity.user.user import User


@marketplace.command(part_of="User")
class DeactivateUser:
    """Soft-delete an account. The record is kept, login is refused."""

    user_id: Identifier(required=True)


@marketplace.command_handler(part_of=User)
class DeactivateUserHandler:
    @handle(DeactivateUser)
    def deactivate_user(self, command):
        user = load_user(command.user_id)
        user.deactivate()
        current_domain.repository_for(User).add(user)
