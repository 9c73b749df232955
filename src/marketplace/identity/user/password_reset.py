"""Password reset: request a token, then redeem it for a new password.

Tokens come from the active ``ResetTokenStore``. Requests for unknown emails
get a decoy token so the response never reveals whether an account exists.
"""

from protean import handle
from protean.fields import String
from protean.utils.globals import current_domain

from marketplace.domain import marketplace
from marketplace.exceptions import InvalidState
from marketplace.identity.reset_tokens import decoy_token, get_reset_token_store
from marketplace.identity.user.lookup import load_user
from marketplace.identity.user.user import User
from marketplace.utils.logging import get_logger

logger = get_logger(__name__)


@marketplace.command(part_of="User")
class RequestPasswordReset:
    email: String(required=True, max_length=254)


@marketplace.command(part_of="User")
class ResetPassword:
    reset_token: String(required=True, max_length=255)
    password_hash: String(required=True, max_length=255)


@marketplace.command_handler(part_of=User)
class PasswordResetHandler:
    @handle(RequestPasswordReset)
    def request_password_reset(self, command):
        user = current_domain.repository_for(User).find_by_email(command.email)
        if user is None:
            logger.info("password_reset_requested_for_unknown_email")
            return decoy_token()

        token = get_reset_token_store().issue(str(user.id))
        logger.info("password_reset_requested", user_id=str(user.id))
        return token

    @handle(ResetPassword)
    def reset_password(self, command):
        store = get_reset_token_store()
        user_id = store.peek(command.reset_token)
        if user_id is None:
            raise InvalidState("Invalid or expired reset token", field="reset_token")

        user = load_user(user_id)
        user.change_password(command.password_hash)
        current_domain.repository_for(User).add(user)

        store.consume(command.reset_token)
        logger.info("password_reset_completed", user_id=user_id)
