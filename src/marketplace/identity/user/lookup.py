from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from marketplace.exceptions import NotFound
from marketplace.identity.user.user import User


def load_user(user_id) -> User:
    """Fetch a user by id, raising ``NotFound`` when it does not exist."""
    try:
        return current_domain.repository_for(User).get(str(user_id))
    except ObjectNotFoundError as exc:
        raise NotFound("User not found") from exc
