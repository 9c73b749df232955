"""Repository for the User aggregate."""

from marketplace.domain import marketplace
from marketplace.identity.user.user import User


@marketplace.repository(part_of=User)
class UserRepository:
    def find_by_email(self, email: str) -> User | None:
        """Find a user by email, ignoring case and surrounding whitespace."""
        users = self._dao.query.filter(email=email.strip().lower()).all().items
        return users[0] if users else None

    def newest_first(self) -> list[User]:
        return self._dao.query.order_by("-created_at").limit(None).all().items
