"""User registration: command and handler."""

from protean import handle
from protean.exceptions import ValidationError
from protean.fields import String
from protean.utils.globals import current_domain

from marketplace.domain import marketplace
from marketplace.identity.user.user import Role, User


@marketplace.command(part_of="User")
class RegisterUser:
    """Create an account. Carries the password hash, never the password."""

    name: String(required=True, max_length=100)
    email: String(required=True, max_length=254)
    password_hash: String(required=True, max_length=255)
    role: String(choices=Role, default=Role.BUYER.value)
    address: String(max_length=500)
    phone: String(max_length=30)


@marketplace.command_handler(part_of=User)
class RegisterUserHandler:
    @handle(RegisterUser)
    def register_user(self, command):
        repo = current_domain.repository_for(User)
        if repo.find_by_email(command.email) is not None:
            raise ValidationError({"email": ["User already exists with this email"]})

        user = User.register(
            name=command.name,
            email=command.email,
            password_hash=command.password_hash,
            role=command.role or Role.BUYER.value,
            address=command.address,
            phone=command.phone,
        )
        repo.add(user)
        return str(user.id)
