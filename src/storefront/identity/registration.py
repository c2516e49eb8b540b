"""User registration and token lookup."""

from protean import handle
from protean.exceptions import ValidationError
from protean.fields import String
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.identity.user import User, UserRole
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


@storefront.command(part_of="User")
class RegisterUser:
    """Create a user account and issue its API token."""

    name: String(required=True, max_length=100)
    email: String(required=True, max_length=254)
    role: String(choices=UserRole, default=UserRole.CUSTOMER.value)


@storefront.command_handler(part_of=User)
class RegisterUserHandler:
    @handle(RegisterUser)
    def register_user(self, command):
        if user_for_email(command.email) is not None:
            raise ValidationError({"email": ["User already exists"]})

        user = User.register(name=command.name, email=command.email, role=command.role)
        current_domain.repository_for(User).add(user)

        logger.info("User registered", user_id=str(user.id), role=user.role)
        return str(user.id)


def user_for_email(email: str) -> User | None:
    results = current_domain.repository_for(User)._dao.query.filter(email=email.strip().lower()).all()
    return results.items[0] if results.items else None


def user_for_token(token: str) -> User | None:
    if not token:
        return None
    results = current_domain.repository_for(User)._dao.query.filter(api_token=token).all()
    return results.items[0] if results.items else None
