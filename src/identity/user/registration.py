"""User registration: command and handler."""

import json

import structlog
from protean import handle
from protean.exceptions import ValidationError
from protean.fields import String, Text
from protean.utils.globals import current_domain

from identity.address.address import Address
from identity.domain import identity
from identity.user.user import User
from shared.exceptions import ConflictError

logger = structlog.get_logger(__name__)


@identity.command(part_of="User")
class RegisterUser:
    """Create a new account. Carries the password hash, never the plaintext."""

    username: String(required=True, max_length=50)
    password_hash: String(required=True, max_length=255)
    email: String(required=True, max_length=254)
    name: String(required=True, max_length=100)
    phone: String(required=True, max_length=20)
    address: Text()  # JSON: address dict


@identity.command_handler(part_of=User)
class RegisterUserHandler:
    @handle(RegisterUser)
    def register_user(self, command):
        users = current_domain.repository_for(User)
        if users.find_by_username(command.username) is not None:
            raise ConflictError("Username already exists")
        if users.find_by_email(command.email) is not None:
            raise ConflictError("Email already registered")

        user = User.register(
            username=command.username,
            password_hash=command.password_hash,
            email=command.email,
            name=command.name,
            phone=command.phone,
        )
        users.add(user)

        if command.address:
            address_data = json.loads(command.address) if isinstance(command.address, str) else command.address
            _attach_address(user, address_data)

        logger.info("user_registered", user_id=str(user.id), username=user.username)
        return str(user.id)


def _attach_address(user, address_data):
    """Store the address given at sign-up.

    An invalid address does not fail the registration: it is logged and
    dropped, and the account is created without one.
    """
    try:
        address = Address.create(user_id=user.id, **address_data)
    except (ValidationError, TypeError) as exc:
        errors = exc.messages if isinstance(exc, ValidationError) else str(exc)
        logger.warning("registration_address_rejected", user_id=str(user.id), errors=errors)
        return None

    current_domain.repository_for(Address).add(address)
    return address
