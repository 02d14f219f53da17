"""User profile management: command and handler."""

from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from identity.domain import identity
from identity.user.user import User
from shared.exceptions import ConflictError


@identity.command(part_of="User")
class UpdateProfile:
    user_id: Identifier(required=True)
    name: String(max_length=100)
    email: String(max_length=254)
    phone: String(max_length=20)


@identity.command_handler(part_of=User)
class ManageProfileHandler:
    @handle(UpdateProfile)
    def update_profile(self, command):
        repo = current_domain.repository_for(User)
        user = repo.get(command.user_id)

        if command.email and command.email != user.email:
            owner = repo.find_by_email(command.email)
            if owner is not None and owner.id != user.id:
                raise ConflictError("Email already registered")

        user.update_profile(
            name=command.name,
            email=command.email,
            phone=command.phone,
        )
        repo.add(user)
