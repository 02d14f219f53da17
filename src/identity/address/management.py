"""Address management: command and handler."""

from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from identity.address.address import ADDRESS_FIELDS, Address
from identity.domain import identity


@identity.command(part_of="Address")
class SaveAddress:
    """Create the user's address, or edit the existing one in place."""

    user_id: Identifier(required=True)
    street: String(max_length=255)
    number: String(max_length=20)
    complement: String(max_length=255)
    district: String(max_length=100)
    city: String(max_length=100)
    state: String(max_length=100)
    zip_code: String(max_length=20)
    country: String(max_length=100)
    is_default: String(max_length=5)


@identity.command_handler(part_of=Address)
class ManageAddressHandler:
    @handle(SaveAddress)
    def save_address(self, command):
        repo = current_domain.repository_for(Address)
        fields = {field: getattr(command, field, None) for field in ADDRESS_FIELDS}

        address = repo.for_user(command.user_id)
        if address is None:
            address = Address.create(user_id=command.user_id, **fields)
        else:
            address.revise(**fields)

        repo.add(address)
        return str(address.id)


def address_of(user_id) -> Address | None:
    """Return the address linked to ``user_id``, if any."""
    return current_domain.repository_for(Address).for_user(user_id)
