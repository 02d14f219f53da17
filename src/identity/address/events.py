"""Domain events for the Address aggregate."""

from protean.fields import Identifier, String

from identity.domain import identity


@identity.event(part_of="Address")
class AddressSaved:
    """A user's address was created or edited."""

    __version__ = 1

    address_id: Identifier(required=True)
    user_id: Identifier(required=True)
    city: String(required=True)
