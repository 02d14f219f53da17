"""Address aggregate: a user's delivery address."""

from protean.fields import Identifier, String

from identity.domain import identity

ADDRESS_FIELDS = (
    "street",
    "number",
    "complement",
    "district",
    "city",
    "state",
    "zip_code",
    "country",
    "is_default",
)


@identity.aggregate
class Address:
    """A physical address linked to a user.

    Users normally hold a single address that is edited in place. The link is a
    plain ``user_id`` reference and is not enforced unique. ``is_default`` is a
    loosely typed text flag ("1"/"0").
    """

    user_id: Identifier(required=True)
    street: String(required=True, max_length=255)
    number: String(required=True, max_length=20)
    complement: String(max_length=255)
    district: String(required=True, max_length=100)
    city: String(required=True, max_length=100)
    state: String(required=True, max_length=100)
    zip_code: String(required=True, max_length=20)
    country: String(max_length=100, default="Brasil")
    is_default: String(max_length=5, default="1")

    @classmethod
    def create(cls, user_id, **fields):
        from identity.address.events import AddressSaved

        address = cls(user_id=user_id, **_known_fields(fields))
        address.raise_(AddressSaved(address_id=address.id, user_id=user_id, city=address.city))
        return address

    def revise(self, **fields):
        from identity.address.events import AddressSaved

        for field, value in _known_fields(fields).items():
            setattr(self, field, value)
        self.raise_(AddressSaved(address_id=self.id, user_id=self.user_id, city=self.city))


def _known_fields(fields: dict) -> dict:
    return {k: v for k, v in fields.items() if k in ADDRESS_FIELDS and v is not None}


@identity.repository(part_of=Address)
class AddressRepository:
    def for_user(self, user_id) -> Address | None:
        addresses = self._dao.query.filter(user_id=str(user_id)).all().items
        return addresses[0] if addresses else None
