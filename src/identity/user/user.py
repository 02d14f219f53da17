"""User aggregate: the storefront account holder."""

from datetime import UTC, datetime

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, String

from identity.domain import identity
from identity.shared.email import is_valid_email
from identity.shared.phone import is_valid_phone

# Sentinel for distinguishing "not provided" from None in partial updates
_UNSET = object()


def utc_now() -> datetime:
    return datetime.now(UTC)


@identity.aggregate
class User:
    """A registered customer who can sign in, keep an address and place orders.

    Only a password hash is ever held; the plaintext never reaches the aggregate.
    Accounts are never deleted.
    """

    username: String(required=True, max_length=50, unique=True)
    password_hash: String(required=True, max_length=255)
    email: String(required=True, max_length=254, unique=True)
    name: String(required=True, max_length=100)
    phone: String(required=True, max_length=20)
    created_at: DateTime(default=utc_now)

    @invariant.post
    def email_must_be_well_formed(self):
        if self.email is not None and not is_valid_email(self.email):
            raise ValidationError({"email": [f"Invalid email address: {self.email!r}"]})

    @invariant.post
    def phone_must_be_well_formed(self):
        if self.phone is not None and not is_valid_phone(self.phone):
            raise ValidationError({"phone": [f"Invalid phone number: {self.phone!r}"]})

    @classmethod
    def register(cls, username, password_hash, email, name, phone):
        from identity.user.events import UserRegistered

        now = utc_now()
        user = cls(
            username=username,
            password_hash=password_hash,
            email=email,
            name=name,
            phone=phone,
            created_at=now,
        )
        user.raise_(
            UserRegistered(
                user_id=user.id,
                username=username,
                email=email,
                name=name,
                registered_at=now,
            )
        )
        return user

    def update_profile(self, name=_UNSET, email=_UNSET, phone=_UNSET):
        from identity.user.events import ProfileUpdated

        if name is not _UNSET and name is not None:
            self.name = name
        if email is not _UNSET and email is not None:
            self.email = email
        if phone is not _UNSET and phone is not None:
            self.phone = phone

        self.raise_(
            ProfileUpdated(
                user_id=self.id,
                name=self.name,
                email=self.email,
                phone=self.phone,
            )
        )


@identity.repository(part_of=User)
class UserRepository:
    def find_by_username(self, username: str) -> User | None:
        users = self._dao.query.filter(username=username).all().items
        return users[0] if users else None

    def find_by_email(self, email: str) -> User | None:
        users = self._dao.query.filter(email=email).all().items
        return users[0] if users else None
