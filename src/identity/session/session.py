"""UserSession aggregate: server-side state behind the session cookie."""

import secrets
from datetime import UTC, datetime, timedelta

from protean.fields import DateTime, Identifier

from identity.domain import identity


@identity.aggregate
class UserSession:
    """An authenticated browser session.

    The identifier is an opaque random token handed to the browser in an
    HTTP-only cookie. Sessions are persisted like any other aggregate, so they
    outlive process restarts when a relational provider is configured.
    """

    session_id: Identifier(identifier=True)
    user_id: Identifier(required=True)
    created_at: DateTime(required=True)
    expires_at: DateTime(required=True)
    revoked_at: DateTime()

    @classmethod
    def start(cls, user_id, ttl: timedelta):
        now = datetime.now(UTC)
        return cls(
            session_id=secrets.token_urlsafe(32),
            user_id=user_id,
            created_at=now,
            expires_at=now + ttl,
        )

    def is_active(self, now: datetime | None = None) -> bool:
        now = now or datetime.now(UTC)
        return self.revoked_at is None and _aware(self.expires_at) > now

    def revoke(self):
        if self.revoked_at is None:
            self.revoked_at = datetime.now(UTC)


def _aware(value: datetime) -> datetime:
    # Some providers hand back naive timestamps; they are stored in UTC.
    return value if value.tzinfo is not None else value.replace(tzinfo=UTC)
