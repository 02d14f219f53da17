"""Application error taxonomy shared by every bounded context.

Validation problems and missing objects are signalled with Protean's own
``ValidationError`` and ``ObjectNotFoundError``; the classes below cover the
remaining failure modes. ``shared.http`` translates all of them into HTTP
responses.
"""


class StorefrontError(Exception):
    """Base class for application errors carrying a client-safe message."""

    default_message = "Request failed"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class ConflictError(StorefrontError):
    """A unique value (username, email) is already taken."""

    default_message = "Resource already exists"


class AuthenticationFailure(StorefrontError):
    """Supplied credentials do not match a user."""

    default_message = "Invalid credentials"


class Unauthorized(StorefrontError):
    """A protected operation was attempted without a valid session."""

    default_message = "Not authenticated"


class ExternalServiceError(StorefrontError):
    """The payment processor call failed."""

    default_message = "Payment provider unavailable"


class WebhookError(StorefrontError):
    """A provider callback could not be parsed or its signature did not verify."""

    default_message = "Invalid webhook payload"
