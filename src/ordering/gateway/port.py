"""Payment gateway port (abstract interface).

The ordering context talks to the payment processor only through this
contract, so the Stripe adapter and the in-process fake are interchangeable.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field

from shared.exceptions import WebhookError

PAYMENT_SUCCEEDED = "payment_intent.succeeded"
PAYMENT_CANCELED = "payment_intent.canceled"


@dataclass(frozen=True)
class PaymentIntent:
    """A payment the processor is prepared to collect."""

    id: str
    client_secret: str | None
    amount: int  # minor units
    currency: str
    status: str
    metadata: dict = field(default_factory=dict)

    @property
    def succeeded(self) -> bool:
        return self.status == "succeeded"

    @property
    def order_id(self) -> str | None:
        return self.metadata.get("order_id") or self.metadata.get("orderId")


@dataclass(frozen=True)
class WebhookEvent:
    """A provider notification about a payment intent."""

    type: str
    intent_id: str | None = None
    metadata: dict = field(default_factory=dict)

    @property
    def order_id(self) -> str | None:
        return self.metadata.get("order_id") or self.metadata.get("orderId")


class PaymentGateway(ABC):
    """Abstract payment gateway interface."""

    @abstractmethod
    def create_payment_intent(self, amount: int, currency: str, metadata: dict) -> PaymentIntent:
        """Open a payment intent for ``amount`` minor units.

        Raises ``ExternalServiceError`` when the processor cannot be reached or
        rejects the request.
        """
        ...

    @abstractmethod
    def retrieve_payment_intent(self, intent_id: str) -> PaymentIntent:
        """Fetch the current state of an intent."""
        ...

    @abstractmethod
    def construct_event(self, payload: bytes, signature: str | None) -> WebhookEvent:
        """Parse a webhook body, verifying its signature when a secret is configured.

        Raises ``WebhookError`` for malformed or badly signed payloads.
        """
        ...


def event_from_payload(data) -> WebhookEvent:
    """Build a ``WebhookEvent`` from a decoded provider event body."""
    if not isinstance(data, dict) or not isinstance(data.get("type"), str):
        raise WebhookError("Missing event type")

    payload = data.get("data")
    obj = payload.get("object") if isinstance(payload, dict) else None
    if not isinstance(obj, dict):
        obj = {}
    metadata = obj.get("metadata") if isinstance(obj.get("metadata"), dict) else {}
    return WebhookEvent(
        type=data["type"],
        intent_id=obj.get("id"),
        metadata=dict(metadata),
    )
