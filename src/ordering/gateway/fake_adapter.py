"""Configurable fake payment gateway for development and testing.

Simulates the processor in-process: intents get deterministic ids, every
call is recorded, and the gateway can be switched to fail. When a webhook
secret is set, ``construct_event`` requires the HMAC-SHA256 signature that
``sign`` produces.
"""

import hashlib
import hmac
import json
from itertools import count

from ordering.gateway.port import PaymentGateway, PaymentIntent, WebhookEvent, event_from_payload
from shared.exceptions import ExternalServiceError, WebhookError


class FakeGateway(PaymentGateway):
    """Configurable fake payment gateway."""

    def __init__(self, webhook_secret: str | None = None) -> None:
        self.webhook_secret = webhook_secret
        self.should_succeed: bool = True
        self.failure_reason: str = "Payment provider unavailable"
        self.calls: list[dict] = []
        self.intents: dict[str, PaymentIntent] = {}
        self._sequence = count(1)

    def configure(self, should_succeed: bool, failure_reason: str = "Payment provider unavailable") -> None:
        """Configure gateway behavior at runtime."""
        self.should_succeed = should_succeed
        self.failure_reason = failure_reason

    def create_payment_intent(self, amount: int, currency: str, metadata: dict) -> PaymentIntent:
        self.calls.append(
            {
                "method": "create_payment_intent",
                "amount": amount,
                "currency": currency,
                "metadata": dict(metadata),
            }
        )
        if not self.should_succeed:
            raise ExternalServiceError(self.failure_reason)

        intent_id = f"pi_fake_{next(self._sequence):06d}"
        intent = PaymentIntent(
            id=intent_id,
            client_secret=f"{intent_id}_secret_fake",
            amount=amount,
            currency=currency,
            status="requires_payment_method",
            metadata=dict(metadata),
        )
        self.intents[intent_id] = intent
        return intent

    def retrieve_payment_intent(self, intent_id: str) -> PaymentIntent:
        self.calls.append({"method": "retrieve_payment_intent", "intent_id": intent_id})
        if not self.should_succeed:
            raise ExternalServiceError(self.failure_reason)
        try:
            return self.intents[intent_id]
        except KeyError:
            raise ExternalServiceError(f"No such payment intent: {intent_id}") from None

    def construct_event(self, payload: bytes, signature: str | None) -> WebhookEvent:
        if self.webhook_secret and not hmac.compare_digest(signature or "", self.sign(payload)):
            raise WebhookError("Invalid signature")
        try:
            body = payload.decode("utf-8") if isinstance(payload, bytes) else payload
            data = json.loads(body)
        except UnicodeDecodeError:
            raise WebhookError("Invalid payload: body is not UTF-8") from None
        except json.JSONDecodeError as exc:
            raise WebhookError(f"Invalid payload: {exc.msg}") from None
        return event_from_payload(data)

    # -------------------------------------------------------------------
    # Simulation helpers
    # -------------------------------------------------------------------
    def sign(self, payload) -> str:
        body = payload.encode("utf-8") if isinstance(payload, str) else payload
        return hmac.new((self.webhook_secret or "").encode("utf-8"), body, hashlib.sha256).hexdigest()

    def set_status(self, intent_id: str, status: str) -> PaymentIntent:
        """Move a stored intent to ``status`` as if the customer acted on it."""
        intent = self.intents[intent_id]
        updated = PaymentIntent(
            id=intent.id,
            client_secret=intent.client_secret,
            amount=intent.amount,
            currency=intent.currency,
            status=status,
            metadata=intent.metadata,
        )
        self.intents[intent_id] = updated
        return updated

    def event_payload(self, intent_id: str, event_type: str = "payment_intent.succeeded") -> str:
        """A provider-style event body for the stored intent."""
        intent = self.intents[intent_id]
        return json.dumps(
            {
                "id": f"evt_fake_{intent_id}",
                "type": event_type,
                "data": {"object": {"id": intent.id, "status": intent.status, "metadata": intent.metadata}},
            }
        )
