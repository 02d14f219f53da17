"""Stripe payment gateway adapter (stripe-python SDK)."""

import json

import stripe
import structlog

from ordering.gateway.port import PaymentGateway, PaymentIntent, WebhookEvent, event_from_payload
from shared.exceptions import ExternalServiceError, WebhookError

logger = structlog.get_logger(__name__)


class StripeGateway(PaymentGateway):
    """Production gateway backed by Stripe PaymentIntents."""

    def __init__(self, api_key: str, webhook_secret: str | None = None) -> None:
        self.api_key = api_key
        self.webhook_secret = webhook_secret

    def create_payment_intent(self, amount: int, currency: str, metadata: dict) -> PaymentIntent:
        try:
            intent = stripe.PaymentIntent.create(
                amount=amount,
                currency=currency,
                metadata=metadata,
                automatic_payment_methods={"enabled": True},
                api_key=self.api_key,
            )
        except stripe.StripeError as exc:
            logger.error("stripe_request_failed", operation="create_payment_intent", error=str(exc))
            raise ExternalServiceError(exc.user_message or "Payment provider error") from exc
        return _to_intent(intent)

    def retrieve_payment_intent(self, intent_id: str) -> PaymentIntent:
        try:
            intent = stripe.PaymentIntent.retrieve(intent_id, api_key=self.api_key)
        except stripe.StripeError as exc:
            logger.error("stripe_request_failed", operation="retrieve_payment_intent", error=str(exc))
            raise ExternalServiceError(exc.user_message or "Payment provider error") from exc
        return _to_intent(intent)

    def construct_event(self, payload: bytes, signature: str | None) -> WebhookEvent:
        if not self.webhook_secret:
            logger.warning("stripe_webhook_unverified")
            try:
                return event_from_payload(json.loads(payload))
            except (json.JSONDecodeError, UnicodeDecodeError) as exc:
                raise WebhookError(f"Invalid payload: {exc}") from None

        try:
            event = stripe.Webhook.construct_event(payload, signature or "", self.webhook_secret)
        except ValueError as exc:
            raise WebhookError(f"Invalid payload: {exc}") from None
        except stripe.SignatureVerificationError as exc:
            raise WebhookError(f"Invalid signature: {exc.user_message or exc}") from None
        return event_from_payload(event.to_dict())


def _to_intent(intent) -> PaymentIntent:
    return PaymentIntent(
        id=intent.id,
        client_secret=intent.client_secret,
        amount=intent.amount,
        currency=intent.currency,
        status=intent.status,
        metadata=dict(intent.metadata or {}),
    )
