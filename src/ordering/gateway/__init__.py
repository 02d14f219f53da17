"""Payment gateway factory.

Provides get_gateway() / set_gateway() to swap implementations:
- StripeGateway when a Stripe secret key is configured
- FakeGateway otherwise (development, tests)
"""

import structlog

from ordering.gateway.fake_adapter import FakeGateway
from ordering.gateway.port import PaymentGateway
from shared.settings import Settings, get_settings

logger = structlog.get_logger(__name__)

_current_gateway: PaymentGateway | None = None


def build_gateway(settings: Settings) -> PaymentGateway:
    if settings.stripe_secret_key:
        from ordering.gateway.stripe_adapter import StripeGateway

        return StripeGateway(settings.stripe_secret_key, settings.stripe_webhook_secret)

    if settings.environment == "production":
        logger.warning("payment_gateway_fake_in_production")
    return FakeGateway(webhook_secret=settings.stripe_webhook_secret)


def get_gateway() -> PaymentGateway:
    """Return the current payment gateway, building it from settings on first use."""
    global _current_gateway
    if _current_gateway is None:
        _current_gateway = build_gateway(get_settings())
    return _current_gateway


def set_gateway(gateway: PaymentGateway) -> None:
    """Override the active payment gateway (app factory, tests)."""
    global _current_gateway
    _current_gateway = gateway


def reset_gateway() -> None:
    """Reset to default gateway."""
    global _current_gateway
    _current_gateway = None
