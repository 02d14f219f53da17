"""Payment confirmation: commands and handler.

Confirmation arrives either from the processor (webhook) or from the client
after the payment redirect. Both paths end in ``Order.confirm_payment``.
"""

import structlog
from protean import handle
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from ordering.domain import ordering
from ordering.gateway import get_gateway
from ordering.order.order import Order

logger = structlog.get_logger(__name__)


@ordering.command(part_of="Order")
class ConfirmPayment:
    """The processor reports the intent as succeeded. The order id may be unknown."""

    order_id = String(max_length=255)
    payment_intent_id = String(required=True, max_length=255)


@ordering.command(part_of="Order")
class ConfirmClientPayment:
    """The customer returned from the payment page for ``order_id``."""

    order_id = Identifier(required=True)


@ordering.command_handler(part_of=Order)
class ConfirmPaymentHandler:
    @handle(ConfirmPayment)
    def confirm_payment(self, command):
        repo = current_domain.repository_for(Order)
        if not command.order_id:
            logger.info("payment_confirmation_ignored", reason="missing order id", intent=command.payment_intent_id)
            return None

        try:
            order = repo.get(command.order_id)
        except ObjectNotFoundError:
            logger.info(
                "payment_confirmation_ignored",
                reason="unknown order",
                order_id=command.order_id,
                intent=command.payment_intent_id,
            )
            return None

        changed = order.confirm_payment(command.payment_intent_id)
        repo.add(order)
        if changed:
            logger.info("payment_confirmed", order_id=str(order.id), intent=command.payment_intent_id)
        else:
            logger.info("payment_reconfirmed", order_id=str(order.id), intent=command.payment_intent_id)
        return None

    @handle(ConfirmClientPayment)
    def confirm_client_payment(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)

        if not order.payment_intent_id:
            raise ValidationError({"payment_intent_id": ["Order has no payment intent"]})

        intent = get_gateway().retrieve_payment_intent(order.payment_intent_id)
        if intent.order_id is not None and intent.order_id != str(order.id):
            raise ValidationError({"payment_intent_id": ["Payment intent belongs to another order"]})
        if not intent.succeeded:
            raise ValidationError({"payment_intent_id": [f"Payment has not succeeded (status: {intent.status})"]})

        changed = order.confirm_payment(intent.id)
        repo.add(order)
        if changed:
            logger.info("payment_confirmed", order_id=str(order.id), intent=intent.id, source="client")
        return str(order.id)


def confirm_payment(order_id, payment_intent_id) -> None:
    current_domain.process(
        ConfirmPayment(order_id=str(order_id) if order_id is not None else None, payment_intent_id=payment_intent_id),
        asynchronous=False,
    )


def confirm_client_payment(order_id) -> str:
    """Check the order's intent with the processor and complete the order.

    Raises ``ObjectNotFoundError`` for an unknown order and ``ValidationError``
    when the intent has not succeeded or belongs to another order.
    """
    return current_domain.process(ConfirmClientPayment(order_id=str(order_id)), asynchronous=False)
