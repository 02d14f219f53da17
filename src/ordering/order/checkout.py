"""Checkout: create the pending order and its payment intent in one step."""

import json

import structlog
from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Identifier, String, Text
from protean.utils.globals import current_domain

from ordering.domain import ordering
from ordering.gateway import get_gateway
from ordering.order.order import Order
from shared.settings import get_settings

logger = structlog.get_logger(__name__)


@ordering.command(part_of="Order")
class BeginCheckout:
    """Start paying for a cart. ``user_id`` is empty for guest checkout."""

    amount = String(required=True, max_length=20)  # decimal text
    items = Text(required=True)  # JSON: [{"product_id", "quantity", "price"}]
    user_id = Identifier()


@ordering.command_handler(part_of=Order)
class CheckoutHandler:
    @handle(BeginCheckout)
    def begin_checkout(self, command):
        items_data = json.loads(command.items) if isinstance(command.items, str) else command.items
        if not isinstance(items_data, list):
            raise ValidationError({"items": ["Items must be a list"]})

        order = Order.place(
            amount=command.amount,
            items_data=items_data,
            user_id=command.user_id,
        )
        if order.items_subtotal != order.total:
            logger.warning(
                "checkout_amount_mismatch",
                order_id=str(order.id),
                amount=order.amount,
                items_subtotal=str(order.items_subtotal),
            )

        intent = get_gateway().create_payment_intent(
            amount=order.amount_in_minor_units(),
            currency=get_settings().payment_currency,
            metadata={
                "order_id": str(order.id),
                "items": json.dumps([{"id": str(i.product_id), "quantity": i.quantity} for i in order.items]),
            },
        )
        order.attach_payment_intent(intent.id)
        current_domain.repository_for(Order).add(order)

        logger.info(
            "checkout_started",
            order_id=str(order.id),
            user_id=order.user_id,
            amount=order.amount,
            payment_intent_id=intent.id,
        )
        return {"client_secret": intent.client_secret, "order_id": str(order.id)}


def begin_checkout(amount, items, user_id=None) -> dict:
    """Place a pending order for ``items`` and open its payment intent.

    ``items`` are dicts with ``product_id`` (or ``id``), ``quantity`` and
    ``price``. Returns ``{"client_secret", "order_id"}``. Raises
    ``ValidationError`` for bad input and ``ExternalServiceError`` when the
    processor fails, in which case nothing is stored.
    """
    lines = [
        {
            "product_id": item.get("product_id", item.get("id")),
            "quantity": item.get("quantity"),
            "price": str(item.get("price")) if item.get("price") is not None else None,
        }
        for item in items
    ]
    command = BeginCheckout(
        amount=str(amount),
        items=json.dumps(lines),
        user_id=str(user_id) if user_id is not None else None,
    )
    return current_domain.process(command, asynchronous=False)
