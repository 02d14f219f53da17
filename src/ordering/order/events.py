"""Domain events for the Order aggregate."""

from protean.fields import DateTime, Identifier, String, Text

from ordering.domain import ordering


@ordering.event(part_of="Order")
class OrderPlaced:
    """A pending order was created and a payment intent requested for it."""

    __version__ = 1

    order_id = Identifier(required=True)
    user_id = Identifier()
    amount = String(required=True)  # decimal text
    payment_intent_id = String()
    items = Text(required=True)  # JSON: [{"product_id", "quantity", "price"}]
    placed_at = DateTime(required=True)


@ordering.event(part_of="Order")
class OrderCompleted:
    """Payment for the order succeeded."""

    __version__ = 1

    order_id = Identifier(required=True)
    payment_intent_id = String(required=True)
    amount = String(required=True)
    completed_at = DateTime(required=True)


@ordering.event(part_of="Order")
class OrderCancelled:
    """The payment was abandoned at the processor before completing."""

    __version__ = 1

    order_id = Identifier(required=True)
    reason = String(max_length=500)
    cancelled_at = DateTime(required=True)


@ordering.event(part_of="Order")
class OrderStatusChanged:
    """A fulfilment step moved the order forward (processing, shipped, delivered)."""

    __version__ = 1

    order_id = Identifier(required=True)
    previous_status = String(required=True)
    new_status = String(required=True)
    changed_at = DateTime(required=True)
