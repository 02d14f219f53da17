"""Order aggregate with its OrderItem line items.

State machine:
    pending → completed → processing → shipped → delivered
    pending → cancelled

``delivered`` and ``cancelled`` are terminal; there are no backward moves.
"""

import json
from datetime import UTC, datetime
from decimal import Decimal
from enum import Enum

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, HasMany, Identifier, Integer, String

from ordering.domain import ordering
from ordering.order.events import (
    OrderCancelled,
    OrderCompleted,
    OrderPlaced,
    OrderStatusChanged,
)
from shared.money import format_amount, parse_amount, to_minor_units


class OrderStatus(Enum):
    PENDING = "pending"
    COMPLETED = "completed"
    PROCESSING = "processing"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


_VALID_TRANSITIONS = {
    OrderStatus.PENDING: {OrderStatus.COMPLETED, OrderStatus.CANCELLED},
    OrderStatus.COMPLETED: {OrderStatus.PROCESSING},
    OrderStatus.PROCESSING: {OrderStatus.SHIPPED},
    OrderStatus.SHIPPED: {OrderStatus.DELIVERED},
    OrderStatus.DELIVERED: set(),  # Terminal
    OrderStatus.CANCELLED: set(),  # Terminal
}


def can_transition(current: OrderStatus, target: OrderStatus) -> bool:
    return target in _VALID_TRANSITIONS[current]


@ordering.entity(part_of="Order")
class OrderItem:
    """A line of an order: product reference, quantity and the unit price at checkout.

    Items are written once, with their order, and never edited.
    """

    product_id = Identifier(required=True)
    quantity = Integer(required=True, min_value=1)
    price = String(required=True, max_length=20)  # decimal text

    @invariant.post
    def price_must_be_a_non_negative_amount(self):
        amount = parse_amount(self.price)
        if amount is None or amount < 0:
            raise ValidationError({"price": [f"Invalid unit price: {self.price!r}"]})

    @property
    def subtotal(self):
        return parse_amount(self.price) * self.quantity


@ordering.aggregate
class Order:
    user_id = Identifier()  # None for guest checkout
    amount = String(required=True, max_length=20)  # decimal text
    status = String(
        choices=OrderStatus,
        default=OrderStatus.PENDING.value,
    )
    payment_intent_id = String(max_length=255)
    created_at = DateTime()
    items = HasMany(OrderItem)

    @invariant.post
    def amount_must_be_positive(self):
        amount = parse_amount(self.amount)
        if amount is None or amount <= 0:
            raise ValidationError({"amount": ["Amount must be a positive number"]})

    # -------------------------------------------------------------------
    # Factory method
    # -------------------------------------------------------------------
    @classmethod
    def place(cls, amount, items_data, user_id=None):
        """Build a pending order with its line items. Nothing is persisted here.

        Args:
            amount: Order total as charged to the customer.
            items_data: Iterable of dicts with ``product_id``, ``quantity`` and
                ``price`` (unit price).
            user_id: Owner, or None for a guest order.
        """
        items_data = list(items_data)
        if not items_data:
            raise ValidationError({"items": ["An order needs at least one item"]})

        now = datetime.now(UTC)
        items = [
            OrderItem(
                product_id=str(item["product_id"]) if item.get("product_id") is not None else None,
                quantity=item["quantity"],
                price=format_amount(_price_of(item)),
            )
            for item in items_data
        ]

        order = cls(
            user_id=str(user_id) if user_id is not None else None,
            amount=format_amount(_amount_of(amount)),
            status=OrderStatus.PENDING.value,
            created_at=now,
            items=items,
        )
        order.raise_(
            OrderPlaced(
                order_id=str(order.id),
                user_id=order.user_id,
                amount=order.amount,
                items=json.dumps(
                    [
                        {"product_id": str(i.product_id), "quantity": i.quantity, "price": i.price}
                        for i in order.items
                    ]
                ),
                placed_at=now,
            )
        )
        return order

    # -------------------------------------------------------------------
    # Derived values
    # -------------------------------------------------------------------
    @property
    def total(self):
        return parse_amount(self.amount)

    @property
    def items_subtotal(self):
        return sum((item.subtotal for item in self.items), start=Decimal("0"))

    def amount_in_minor_units(self) -> int:
        return to_minor_units(self.total)

    @property
    def order_status(self) -> OrderStatus:
        return OrderStatus(self.status)

    # -------------------------------------------------------------------
    # Transitions
    # -------------------------------------------------------------------
    def _assert_can_transition(self, target: OrderStatus):
        if not can_transition(self.order_status, target):
            raise ValidationError({"status": [f"Cannot transition from {self.status} to {target.value}"]})

    def attach_payment_intent(self, payment_intent_id):
        if self.order_status != OrderStatus.PENDING:
            raise ValidationError({"status": ["Payment intents can only be attached to pending orders"]})
        self.payment_intent_id = payment_intent_id

    def confirm_payment(self, payment_intent_id) -> bool:
        """Mark the order paid. Returns True when the status changed.

        Repeating the confirmation on a completed order only re-records the
        intent id.
        """
        if self.order_status == OrderStatus.COMPLETED:
            self.payment_intent_id = payment_intent_id
            return False

        self._assert_can_transition(OrderStatus.COMPLETED)
        self.status = OrderStatus.COMPLETED.value
        self.payment_intent_id = payment_intent_id
        self.raise_(
            OrderCompleted(
                order_id=str(self.id),
                payment_intent_id=payment_intent_id,
                amount=self.amount,
                completed_at=datetime.now(UTC),
            )
        )
        return True

    def cancel(self, reason=None):
        self._assert_can_transition(OrderStatus.CANCELLED)
        self.status = OrderStatus.CANCELLED.value
        self.raise_(
            OrderCancelled(
                order_id=str(self.id),
                reason=reason,
                cancelled_at=datetime.now(UTC),
            )
        )

    def advance_to(self, target: OrderStatus):
        """Move a paid order along fulfilment: processing, shipped, delivered."""
        if target in (OrderStatus.COMPLETED, OrderStatus.CANCELLED):
            raise ValidationError({"status": [f"Use the payment operations to reach {target.value}"]})

        previous = self.status
        self._assert_can_transition(target)
        self.status = target.value
        self.raise_(
            OrderStatusChanged(
                order_id=str(self.id),
                previous_status=previous,
                new_status=target.value,
                changed_at=datetime.now(UTC),
            )
        )


def _amount_of(value):
    amount = parse_amount(value)
    if amount is None or amount <= 0:
        raise ValidationError({"amount": ["Amount must be a positive number"]})
    return amount


def _price_of(item):
    price = parse_amount(item.get("price"))
    if price is None or price < 0:
        raise ValidationError({"items": [f"Invalid unit price for product {item.get('product_id')}"]})
    return price


@ordering.repository(part_of=Order)
class OrderRepository:
    def for_user(self, user_id) -> list[Order]:
        """Orders placed by ``user_id``, newest first."""
        orders = self._dao.query.filter(user_id=str(user_id)).all().items
        return sorted(orders, key=lambda order: order.created_at, reverse=True)

    def find_by_payment_intent(self, payment_intent_id) -> Order | None:
        orders = self._dao.query.filter(payment_intent_id=payment_intent_id).all().items
        return orders[0] if orders else None
