"""Pydantic request/response schemas for the Ordering API.

These are external contracts, kept separate from the internal Protean
commands. Amounts travel as decimal text.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from shared.money import format_amount
from shared.schemas import ApiModel


# ---------------------------------------------------------------------------
# Request Schemas
# ---------------------------------------------------------------------------
class CheckoutItem(ApiModel):
    id: str | int
    name: str | None = None
    price: Decimal
    quantity: int


class CheckoutRequest(ApiModel):
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "amount": "49.97",
                    "items": [
                        {"id": "p-1", "name": "Mug", "price": "19.99", "quantity": 1},
                        {"id": "p-2", "name": "Coaster set", "price": "14.99", "quantity": 2},
                    ],
                }
            ]
        }
    }

    amount: Decimal
    items: list[CheckoutItem]


# ---------------------------------------------------------------------------
# Response Schemas
# ---------------------------------------------------------------------------
class CheckoutResponse(ApiModel):
    client_secret: str | None
    order_id: str


class WebhookAck(ApiModel):
    received: bool = True


class OrderItemResponse(ApiModel):
    id: str
    order_id: str
    product_id: str
    quantity: int
    price: str


class OrderResponse(ApiModel):
    id: str
    user_id: str | None = None
    amount: str
    status: str
    payment_intent_id: str | None = None
    created_at: datetime | None = None
    items: list[OrderItemResponse] = []

    @classmethod
    def from_order(cls, order) -> OrderResponse:
        return cls(
            id=str(order.id),
            user_id=str(order.user_id) if order.user_id else None,
            amount=format_amount(order.amount),
            status=order.status,
            payment_intent_id=order.payment_intent_id,
            created_at=order.created_at,
            items=[
                OrderItemResponse(
                    id=str(item.id),
                    order_id=str(order.id),
                    product_id=str(item.product_id),
                    quantity=item.quantity,
                    price=item.price,
                )
                for item in order.items
            ],
        )
