"""FastAPI routes for the Ordering domain: checkout, payment callbacks and order lookup."""

import structlog
from fastapi import APIRouter, Depends, Header, Request
from protean.exceptions import ValidationError

from identity.api.dependencies import optional_user, require_user
from identity.user.user import User
from ordering.api.schemas import CheckoutRequest, CheckoutResponse, OrderResponse, WebhookAck
from ordering.gateway import get_gateway
from ordering.gateway.port import PAYMENT_CANCELED, PAYMENT_SUCCEEDED
from ordering.order.cancellation import cancel_order
from ordering.order.checkout import begin_checkout
from ordering.order.confirmation import confirm_client_payment, confirm_payment
from ordering.order.history import get_order, orders_for_user

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/api", tags=["orders"])


@router.post("/create-payment-intent", response_model=CheckoutResponse)
def create_payment_intent(
    body: CheckoutRequest,
    user: User | None = Depends(optional_user),
) -> CheckoutResponse:
    result = begin_checkout(
        amount=body.amount,
        items=[item.model_dump() for item in body.items],
        user_id=user.id if user is not None else None,
    )
    return CheckoutResponse(client_secret=result["client_secret"], order_id=result["order_id"])


@router.post("/stripe-webhook", response_model=WebhookAck)
async def stripe_webhook(
    request: Request,
    stripe_signature: str | None = Header(None, alias="Stripe-Signature"),
) -> WebhookAck:
    event = get_gateway().construct_event(await request.body(), stripe_signature)

    try:
        if event.type == PAYMENT_SUCCEEDED:
            confirm_payment(event.order_id, event.intent_id)
        elif event.type == PAYMENT_CANCELED:
            cancel_order(event.order_id, reason="Payment canceled at processor")
        else:
            logger.debug("webhook_event_ignored", event_type=event.type)
    except ValidationError as exc:
        logger.warning("webhook_event_rejected", event_type=event.type, order_id=event.order_id, errors=exc.messages)

    return WebhookAck()


@router.get("/order/{order_id}", response_model=OrderResponse)
async def order_detail(order_id: str) -> OrderResponse:
    return OrderResponse.from_order(get_order(order_id))


@router.post("/order/{order_id}/confirm", response_model=OrderResponse)
def confirm_order(order_id: str) -> OrderResponse:
    confirm_client_payment(order_id)
    return OrderResponse.from_order(get_order(order_id))


@router.get("/user/orders", response_model=list[OrderResponse])
async def order_history(user: User = Depends(require_user)) -> list[OrderResponse]:
    return [OrderResponse.from_order(order) for order in orders_for_user(user.id)]
