"""Order cancellation: command and handler."""

import structlog
from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import String
from protean.utils.globals import current_domain

from ordering.domain import ordering
from ordering.order.order import Order, OrderStatus, can_transition

logger = structlog.get_logger(__name__)


@ordering.command(part_of="Order")
class CancelOrder:
    order_id = String(max_length=255)
    reason = String(max_length=500)


@ordering.command_handler(part_of=Order)
class CancelOrderHandler:
    @handle(CancelOrder)
    def cancel_order(self, command):
        repo = current_domain.repository_for(Order)
        try:
            order = repo.get(command.order_id) if command.order_id else None
        except ObjectNotFoundError:
            order = None

        if order is None:
            logger.info("order_cancellation_ignored", reason="unknown order", order_id=command.order_id)
            return None
        if not can_transition(order.order_status, OrderStatus.CANCELLED):
            logger.info("order_cancellation_ignored", reason=f"order is {order.status}", order_id=str(order.id))
            return None

        order.cancel(reason=command.reason)
        repo.add(order)
        logger.info("order_cancelled", order_id=str(order.id), reason=command.reason)
        return None


def cancel_order(order_id, reason=None) -> None:
    current_domain.process(
        CancelOrder(order_id=str(order_id) if order_id is not None else None, reason=reason),
        asynchronous=False,
    )
