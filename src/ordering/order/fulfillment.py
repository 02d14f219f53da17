"""Order fulfillment: commands and handler.

Moves a paid order through processing, shipment and delivery.
"""

import structlog
from protean import handle
from protean.fields import Identifier
from protean.utils.globals import current_domain

from ordering.domain import ordering
from ordering.order.order import Order, OrderStatus

logger = structlog.get_logger(__name__)


@ordering.command(part_of="Order")
class MarkProcessing:
    """Signal that the order is being picked and packed."""

    order_id = Identifier(required=True)


@ordering.command(part_of="Order")
class RecordShipment:
    order_id = Identifier(required=True)


@ordering.command(part_of="Order")
class RecordDelivery:
    order_id = Identifier(required=True)


@ordering.command_handler(part_of=Order)
class OrderFulfillmentHandler:
    def _advance(self, order_id, target: OrderStatus):
        repo = current_domain.repository_for(Order)
        order = repo.get(order_id)
        order.advance_to(target)
        repo.add(order)
        logger.info("order_advanced", order_id=str(order.id), status=target.value)

    @handle(MarkProcessing)
    def mark_processing(self, command):
        self._advance(command.order_id, OrderStatus.PROCESSING)

    @handle(RecordShipment)
    def record_shipment(self, command):
        self._advance(command.order_id, OrderStatus.SHIPPED)

    @handle(RecordDelivery)
    def record_delivery(self, command):
        self._advance(command.order_id, OrderStatus.DELIVERED)
