"""Application tests for payment confirmation and cancellation."""

import pytest
from ordering.order.cancellation import cancel_order
from ordering.order.checkout import begin_checkout
from ordering.order.confirmation import confirm_client_payment, confirm_payment
from ordering.order.fulfillment import MarkProcessing, RecordDelivery, RecordShipment
from ordering.order.order import Order, OrderStatus
from protean import current_domain
from protean.exceptions import ObjectNotFoundError, ValidationError


@pytest.fixture()
def placed(gateway, line_items):
    result = begin_checkout(amount="49.98", items=line_items)
    return current_domain.repository_for(Order).get(result["order_id"])


def _reload(order):
    return current_domain.repository_for(Order).get(order.id)


class TestConfirmPayment:
    def test_completes_pending_order(self, placed):
        confirm_payment(placed.id, placed.payment_intent_id)

        order = _reload(placed)
        assert order.status == OrderStatus.COMPLETED.value
        assert order.payment_intent_id == placed.payment_intent_id

    def test_confirming_twice_is_harmless(self, placed):
        confirm_payment(placed.id, placed.payment_intent_id)
        confirm_payment(placed.id, placed.payment_intent_id)

        order = _reload(placed)
        assert order.status == OrderStatus.COMPLETED.value
        assert len(order.items) == 2

    def test_reconfirmation_rewrites_intent(self, placed):
        confirm_payment(placed.id, placed.payment_intent_id)
        confirm_payment(placed.id, "pi_other")
        assert _reload(placed).payment_intent_id == "pi_other"

    def test_unknown_order_is_ignored(self, placed):
        confirm_payment("00000000-0000-0000-0000-000000000000", "pi_x")
        assert _reload(placed).status == OrderStatus.PENDING.value
        assert len(current_domain.repository_for(Order)._dao.query.all().items) == 1

    def test_missing_order_id_is_ignored(self, placed):
        confirm_payment(None, "pi_x")
        assert _reload(placed).status == OrderStatus.PENDING.value

    def test_cancelled_order_rejects_payment(self, placed):
        cancel_order(placed.id)
        with pytest.raises(ValidationError):
            confirm_payment(placed.id, placed.payment_intent_id)


class TestClientConfirmation:
    def test_succeeded_intent_completes_order(self, gateway, placed):
        gateway.set_status(placed.payment_intent_id, "succeeded")

        confirm_client_payment(placed.id)

        assert _reload(placed).status == OrderStatus.COMPLETED.value

    def test_unpaid_intent_rejected(self, placed):
        with pytest.raises(ValidationError):
            confirm_client_payment(placed.id)
        assert _reload(placed).status == OrderStatus.PENDING.value

    def test_unknown_order(self, gateway):
        with pytest.raises(ObjectNotFoundError):
            confirm_client_payment("no-such-order")

    def test_intent_of_another_order_rejected(self, gateway, line_items, placed):
        other = begin_checkout(amount="49.98", items=line_items)
        other_order = current_domain.repository_for(Order).get(other["order_id"])
        gateway.set_status(other_order.payment_intent_id, "succeeded")

        order = _reload(placed)
        order.payment_intent_id = other_order.payment_intent_id
        current_domain.repository_for(Order).add(order)

        with pytest.raises(ValidationError):
            confirm_client_payment(placed.id)

    def test_repeat_client_confirmation(self, gateway, placed):
        gateway.set_status(placed.payment_intent_id, "succeeded")
        confirm_client_payment(placed.id)
        confirm_client_payment(placed.id)
        assert _reload(placed).status == OrderStatus.COMPLETED.value


class TestCancelOrder:
    def test_cancels_pending_order(self, placed):
        cancel_order(placed.id, reason="Payment canceled")
        assert _reload(placed).status == OrderStatus.CANCELLED.value

    def test_completed_order_is_left_alone(self, placed):
        confirm_payment(placed.id, placed.payment_intent_id)
        cancel_order(placed.id)
        assert _reload(placed).status == OrderStatus.COMPLETED.value

    def test_unknown_order_is_ignored(self):
        cancel_order("no-such-order")
        cancel_order(None)


class TestFulfillment:
    def test_paid_order_moves_to_delivered(self, placed):
        confirm_payment(placed.id, placed.payment_intent_id)

        for command, status in (
            (MarkProcessing, OrderStatus.PROCESSING),
            (RecordShipment, OrderStatus.SHIPPED),
            (RecordDelivery, OrderStatus.DELIVERED),
        ):
            current_domain.process(command(order_id=str(placed.id)), asynchronous=False)
            assert _reload(placed).status == status.value

    def test_pending_order_cannot_ship(self, placed):
        with pytest.raises(ValidationError):
            current_domain.process(RecordShipment(order_id=str(placed.id)), asynchronous=False)
