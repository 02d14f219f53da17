"""Order queries."""

from protean.utils.globals import current_domain

from ordering.order.order import Order


def get_order(order_id) -> Order:
    """Raises ``ObjectNotFoundError`` when no order has ``order_id``."""
    return current_domain.repository_for(Order).get(str(order_id))


def orders_for_user(user_id) -> list[Order]:
    """Order history of ``user_id``, newest first."""
    return current_domain.repository_for(Order).for_user(user_id)
