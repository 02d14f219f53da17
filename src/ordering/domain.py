"""Ordering bounded context: orders, payment reconciliation and the client cart.

Orders are created at checkout in ``pending`` status together with a payment
intent at the processor, and completed when the processor (webhook) or the
client (redirect confirmation) reports the payment as succeeded.
"""

import structlog
from protean.domain import Domain

from shared.logging import configure_logging

configure_logging()

ordering = Domain(name="ordering")

logger = structlog.get_logger(__name__)
