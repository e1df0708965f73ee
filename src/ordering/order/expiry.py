"""Order expiry — cancels orders no chef responded to in time.

Triggered periodically by the sweeper process (``src/sweeper.py``) or by an
external scheduler through the maintenance API endpoint. Each stale order is
cancelled through ``apply_transition`` on behalf of the system, so the customer
receives the same kind of notification as for any other cancellation. All
cancellations of one sweep commit together with the sweep's unit of work.
"""

from datetime import UTC, datetime, timedelta

import structlog
from protean import handle
from protean.exceptions import InvalidOperationError, ValidationError
from protean.fields import DateTime, Integer
from protean.utils.globals import current_domain

from ordering import settings
from ordering.domain import ordering
from ordering.order.order import Actor, Order, OrderStatus
from ordering.order.transition import apply_transition

logger = structlog.get_logger(__name__)

DEFAULT_BATCH_SIZE = 500


@ordering.command(part_of="Order")
class ExpireStaleOrders:
    """Cancel orders still placed after the specified number of minutes."""

    older_than_minutes = Integer(min_value=1)  # Defaults to ORDER_EXPIRY_MINUTES
    as_of = DateTime()  # Optional: defaults to now
    batch_size = Integer(default=DEFAULT_BATCH_SIZE, min_value=1)  # Oldest first; the rest wait for the next sweep


@ordering.command_handler(part_of=Order)
class ExpireStaleOrdersHandler:
    @handle(ExpireStaleOrders)
    def expire_stale_orders(self, command: ExpireStaleOrders):
        as_of = command.as_of or datetime.now(UTC)
        threshold = command.older_than_minutes or settings.order_expiry_minutes()
        cutoff = as_of - timedelta(minutes=threshold)

        stale_ids = current_domain.repository_for(Order).placed_before(
            cutoff, limit=command.batch_size or DEFAULT_BATCH_SIZE
        )
        if not stale_ids:
            logger.debug("No stale orders found", cutoff=cutoff.isoformat())
            return 0

        expired_count = 0
        for order_id in stale_ids:
            try:
                apply_transition(order_id, OrderStatus.CANCELLED.value, Actor.SYSTEM.value)
                expired_count += 1
                logger.info("Expired stale order", order_id=order_id)
            except (ValidationError, InvalidOperationError) as exc:
                logger.warning(
                    "Failed to expire order",
                    order_id=order_id,
                    error=str(exc),
                )

        logger.info(
            "Order expiry sweep complete",
            expired_count=expired_count,
            threshold_minutes=threshold,
        )
        return expired_count
