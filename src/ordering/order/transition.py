"""Status transitions — command and handler.

Every status change, whoever asks for it, goes through ``apply_transition``:
the order validates the move against its transition table, the repository
commits it only if nobody else moved the order first, and the notification
plan decides who hears about it. ``TransitionOrder`` runs it for a single
order; the expiry sweep runs it for each stale order inside its own unit of
work.
"""

import structlog
from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from ordering.domain import ordering
from ordering.notification.notification import Notification
from ordering.order.notification_plan import plan_for_transition
from ordering.order.order import Order

logger = structlog.get_logger(__name__)


@ordering.command(part_of="Order")
class TransitionOrder:
    order_id = Identifier(required=True)
    new_status = String(required=True, max_length=50)
    changed_by = String(required=True, max_length=50)
    courier_id = Identifier()


def apply_transition(order_id, new_status, changed_by, courier_id=None) -> Order:
    """Move one order to ``new_status`` and record who needs to hear about it.

    Must run inside a unit of work. Raises ValidationError for moves the
    transition table refuses and InvalidOperationError when another writer
    saved the order first.
    """
    repo = current_domain.repository_for(Order)
    order = repo.get(order_id)

    expected_status = order.status
    order.transition_to(new_status, changed_by, courier_id=courier_id)
    repo.save_transition(order, expected_status)

    planned = plan_for_transition(order, order.status, changed_by)
    notifications = current_domain.repository_for(Notification)
    for entry in planned:
        notifications.add(
            Notification.create(
                recipient_type=entry.recipient_type,
                recipient_id=entry.recipient_id,
                title=entry.title,
                body=entry.body,
                order_id=str(order.id),
            )
        )

    logger.info(
        "Order status changed",
        order_id=str(order.id),
        previous_status=expected_status,
        new_status=order.status,
        changed_by=changed_by,
        notification_count=len(planned),
    )
    return order


@ordering.command_handler(part_of=Order)
class TransitionOrderHandler:
    @handle(TransitionOrder)
    def transition_order(self, command: TransitionOrder):
        order = apply_transition(
            command.order_id,
            command.new_status,
            command.changed_by,
            courier_id=command.courier_id,
        )
        return str(order.id)
