"""SendDirectNotification command + handler — one-off pushes outside the order flow."""

import structlog
from protean import handle
from protean.fields import Identifier, String, Text
from protean.utils.globals import current_domain

from ordering.domain import ordering
from ordering.notification.dispatch import deliver
from ordering.notification.notification import Notification, RecipientType

logger = structlog.get_logger(__name__)


@ordering.command(part_of="Notification")
class SendDirectNotification:
    recipient_type = String(required=True, choices=RecipientType)
    recipient_id = Identifier(required=True)
    order_id = Identifier()
    title = String(required=True, max_length=255)
    body = Text(required=True)


@ordering.command_handler(part_of=Notification)
class SendDirectNotificationHandler:
    @handle(SendDirectNotification)
    def send_direct_notification(self, command: SendDirectNotification):
        notification = Notification.create(
            recipient_type=command.recipient_type,
            recipient_id=command.recipient_id,
            title=command.title,
            body=command.body,
            order_id=command.order_id,
        )
        outcome = deliver(notification)
        current_domain.repository_for(Notification).add(notification)

        logger.info(
            "Direct notification processed",
            notification_id=str(notification.id),
            recipient_type=command.recipient_type,
            outcome=outcome.value,
        )
        return {"notification_id": str(notification.id), "outcome": outcome.value}
