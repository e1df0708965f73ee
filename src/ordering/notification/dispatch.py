"""Notification dispatch — delivers stored notifications through the push channel.

Notifications are delivered outside the Unit of Work that created them, either
by ``NotificationDispatcher`` reacting to ``NotificationCreated`` or on demand
through ``DispatchNotification``. A delivery problem is recorded on the
notification and never raised to the caller.
"""

from enum import Enum

import structlog
from protean import handle
from protean.fields import Identifier
from protean.utils.globals import current_domain

from ordering import settings
from ordering.channel import get_push_channel
from ordering.domain import ordering
from ordering.notification.events import NotificationCreated
from ordering.notification.notification import Notification
from ordering.recipient.registration import PushRegistration

logger = structlog.get_logger(__name__)


class DispatchOutcome(Enum):
    SENT = "sent"
    SKIPPED = "skipped"  # Recipient has no push token
    FAILED = "failed"
    ALREADY_SENT = "already_sent"


def deliver(notification: Notification) -> DispatchOutcome:
    """Push ``notification`` to its recipient and record the result on it.

    The caller persists the notification afterwards. Skipped and already-sent
    notifications are left untouched.
    """
    if notification.sent:
        return DispatchOutcome.ALREADY_SENT

    token = current_domain.repository_for(PushRegistration).token_for(
        notification.recipient_type, notification.recipient_id
    )
    if not token:
        logger.info(
            "No push token registered, skipping notification",
            notification_id=str(notification.id),
            recipient_type=notification.recipient_type,
            recipient_id=str(notification.recipient_id),
        )
        return DispatchOutcome.SKIPPED

    try:
        result = get_push_channel().send(
            device_token=token,
            title=notification.title,
            body=notification.body,
            data=notification.push_data(),
        )
    except Exception as exc:
        logger.error(
            "Push delivery raised",
            notification_id=str(notification.id),
            error=str(exc),
        )
        notification.mark_failed(str(exc))
        return DispatchOutcome.FAILED

    if result.get("status") == "sent":
        notification.mark_sent()
        logger.info(
            "Notification sent",
            notification_id=str(notification.id),
            recipient_type=notification.recipient_type,
            message_id=result.get("message_id"),
        )
        return DispatchOutcome.SENT

    notification.mark_failed(result.get("error", "Unknown dispatch error"))
    logger.warning(
        "Notification delivery failed",
        notification_id=str(notification.id),
        error=notification.failure_reason,
    )
    return DispatchOutcome.FAILED


def deliver_and_save(notification: Notification) -> DispatchOutcome:
    outcome = deliver(notification)
    if outcome in (DispatchOutcome.SENT, DispatchOutcome.FAILED):
        current_domain.repository_for(Notification).add(notification)
    return outcome


@ordering.command(part_of="Notification")
class DispatchNotification:
    notification_id = Identifier(required=True)


@ordering.command_handler(part_of=Notification)
class DispatchNotificationHandler:
    @handle(DispatchNotification)
    def dispatch_notification(self, command: DispatchNotification):
        notification = current_domain.repository_for(Notification).get(command.notification_id)
        return deliver_and_save(notification).value


@ordering.event_handler(part_of=Notification)
class NotificationDispatcher:
    """Delivers notifications as soon as they are created."""

    @handle(NotificationCreated)
    def on_notification_created(self, event: NotificationCreated) -> None:
        if not settings.auto_dispatch_notifications():
            return

        try:
            notification = current_domain.repository_for(Notification).get(event.notification_id)

            # Notifications sent or attempted by their creator are left alone
            if notification.sent or (notification.attempt_count or 0) > 0:
                return

            deliver_and_save(notification)
        except Exception as exc:
            logger.error(
                "Automatic notification dispatch failed",
                notification_id=str(event.notification_id),
                error=str(exc),
            )
