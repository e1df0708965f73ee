"""Domain events for the Notification aggregate."""

from protean.fields import DateTime, Identifier, Integer, String

from ordering.domain import ordering


@ordering.event(part_of="Notification")
class NotificationCreated:
    """A notification was recorded and awaits push delivery."""

    __version__ = 1

    notification_id: Identifier(required=True)
    recipient_type: String(required=True)
    recipient_id: Identifier(required=True)
    order_id: Identifier()
    title: String(required=True)
    created_at: DateTime(required=True)


@ordering.event(part_of="Notification")
class NotificationSent:
    """The push gateway confirmed delivery of a notification."""

    __version__ = 1

    notification_id: Identifier(required=True)
    recipient_type: String(required=True)
    recipient_id: Identifier(required=True)
    sent_at: DateTime(required=True)


@ordering.event(part_of="Notification")
class NotificationDeliveryFailed:
    """A push attempt failed; the notification stays unsent."""

    __version__ = 1

    notification_id: Identifier(required=True)
    recipient_type: String(required=True)
    recipient_id: Identifier(required=True)
    reason: String(required=True, max_length=500)
    attempt_count: Integer(required=True)
    failed_at: DateTime(required=True)
