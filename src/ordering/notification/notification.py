"""Notification aggregate (CQRS) — one push message to one recipient.

Notifications are created by order placement and status transitions, then
delivered separately by the dispatcher. ``sent`` flips to true only when the
push gateway confirms delivery and never flips back; failed attempts leave it
false and record why.
"""

from datetime import UTC, datetime
from enum import Enum

from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Identifier, Integer, String, Text

from ordering.domain import ordering
from ordering.notification.events import (
    NotificationCreated,
    NotificationDeliveryFailed,
    NotificationSent,
)


class RecipientType(Enum):
    CUSTOMER = "customer"
    CHEF = "chef"
    DELIVERY = "delivery"


@ordering.aggregate
class Notification:
    """A message addressed to a customer, chef or courier.

    ``order_id`` is empty for messages that are not about an order.
    """

    # Recipient
    recipient_type: String(choices=RecipientType, required=True)
    recipient_id: Identifier(required=True)

    # Content
    order_id: Identifier()
    title: String(required=True, max_length=255)
    body: Text(required=True)

    # Delivery tracking
    sent: Boolean(default=False)
    sent_at: DateTime()
    attempt_count: Integer(default=0)
    failure_reason: String(max_length=500)

    # Timestamps
    created_at: DateTime()
    updated_at: DateTime()

    @classmethod
    def create(cls, recipient_type, recipient_id, title, body, order_id=None):
        """Create a new, unsent notification."""
        now = datetime.now(UTC)

        notification = cls(
            recipient_type=recipient_type,
            recipient_id=recipient_id,
            order_id=order_id,
            title=title,
            body=body,
            sent=False,
            attempt_count=0,
            created_at=now,
            updated_at=now,
        )

        notification.raise_(
            NotificationCreated(
                notification_id=str(notification.id),
                recipient_type=recipient_type,
                recipient_id=str(recipient_id),
                order_id=str(order_id) if order_id else None,
                title=title,
                created_at=now,
            )
        )

        return notification

    def push_data(self) -> dict:
        """Data payload delivered alongside the push title and body."""
        return {
            "order_id": str(self.order_id) if self.order_id else "",
            "recipient_type": self.recipient_type,
        }

    def mark_sent(self, sent_at=None):
        """Record a confirmed delivery."""
        if self.sent:
            raise ValidationError({"sent": ["Notification has already been sent"]})

        now = sent_at or datetime.now(UTC)
        self.sent = True
        self.sent_at = now
        self.attempt_count = (self.attempt_count or 0) + 1
        self.failure_reason = None
        self.updated_at = now

        self.raise_(
            NotificationSent(
                notification_id=str(self.id),
                recipient_type=self.recipient_type,
                recipient_id=str(self.recipient_id),
                sent_at=now,
            )
        )

    def mark_failed(self, reason):
        """Record a failed delivery attempt. The notification stays unsent."""
        if self.sent:
            raise ValidationError({"sent": ["Notification has already been sent"]})

        now = datetime.now(UTC)
        self.attempt_count = (self.attempt_count or 0) + 1
        self.failure_reason = (reason or "Unknown delivery error")[:500]
        self.updated_at = now

        self.raise_(
            NotificationDeliveryFailed(
                notification_id=str(self.id),
                recipient_type=self.recipient_type,
                recipient_id=str(self.recipient_id),
                reason=self.failure_reason,
                attempt_count=self.attempt_count,
                failed_at=now,
            )
        )
