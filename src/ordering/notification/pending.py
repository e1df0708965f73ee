"""DispatchPendingNotifications command + handler — delivers notifications never attempted.

Picks up notifications that were created while automatic dispatch was off,
or whose recipient had no push token at the time. Invoked by the sweeper or
through the maintenance API endpoint.
"""

import structlog
from protean import handle
from protean.fields import Integer
from protean.utils.globals import current_domain

from ordering.domain import ordering
from ordering.notification.dispatch import deliver_and_save
from ordering.notification.notification import Notification

logger = structlog.get_logger(__name__)

DEFAULT_LIMIT = 100


@ordering.command(part_of="Notification")
class DispatchPendingNotifications:
    limit = Integer(default=DEFAULT_LIMIT, min_value=1)


@ordering.command_handler(part_of=Notification)
class DispatchPendingNotificationsHandler:
    @handle(DispatchPendingNotifications)
    def dispatch_pending(self, command: DispatchPendingNotifications):
        # Failed attempts are never retried, so only untouched rows qualify
        pending = (
            current_domain.repository_for(Notification)
            ._dao.query.filter(sent=False, attempt_count=0)
            .order_by("created_at")
            .limit(command.limit or DEFAULT_LIMIT)
            .all()
            .items
        )

        outcomes: dict[str, int] = {}
        for notification in pending:
            outcome = deliver_and_save(notification)
            outcomes[outcome.value] = outcomes.get(outcome.value, 0) + 1

        logger.info(
            "Pending notifications processed",
            processed=len(pending),
            **outcomes,
        )
        return len(pending)
