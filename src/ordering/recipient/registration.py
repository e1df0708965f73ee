"""Push registrations — where to reach each customer, chef and courier.

A registration maps one recipient (type and id) to the push token of their
current device. Registering again replaces the token; registering an empty
token removes the registration.
"""

from datetime import UTC, datetime

import structlog
from protean import handle
from protean.fields import DateTime, Identifier, String
from protean.utils.globals import current_domain

from ordering.domain import ordering
from ordering.notification.notification import RecipientType

logger = structlog.get_logger(__name__)


@ordering.aggregate
class PushRegistration:
    recipient_type: String(choices=RecipientType, required=True)
    recipient_id: Identifier(required=True)
    token: String(required=True, max_length=4096)
    updated_at: DateTime()


@ordering.repository(part_of=PushRegistration)
class PushRegistrationRepository:
    def find_for(self, recipient_type: str, recipient_id: str) -> PushRegistration | None:
        matches = (
            self._dao.query.filter(recipient_type=recipient_type, recipient_id=str(recipient_id)).all().items
        )
        return matches[0] if matches else None

    def token_for(self, recipient_type: str, recipient_id: str) -> str | None:
        """Push token of the recipient, or None when they never registered one."""
        registration = self.find_for(recipient_type, recipient_id)
        return registration.token if registration and registration.token else None


@ordering.command(part_of="PushRegistration")
class RegisterPushToken:
    recipient_type: String(choices=RecipientType, required=True)
    recipient_id: Identifier(required=True)
    token: String(max_length=4096)


@ordering.command_handler(part_of=PushRegistration)
class RegisterPushTokenHandler:
    @handle(RegisterPushToken)
    def register_push_token(self, command: RegisterPushToken):
        repo = current_domain.repository_for(PushRegistration)
        registration = repo.find_for(command.recipient_type, command.recipient_id)
        now = datetime.now(UTC)

        if not command.token:
            if registration is not None:
                repo._dao.delete(registration)
                logger.info(
                    "Push registration removed",
                    recipient_type=command.recipient_type,
                    recipient_id=str(command.recipient_id),
                )
            return None

        if registration is None:
            registration = PushRegistration(
                recipient_type=command.recipient_type,
                recipient_id=command.recipient_id,
                token=command.token,
                updated_at=now,
            )
        else:
            registration.token = command.token
            registration.updated_at = now
        repo.add(registration)

        logger.info(
            "Push token registered",
            recipient_type=command.recipient_type,
            recipient_id=str(command.recipient_id),
        )
        return str(registration.id)
