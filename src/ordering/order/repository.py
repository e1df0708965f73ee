"""Repository for the Order aggregate."""

from datetime import UTC

from protean.exceptions import ExpectedVersionError, InvalidOperationError

from ordering.domain import ordering
from ordering.order.order import Order, OrderStatus


def _utc(value):
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


@ordering.repository(part_of=Order)
class OrderRepository:
    def save_transition(self, order: Order, expected_status: str) -> None:
        """Persist a transitioned order only if nobody saved it since it was loaded.

        The aggregate's version is checked against the stored one; when another
        writer committed first the transition is rejected.
        """
        try:
            self.add(order)
        except ExpectedVersionError as exc:
            raise InvalidOperationError(
                f"Order {order.id} is no longer {expected_status}; it was changed by another request"
            ) from exc

    def placed_before(self, cutoff, limit: int | None = None) -> list[str]:
        """Ids of orders still in ``placed`` created strictly before ``cutoff``, oldest first."""
        stale = (
            self._dao.query.filter(status=OrderStatus.PLACED.value, created_at__lt=_utc(cutoff))
            .order_by("created_at")
            .limit(limit)
            .all()
            .items
        )
        return [str(order.id) for order in stale]
