"""Notification plan — who hears about each order status change, and what they read.

The plan is a table keyed by the new status. Cancellations by the system (the
expiry sweep) use their own wording so the customer learns the order expired
rather than being turned down.
"""

from dataclasses import dataclass

from ordering.notification.notification import RecipientType
from ordering.order.order import Actor, DeliveryType, OrderStatus


@dataclass(frozen=True)
class PlannedNotification:
    recipient_type: str
    recipient_id: str
    title: str
    body: str


@dataclass(frozen=True)
class _Rule:
    recipient: RecipientType
    title: str
    body: str
    only_with_courier: bool = False


_CUSTOMER = RecipientType.CUSTOMER
_COURIER = RecipientType.DELIVERY

_PLAN = {
    OrderStatus.ACCEPTED: (
        _Rule(_CUSTOMER, "Order Accepted", "Your order #{order_id} has been accepted and is being prepared"),
    ),
    OrderStatus.PREPARED: (
        _Rule(_CUSTOMER, "Order Ready", "Your order #{order_id} is ready"),
        _Rule(_COURIER, "Order Ready for Pickup", "Order #{order_id} is ready for pickup", only_with_courier=True),
    ),
    OrderStatus.PICKED_UP: (_Rule(_CUSTOMER, "Order Picked Up", "Your order #{order_id} is on the way"),),
    OrderStatus.DELIVERED: (
        _Rule(_CUSTOMER, "Order Delivered", "Your order #{order_id} has been delivered. Enjoy your meal!"),
    ),
    OrderStatus.CANCELLED: (_Rule(_CUSTOMER, "Order Cancelled", "Your order #{order_id} has been cancelled"),),
}

_SYSTEM_PLAN = {
    OrderStatus.CANCELLED: (
        _Rule(
            _CUSTOMER,
            "Order Expired",
            "Order #{order_id} was automatically cancelled due to no chef response",
        ),
    ),
}

NEW_ORDER_TITLE = "New Order"
NEW_ORDER_BODY = "You have a new order #{order_id}"


def _recipient_id(order, recipient: RecipientType):
    if recipient == RecipientType.CUSTOMER:
        return order.customer_id
    if recipient == RecipientType.DELIVERY:
        return order.courier_id
    return None


def plan_for_transition(order, new_status, changed_by) -> list[PlannedNotification]:
    """Notifications to create after ``order`` moved to ``new_status``.

    Courier rules apply only when a courier is assigned and the order is a
    delivery order.
    """
    status = OrderStatus(new_status)
    rules = None
    if changed_by == Actor.SYSTEM.value:
        rules = _SYSTEM_PLAN.get(status)
    if rules is None:
        rules = _PLAN.get(status, ())

    planned = []
    for rule in rules:
        if rule.only_with_courier and not (
            order.courier_id and order.delivery_type == DeliveryType.DELIVERY.value
        ):
            continue
        recipient_id = _recipient_id(order, rule.recipient)
        if not recipient_id:
            continue
        planned.append(
            PlannedNotification(
                recipient_type=rule.recipient.value,
                recipient_id=str(recipient_id),
                title=rule.title,
                body=rule.body.format(order_id=order.id),
            )
        )
    return planned


def plan_for_placement(order) -> list[PlannedNotification]:
    """One "New Order" notification per distinct chef on the order."""
    return [
        PlannedNotification(
            recipient_type=RecipientType.CHEF.value,
            recipient_id=chef_id,
            title=NEW_ORDER_TITLE,
            body=NEW_ORDER_BODY.format(order_id=order.id),
        )
        for chef_id in order.chef_ids()
    ]
