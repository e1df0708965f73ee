"""Order aggregate (CQRS) — the core of the ordering domain.

An order is placed by one customer and may be fulfilled by several chefs; each
line item remembers which chef owes it and the price at order time. After
placement the order is only changed by status transitions, each of which is
appended to the order's status history.

State Machine:
    placed → accepted → prepared → picked_up → delivered    (delivery orders)
    placed → accepted → prepared → delivered                (pickup orders)
    {placed, accepted, prepared, picked_up} → cancelled
"""

import json
from datetime import UTC, datetime
from enum import Enum

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, HasMany, Identifier, Integer, String, Text

from ordering.domain import ordering
from ordering.order.events import OrderPlaced, OrderStatusChanged


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------
class OrderStatus(Enum):
    PLACED = "placed"
    ACCEPTED = "accepted"
    PREPARED = "prepared"
    PICKED_UP = "picked_up"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


class DeliveryType(Enum):
    PICKUP = "pickup"
    DELIVERY = "delivery"


class Actor(Enum):
    CUSTOMER = "customer"
    CHEF = "chef"
    DELIVERY = "delivery"
    SYSTEM = "system"


# State machine transition maps, one per delivery type
_DELIVERY_TRANSITIONS = {
    OrderStatus.PLACED: {OrderStatus.ACCEPTED, OrderStatus.CANCELLED},
    OrderStatus.ACCEPTED: {OrderStatus.PREPARED, OrderStatus.CANCELLED},
    OrderStatus.PREPARED: {OrderStatus.PICKED_UP, OrderStatus.CANCELLED},
    OrderStatus.PICKED_UP: {OrderStatus.DELIVERED, OrderStatus.CANCELLED},
    OrderStatus.DELIVERED: set(),  # Terminal
    OrderStatus.CANCELLED: set(),  # Terminal
}

_PICKUP_TRANSITIONS = {
    OrderStatus.PLACED: {OrderStatus.ACCEPTED, OrderStatus.CANCELLED},
    OrderStatus.ACCEPTED: {OrderStatus.PREPARED, OrderStatus.CANCELLED},
    OrderStatus.PREPARED: {OrderStatus.DELIVERED, OrderStatus.CANCELLED},
    OrderStatus.DELIVERED: set(),  # Terminal
    OrderStatus.CANCELLED: set(),  # Terminal
}

_VALID_TRANSITIONS = {
    DeliveryType.DELIVERY: _DELIVERY_TRANSITIONS,
    DeliveryType.PICKUP: _PICKUP_TRANSITIONS,
}


def allowed_transitions(delivery_type, status) -> set:
    """Statuses reachable in one step from ``status`` for the given delivery type."""
    return _VALID_TRANSITIONS[DeliveryType(delivery_type)].get(OrderStatus(status), set())


def _coerce(enum_cls, value, field_name):
    try:
        return enum_cls(value)
    except ValueError:
        allowed = ", ".join(member.value for member in enum_cls)
        raise ValidationError({field_name: [f"'{value}' is not one of: {allowed}"]}) from None


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------
@ordering.entity(part_of="Order")
class OrderLineItem:
    """One dish on the order and the amount owed to the chef who cooks it.

    ``unit_price`` is copied from the menu when the order is placed and never
    changes afterwards.
    """

    menu_item_id = Identifier(required=True)
    chef_id = Identifier(required=True)
    quantity = Integer(required=True, min_value=1)
    unit_price = Float(required=True, min_value=0.0)
    chef_amount = Float(required=True, min_value=0.0)


@ordering.entity(part_of="Order")
class StatusHistoryEntry:
    """Audit record of one status change. Entries are only ever appended."""

    sequence = Integer(required=True, min_value=1)
    status = String(required=True, choices=OrderStatus)
    changed_by = String(required=True, choices=Actor)
    changed_at = DateTime(required=True)


# ---------------------------------------------------------------------------
# Aggregate Root
# ---------------------------------------------------------------------------
@ordering.aggregate
class Order:
    customer_id = Identifier(required=True)
    city_id = Identifier(required=True)
    delivery_type = String(required=True, choices=DeliveryType)
    status = String(
        choices=OrderStatus,
        default=OrderStatus.PLACED.value,
    )
    items = HasMany(OrderLineItem)
    status_history = HasMany(StatusHistoryEntry)
    subtotal = Float(default=0.0)
    delivery_fee = Float(default=0.0)
    platform_fee = Float(default=0.0)
    total = Float(default=0.0)
    special_instructions = Text()
    delivery_instructions = Text()
    courier_id = Identifier()
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def total_is_the_sum_of_subtotal_and_fees(self):
        expected = (self.subtotal or 0.0) + (self.delivery_fee or 0.0) + (self.platform_fee or 0.0)
        if abs((self.total or 0.0) - expected) > 0.005:
            raise ValidationError({"total": ["Total must equal subtotal plus delivery and platform fees"]})

    @invariant.post
    def delivery_fee_is_charged_only_for_delivery(self):
        if self.delivery_type == DeliveryType.DELIVERY.value and not (self.delivery_fee or 0.0) > 0:
            raise ValidationError({"delivery_fee": ["Delivery orders carry a delivery fee"]})
        if self.delivery_type == DeliveryType.PICKUP.value and self.delivery_fee:
            raise ValidationError({"delivery_fee": ["Pickup orders carry no delivery fee"]})

    # -------------------------------------------------------------------
    # Factory method
    # -------------------------------------------------------------------
    @classmethod
    def place(
        cls,
        customer_id,
        city_id,
        delivery_type,
        lines,
        delivery_fee,
        platform_fee,
        special_instructions=None,
        delivery_instructions=None,
    ):
        """Place a new order from priced lines.

        Args:
            customer_id: The customer placing the order.
            city_id: City or region the order is served in.
            delivery_type: ``pickup`` or ``delivery``.
            lines: List of dicts with menu_item_id, chef_id, quantity and
                unit_price, already resolved against the menu.
            delivery_fee: Fee charged when the order is delivered.
            platform_fee: Fee charged on every order.
        """
        kind = _coerce(DeliveryType, delivery_type, "delivery_type")
        if not lines:
            raise ValidationError({"items": ["An order needs at least one orderable item"]})

        now = datetime.now(UTC)
        subtotal = round(sum(line["unit_price"] * line["quantity"] for line in lines), 2)
        charged_delivery_fee = float(delivery_fee) if kind == DeliveryType.DELIVERY else 0.0
        total = round(subtotal + charged_delivery_fee + float(platform_fee), 2)

        order = cls(
            customer_id=customer_id,
            city_id=city_id,
            delivery_type=kind.value,
            status=OrderStatus.PLACED.value,
            subtotal=subtotal,
            delivery_fee=charged_delivery_fee,
            platform_fee=float(platform_fee),
            total=total,
            special_instructions=special_instructions,
            delivery_instructions=delivery_instructions,
            created_at=now,
            updated_at=now,
        )
        for line in lines:
            order.add_items(
                OrderLineItem(
                    menu_item_id=line["menu_item_id"],
                    chef_id=line["chef_id"],
                    quantity=line["quantity"],
                    unit_price=line["unit_price"],
                    chef_amount=round(line["unit_price"] * line["quantity"], 2),
                )
            )
        order._append_history(OrderStatus.PLACED, Actor.CUSTOMER, now)

        order.raise_(
            OrderPlaced(
                order_id=str(order.id),
                customer_id=str(customer_id),
                city_id=str(city_id),
                delivery_type=kind.value,
                chef_ids=json.dumps(order.chef_ids()),
                item_count=len(lines),
                subtotal=subtotal,
                delivery_fee=charged_delivery_fee,
                platform_fee=float(platform_fee),
                total=total,
                placed_at=now,
            )
        )
        return order

    # -------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------
    def chef_ids(self) -> list[str]:
        """Distinct chef ids across the line items, in line order."""
        return list(dict.fromkeys(str(item.chef_id) for item in self.items or []))

    def timeline(self) -> list:
        """Status history in the order the transitions were committed."""
        return sorted(self.status_history or [], key=lambda entry: entry.sequence)

    # -------------------------------------------------------------------
    # Status transitions
    # -------------------------------------------------------------------
    def _append_history(self, status: OrderStatus, actor: Actor, changed_at) -> None:
        self.add_status_history(
            StatusHistoryEntry(
                sequence=len(self.status_history or []) + 1,
                status=status.value,
                changed_by=actor.value,
                changed_at=changed_at,
            )
        )

    def transition_to(self, new_status, changed_by, courier_id=None) -> None:
        """Move the order to ``new_status`` on behalf of ``changed_by``.

        Raises ValidationError when the status or actor is unknown, when the
        target is not reachable from the current status for this delivery type,
        or when a courier is assigned to a pickup order.
        """
        target = _coerce(OrderStatus, new_status, "status")
        actor = _coerce(Actor, changed_by, "changed_by")
        current = OrderStatus(self.status)

        if target not in allowed_transitions(self.delivery_type, current):
            raise ValidationError({"status": [f"Cannot transition from {current.value} to {target.value}"]})
        if courier_id and self.delivery_type != DeliveryType.DELIVERY.value:
            raise ValidationError({"courier_id": ["Couriers can only be assigned to delivery orders"]})

        now = datetime.now(UTC)
        if courier_id:
            self.courier_id = courier_id
        self.status = target.value
        self.updated_at = now
        self._append_history(target, actor, now)

        self.raise_(
            OrderStatusChanged(
                order_id=str(self.id),
                customer_id=str(self.customer_id),
                previous_status=current.value,
                new_status=target.value,
                changed_by=actor.value,
                courier_id=str(self.courier_id) if self.courier_id else None,
                changed_at=now,
            )
        )
