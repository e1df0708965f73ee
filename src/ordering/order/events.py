"""Domain events for the Order aggregate.

Events are raised inside the same unit of work that persists the order and are
published after commit, for consumers outside this service (kitchen displays,
analytics) to react to.
"""

from protean.fields import DateTime, Float, Identifier, Integer, String, Text

from ordering.domain import ordering


@ordering.event(part_of="Order")
class OrderPlaced:
    """A customer placed an order with one or more chefs."""

    __version__ = 1

    order_id = Identifier(required=True)
    customer_id = Identifier(required=True)
    city_id = Identifier(required=True)
    delivery_type = String(required=True)
    chef_ids = Text(required=True)  # JSON list of distinct chef ids
    item_count = Integer(required=True)
    subtotal = Float(required=True)
    delivery_fee = Float(required=True)
    platform_fee = Float(required=True)
    total = Float(required=True)
    placed_at = DateTime(required=True)


@ordering.event(part_of="Order")
class OrderStatusChanged:
    """An order moved from one status to another."""

    __version__ = 1

    order_id = Identifier(required=True)
    customer_id = Identifier(required=True)
    previous_status = String(required=True)
    new_status = String(required=True)
    changed_by = String(required=True)
    courier_id = Identifier()
    changed_at = DateTime(required=True)
