"""Tests for Order state machine — valid transitions and invalid transition guards."""

import pytest
from ordering.order.order import Order, OrderStatus, allowed_transitions
from protean.exceptions import ValidationError

_DELIVERY_PATH = ["accepted", "prepared", "picked_up", "delivered"]
_PICKUP_PATH = ["accepted", "prepared", "delivered"]


def _make_order(delivery_type="delivery"):
    return Order.place(
        customer_id="cust-001",
        city_id="city-001",
        delivery_type=delivery_type,
        lines=[{"menu_item_id": "menu-1", "chef_id": "chef-a", "quantity": 1, "unit_price": 50.0}],
        delivery_fee=30.0,
        platform_fee=10.0,
    )


def _order_at_state(target_status, delivery_type="delivery"):
    """Create an order and advance it to the desired state."""
    order = _make_order(delivery_type)
    order._events.clear()
    if target_status == "placed":
        return order

    if target_status == "cancelled":
        order.transition_to("cancelled", "customer")
        order._events.clear()
        return order

    path = _DELIVERY_PATH if delivery_type == "delivery" else _PICKUP_PATH
    for status in path:
        order.transition_to(status, "chef")
        order._events.clear()
        if status == target_status:
            return order
    raise AssertionError(f"{target_status} is not on the {delivery_type} path")


# (delivery_type, from, to) that must succeed
_VALID = [
    ("delivery", "placed", "accepted"),
    ("delivery", "placed", "cancelled"),
    ("delivery", "accepted", "prepared"),
    ("delivery", "accepted", "cancelled"),
    ("delivery", "prepared", "picked_up"),
    ("delivery", "prepared", "cancelled"),
    ("delivery", "picked_up", "delivered"),
    ("delivery", "picked_up", "cancelled"),
    ("pickup", "placed", "accepted"),
    ("pickup", "placed", "cancelled"),
    ("pickup", "accepted", "prepared"),
    ("pickup", "accepted", "cancelled"),
    ("pickup", "prepared", "delivered"),
    ("pickup", "prepared", "cancelled"),
]

# (delivery_type, from, to) that must be refused
_INVALID = [
    ("delivery", "placed", "prepared"),
    ("delivery", "placed", "delivered"),
    ("delivery", "accepted", "placed"),
    ("delivery", "accepted", "picked_up"),
    ("delivery", "prepared", "delivered"),
    ("delivery", "picked_up", "accepted"),
    ("delivery", "delivered", "cancelled"),
    ("delivery", "delivered", "accepted"),
    ("delivery", "cancelled", "accepted"),
    ("delivery", "cancelled", "cancelled"),
    ("pickup", "prepared", "picked_up"),
    ("pickup", "placed", "picked_up"),
    ("pickup", "delivered", "cancelled"),
]


class TestValidTransitions:
    @pytest.mark.parametrize("delivery_type,from_status,to_status", _VALID)
    def test_transition_applies(self, delivery_type, from_status, to_status):
        order = _order_at_state(from_status, delivery_type)
        order.transition_to(to_status, "chef")
        assert order.status == to_status
        assert order.timeline()[-1].status == to_status


class TestInvalidTransitions:
    @pytest.mark.parametrize("delivery_type,from_status,to_status", _INVALID)
    def test_transition_refused_without_change(self, delivery_type, from_status, to_status):
        order = _order_at_state(from_status, delivery_type)
        history_before = [entry.status for entry in order.timeline()]

        with pytest.raises(ValidationError) as exc:
            order.transition_to(to_status, "chef")

        assert "status" in exc.value.messages
        assert order.status == from_status
        assert [entry.status for entry in order.timeline()] == history_before
        assert order._events == []


class TestAllowedTransitions:
    def test_terminal_states_have_no_exits(self):
        for delivery_type in ("delivery", "pickup"):
            assert allowed_transitions(delivery_type, OrderStatus.DELIVERED) == set()
            assert allowed_transitions(delivery_type, OrderStatus.CANCELLED) == set()

    def test_pickup_skips_picked_up(self):
        assert allowed_transitions("pickup", "prepared") == {OrderStatus.DELIVERED, OrderStatus.CANCELLED}
        assert allowed_transitions("delivery", "prepared") == {OrderStatus.PICKED_UP, OrderStatus.CANCELLED}

    def test_full_delivery_path_records_every_step(self):
        order = _order_at_state("delivered")
        assert [entry.status for entry in order.timeline()] == ["placed", *_DELIVERY_PATH]
        assert [entry.sequence for entry in order.timeline()] == [1, 2, 3, 4, 5]
