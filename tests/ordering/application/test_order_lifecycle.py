"""End-to-end order lifecycle: placement through delivery with notification fan-out."""

from ordering.order.order import Order
from protean import current_domain


class TestDeliveryOrderLifecycle:
    def test_two_chef_order_from_placement_to_delivery(self, place_order, transition, notifications_for):
        order_id = place_order(delivery_type="delivery")

        order = current_domain.repository_for(Order).get(order_id)
        assert order.subtotal == 250.0
        assert order.delivery_fee == 30.0
        assert order.platform_fee == 10.0
        assert order.total == 290.0
        assert [(e.status, e.changed_by) for e in order.timeline()] == [("placed", "customer")]

        chef_notifications = notifications_for(order_id)
        assert sorted(n.recipient_id for n in chef_notifications) == ["chef-a", "chef-b"]
        assert all(n.sent is False for n in chef_notifications)

        transition(order_id, "accepted", "chef", courier_id="courier-001")
        transition(order_id, "prepared", "chef")
        transition(order_id, "picked_up", "delivery")
        transition(order_id, "delivered", "delivery")

        order = current_domain.repository_for(Order).get(order_id)
        assert order.status == "delivered"
        assert [(e.status, e.changed_by) for e in order.timeline()] == [
            ("placed", "customer"),
            ("accepted", "chef"),
            ("prepared", "chef"),
            ("picked_up", "delivery"),
            ("delivered", "delivery"),
        ]

        notifications = notifications_for(order_id)
        customer_titles = sorted(n.title for n in notifications if n.recipient_type == "customer")
        assert customer_titles == sorted(["Order Accepted", "Order Ready", "Order Picked Up", "Order Delivered"])
        courier = [n for n in notifications if n.recipient_type == "delivery"]
        assert [(n.recipient_id, n.title) for n in courier] == [("courier-001", "Order Ready for Pickup")]
        assert len(notifications) == 2 + 4 + 1

    def test_pickup_order_lifecycle(self, place_order, transition, notifications_for):
        order_id = place_order(delivery_type="pickup")

        for status in ("accepted", "prepared", "delivered"):
            transition(order_id, status, "chef")

        order = current_domain.repository_for(Order).get(order_id)
        assert order.total == 260.0
        assert [e.status for e in order.timeline()] == ["placed", "accepted", "prepared", "delivered"]
        notifications = notifications_for(order_id)
        assert not any(n.recipient_type == "delivery" for n in notifications)
        assert len([n for n in notifications if n.recipient_type == "customer"]) == 3

    def test_cancelled_by_customer(self, place_order, transition, notifications_for):
        order_id = place_order()

        transition(order_id, "cancelled", "customer")

        cancelled = [n for n in notifications_for(order_id) if n.recipient_type == "customer"]
        assert [n.title for n in cancelled] == ["Order Cancelled"]
