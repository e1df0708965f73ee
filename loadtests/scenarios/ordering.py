"""Ordering load test scenarios.

Stateful SequentialTaskSet journeys: a delivery order going all the way to
the customer, and a pickup order cancelled by the customer. Every step fans
out notifications, so both journeys also load the dispatcher.
"""

import random

from locust import HttpUser, SequentialTaskSet, between, task

from loadtests.data_generators import courier_id, customer_id, order_data, push_token
from loadtests.helpers.response import extract_error_detail
from loadtests.helpers.state import OrderState


class _OrderJourney(SequentialTaskSet):
    delivery_type = "delivery"

    def on_start(self):
        self.state = OrderState(customer_id=customer_id(), delivery_type=self.delivery_type)

    def _transition(self, new_status, changed_by, courier=None):
        payload = {"new_status": new_status, "changed_by": changed_by}
        if courier:
            payload["delivery_person_id"] = courier
        with self.client.put(
            f"/orders/{self.state.order_id}/status",
            json=payload,
            catch_response=True,
            name=f"PUT /orders/{{id}}/status [{new_status}]",
        ) as resp:
            if resp.status_code == 200:
                self.state.current_status = new_status
            else:
                resp.failure(f"{new_status} failed: {resp.status_code} — {extract_error_detail(resp)}")
                self.interrupt()

    @task
    def register_device(self):
        self.client.put(
            f"/push-registrations/customer/{self.state.customer_id}",
            json={"token": push_token()},
            name="PUT /push-registrations/{type}/{id}",
        )

    @task
    def place_order(self):
        with self.client.post(
            "/orders",
            json=order_data(self.state.customer_id, self.state.delivery_type),
            catch_response=True,
            name="POST /orders",
        ) as resp:
            if resp.status_code == 200:
                self.state.order_id = resp.json()["order_id"]
            else:
                resp.failure(f"Place order failed: {resp.status_code} — {extract_error_detail(resp)}")
                self.interrupt()


class DeliveryOrderJourney(_OrderJourney):
    """Register device -> Place -> Accept (with courier) -> Prepare -> Pick up -> Deliver."""

    @task
    def accept(self):
        self.state.courier_id = courier_id()
        self._transition("accepted", "chef", courier=self.state.courier_id)

    @task
    def prepare(self):
        self._transition("prepared", "chef")

    @task
    def pick_up(self):
        self._transition("picked_up", "delivery")

    @task
    def deliver(self):
        self._transition("delivered", "delivery")

    @task
    def view(self):
        self.client.get(f"/orders/{self.state.order_id}", name="GET /orders/{id}")

    @task
    def done(self):
        self.interrupt()


class CancelledPickupJourney(_OrderJourney):
    """Register device -> Place pickup order -> Customer cancels."""

    delivery_type = "pickup"

    @task
    def cancel(self):
        self._transition("cancelled", "customer")

    @task
    def done(self):
        self.interrupt()


class OrderingUser(HttpUser):
    wait_time = between(1, 3)
    tasks = {DeliveryOrderJourney: 3, CancelledPickupJourney: 1}


class MaintenanceUser(HttpUser):
    """Plays the external scheduler hitting the maintenance endpoints."""

    wait_time = between(20, 40)

    @task
    def expire_orders(self):
        self.client.post("/maintenance/expire-orders", name="POST /maintenance/expire-orders")

    @task
    def dispatch_pending(self):
        if random.random() < 0.5:
            self.client.post("/notifications/dispatch-pending", name="POST /notifications/dispatch-pending")
