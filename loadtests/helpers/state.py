"""Per-user state tracking for Locust load test scenarios.

Each Locust user instance maintains its own state — no cross-user sharing.
"""

from dataclasses import dataclass


@dataclass
class OrderState:
    """Tracks state for a single order lifecycle."""

    order_id: str | None = None
    customer_id: str | None = None
    courier_id: str | None = None
    delivery_type: str = "delivery"
    current_status: str = "placed"
