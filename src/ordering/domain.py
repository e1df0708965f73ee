"""Ordering bounded context — order placement, status lifecycle and notifications.

Handles order creation with per-chef price allocation, the status transition
engine that fans out notifications to customers, chefs and couriers, push
dispatch of those notifications, and the sweep that expires unaccepted orders.
"""

from protean.domain import Domain

from ordering.utils.logging import configure_logging

configure_logging()

ordering = Domain(name="ordering")
