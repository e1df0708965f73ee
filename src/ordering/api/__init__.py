"""Kitchenline HTTP API package."""

from ordering.api.errors import register_error_handlers
from ordering.api.routes import (
    maintenance_router,
    notification_router,
    order_router,
    push_registration_router,
)

__all__ = [
    "order_router",
    "notification_router",
    "push_registration_router",
    "maintenance_router",
    "register_error_handlers",
]
