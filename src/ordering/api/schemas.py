"""Pydantic request/response schemas for the Kitchenline API.

These are external contracts (anti-corruption layer) — separate from
internal Protean commands.
"""

from datetime import datetime

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Order Request Schemas
# ---------------------------------------------------------------------------
class OrderLineRequest(BaseModel):
    menu_item_id: str
    quantity: int


class PlaceOrderRequest(BaseModel):
    customer_id: str
    city_id: str
    delivery_type: str
    items: list[OrderLineRequest] = Field(min_length=1)
    special_instructions: str | None = None
    delivery_instructions: str | None = None

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "customer_id": "cust-001",
                    "city_id": "city-001",
                    "delivery_type": "delivery",
                    "items": [
                        {"menu_item_id": "menu-001", "quantity": 2},
                        {"menu_item_id": "menu-002", "quantity": 1},
                    ],
                    "special_instructions": "No onions",
                    "delivery_instructions": "Ring twice",
                }
            ]
        }
    }


class UpdateOrderStatusRequest(BaseModel):
    new_status: str
    changed_by: str
    delivery_person_id: str | None = None


# ---------------------------------------------------------------------------
# Order Response Schemas
# ---------------------------------------------------------------------------
class PlaceOrderResponse(BaseModel):
    order_id: str
    total_amount: float


class OrderLineSchema(BaseModel):
    menu_item_id: str
    chef_id: str
    quantity: int
    unit_price: float
    chef_amount: float


class StatusHistorySchema(BaseModel):
    status: str
    changed_by: str
    changed_at: datetime


class OrderSchema(BaseModel):
    id: str
    customer_id: str
    city_id: str
    delivery_type: str
    status: str
    subtotal: float
    delivery_fee: float
    platform_fee: float
    total: float
    special_instructions: str | None = None
    delivery_instructions: str | None = None
    courier_id: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    items: list[OrderLineSchema] = []
    status_history: list[StatusHistorySchema] = []


class OrderResponse(BaseModel):
    order: OrderSchema


# ---------------------------------------------------------------------------
# Notification Schemas
# ---------------------------------------------------------------------------
class SendNotificationRequest(BaseModel):
    recipient_type: str
    recipient_id: str
    order_id: str | None = None
    title: str
    message: str


class DispatchPendingRequest(BaseModel):
    limit: int = Field(default=100, ge=1)


class DispatchResponse(BaseModel):
    success: bool
    outcome: str


class SendNotificationResponse(BaseModel):
    success: bool
    notification_id: str
    outcome: str


class DispatchPendingResponse(BaseModel):
    dispatched_count: int


# ---------------------------------------------------------------------------
# Push Registration Schemas
# ---------------------------------------------------------------------------
class RegisterPushTokenRequest(BaseModel):
    token: str | None = None


# ---------------------------------------------------------------------------
# Maintenance Schemas
# ---------------------------------------------------------------------------
class ExpireOrdersResponse(BaseModel):
    expired_count: int


class StatusResponse(BaseModel):
    status: str = "ok"
