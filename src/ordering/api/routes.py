"""FastAPI routes for Kitchenline — orders, notifications and maintenance."""

import json

from fastapi import APIRouter
from protean.utils.globals import current_domain

from ordering.api.schemas import (
    DispatchPendingRequest,
    DispatchPendingResponse,
    DispatchResponse,
    ExpireOrdersResponse,
    OrderLineSchema,
    OrderResponse,
    OrderSchema,
    PlaceOrderRequest,
    PlaceOrderResponse,
    RegisterPushTokenRequest,
    SendNotificationRequest,
    SendNotificationResponse,
    StatusHistorySchema,
    StatusResponse,
    UpdateOrderStatusRequest,
)
from ordering.notification.dispatch import DispatchNotification, DispatchOutcome
from ordering.notification.direct import SendDirectNotification
from ordering.notification.pending import DispatchPendingNotifications
from ordering.order.expiry import ExpireStaleOrders
from ordering.order.order import Order
from ordering.order.placement import PlaceOrder
from ordering.order.transition import TransitionOrder
from ordering.recipient.registration import RegisterPushToken

_DELIVERED_OUTCOMES = {DispatchOutcome.SENT.value, DispatchOutcome.ALREADY_SENT.value}


def _optional_str(value):
    return str(value) if value else None


def _order_schema(order: Order) -> OrderSchema:
    return OrderSchema(
        id=str(order.id),
        customer_id=str(order.customer_id),
        city_id=str(order.city_id),
        delivery_type=order.delivery_type,
        status=order.status,
        subtotal=order.subtotal,
        delivery_fee=order.delivery_fee,
        platform_fee=order.platform_fee,
        total=order.total,
        special_instructions=order.special_instructions,
        delivery_instructions=order.delivery_instructions,
        courier_id=_optional_str(order.courier_id),
        created_at=order.created_at,
        updated_at=order.updated_at,
        items=[
            OrderLineSchema(
                menu_item_id=str(item.menu_item_id),
                chef_id=str(item.chef_id),
                quantity=item.quantity,
                unit_price=item.unit_price,
                chef_amount=item.chef_amount,
            )
            for item in order.items
        ],
        status_history=[
            StatusHistorySchema(
                status=entry.status,
                changed_by=entry.changed_by,
                changed_at=entry.changed_at,
            )
            for entry in order.timeline()
        ],
    )


# ---------------------------------------------------------------------------
# Order Router
# ---------------------------------------------------------------------------
order_router = APIRouter(prefix="/orders", tags=["orders"])


@order_router.post("", response_model=PlaceOrderResponse)
async def place_order(body: PlaceOrderRequest) -> PlaceOrderResponse:
    command = PlaceOrder(
        customer_id=body.customer_id,
        city_id=body.city_id,
        delivery_type=body.delivery_type,
        items=json.dumps([item.model_dump() for item in body.items]),
        special_instructions=body.special_instructions,
        delivery_instructions=body.delivery_instructions,
    )
    order_id = current_domain.process(command, asynchronous=False)

    order = current_domain.repository_for(Order).get(order_id)
    return PlaceOrderResponse(order_id=order_id, total_amount=order.total)


@order_router.get("/{order_id}", response_model=OrderResponse)
async def get_order(order_id: str) -> OrderResponse:
    order = current_domain.repository_for(Order).get(order_id)
    return OrderResponse(order=_order_schema(order))


@order_router.put("/{order_id}/status", response_model=OrderResponse)
async def update_order_status(order_id: str, body: UpdateOrderStatusRequest) -> OrderResponse:
    command = TransitionOrder(
        order_id=order_id,
        new_status=body.new_status,
        changed_by=body.changed_by,
        courier_id=body.delivery_person_id,
    )
    current_domain.process(command, asynchronous=False)

    order = current_domain.repository_for(Order).get(order_id)
    return OrderResponse(order=_order_schema(order))


# ---------------------------------------------------------------------------
# Notification Router
# ---------------------------------------------------------------------------
notification_router = APIRouter(prefix="/notifications", tags=["notifications"])


@notification_router.post("/send", response_model=SendNotificationResponse)
async def send_notification(body: SendNotificationRequest) -> SendNotificationResponse:
    command = SendDirectNotification(
        recipient_type=body.recipient_type,
        recipient_id=body.recipient_id,
        order_id=body.order_id,
        title=body.title,
        body=body.message,
    )
    result = current_domain.process(command, asynchronous=False)
    return SendNotificationResponse(
        success=result["outcome"] in _DELIVERED_OUTCOMES,
        notification_id=result["notification_id"],
        outcome=result["outcome"],
    )


@notification_router.post("/dispatch-pending", response_model=DispatchPendingResponse)
async def dispatch_pending_notifications(
    body: DispatchPendingRequest | None = None,
) -> DispatchPendingResponse:
    limit = body.limit if body else DispatchPendingRequest().limit
    count = current_domain.process(DispatchPendingNotifications(limit=limit), asynchronous=False)
    return DispatchPendingResponse(dispatched_count=count or 0)


@notification_router.post("/{notification_id}/dispatch", response_model=DispatchResponse)
async def dispatch_notification(notification_id: str) -> DispatchResponse:
    outcome = current_domain.process(
        DispatchNotification(notification_id=notification_id),
        asynchronous=False,
    )
    return DispatchResponse(success=outcome in _DELIVERED_OUTCOMES, outcome=outcome)


# ---------------------------------------------------------------------------
# Push Registration Router
# ---------------------------------------------------------------------------
push_registration_router = APIRouter(prefix="/push-registrations", tags=["push-registrations"])


@push_registration_router.put("/{recipient_type}/{recipient_id}", response_model=StatusResponse)
async def register_push_token(
    recipient_type: str, recipient_id: str, body: RegisterPushTokenRequest
) -> StatusResponse:
    command = RegisterPushToken(
        recipient_type=recipient_type,
        recipient_id=recipient_id,
        token=body.token,
    )
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


# ---------------------------------------------------------------------------
# Maintenance Router
# ---------------------------------------------------------------------------
maintenance_router = APIRouter(prefix="/maintenance", tags=["maintenance"])


@maintenance_router.post("/expire-orders", response_model=ExpireOrdersResponse)
async def expire_orders() -> ExpireOrdersResponse:
    """Cancel orders left in ``placed`` past the expiry threshold.

    Intended for external schedulers (cron, K8s CronJob).
    """
    count = current_domain.process(ExpireStaleOrders(), asynchronous=False)
    return ExpireOrdersResponse(expired_count=count or 0)
