"""Order placement — command and handler.

Prices every requested line against the menu, builds the order with its
fees, and queues a "New Order" notification for each chef involved. The
order, its lines, the initial history entry and the chef notifications are
committed together or not at all.
"""

import json

import structlog
from protean import handle
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.fields import Identifier, String, Text
from protean.utils.globals import current_domain

from ordering import settings
from ordering.domain import ordering
from ordering.menu.menu_item import MenuItem
from ordering.notification.notification import Notification
from ordering.order.notification_plan import plan_for_placement
from ordering.order.order import DeliveryType, Order

logger = structlog.get_logger(__name__)


@ordering.command(part_of="Order")
class PlaceOrder:
    customer_id = Identifier(required=True)
    city_id = Identifier(required=True)
    delivery_type = String(required=True, choices=DeliveryType)
    items = Text(required=True)  # JSON: list of {menu_item_id, quantity}
    special_instructions = Text()
    delivery_instructions = Text()


def _parse_items(raw) -> list[dict]:
    try:
        requested = json.loads(raw) if isinstance(raw, str) else raw
    except ValueError:
        raise ValidationError({"items": ["Items must be a JSON list"]}) from None

    if not isinstance(requested, list) or not requested:
        raise ValidationError({"items": ["An order needs at least one item"]})

    parsed = []
    for position, entry in enumerate(requested, start=1):
        if not isinstance(entry, dict) or not entry.get("menu_item_id"):
            raise ValidationError({"items": [f"Item {position} is missing menu_item_id"]})
        quantity = entry.get("quantity")
        if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity <= 0:
            raise ValidationError({"items": [f"Item {position} must have a positive whole quantity"]})
        parsed.append({"menu_item_id": str(entry["menu_item_id"]), "quantity": quantity})
    return parsed


def _price_lines(requested: list[dict]) -> list[dict]:
    """Resolve each requested line to the chef and current price on the menu."""
    menu = current_domain.repository_for(MenuItem)
    skip_unknown = settings.skip_unknown_menu_items()

    lines = []
    for entry in requested:
        try:
            menu_item = menu.get(entry["menu_item_id"])
        except ObjectNotFoundError:
            menu_item = None

        if menu_item is None or menu_item.available is False:
            if not skip_unknown:
                raise ValidationError({"items": [f"Menu item {entry['menu_item_id']} is not available"]})
            logger.warning("Skipping unavailable menu item", menu_item_id=entry["menu_item_id"])
            continue

        lines.append(
            {
                "menu_item_id": str(menu_item.id),
                "chef_id": str(menu_item.chef_id),
                "quantity": entry["quantity"],
                "unit_price": menu_item.price,
            }
        )
    return lines


@ordering.command_handler(part_of=Order)
class PlaceOrderHandler:
    @handle(PlaceOrder)
    def place_order(self, command: PlaceOrder):
        lines = _price_lines(_parse_items(command.items))

        order = Order.place(
            customer_id=command.customer_id,
            city_id=command.city_id,
            delivery_type=command.delivery_type,
            lines=lines,
            delivery_fee=settings.delivery_fee(),
            platform_fee=settings.platform_fee(),
            special_instructions=command.special_instructions,
            delivery_instructions=command.delivery_instructions,
        )
        current_domain.repository_for(Order).add(order)

        notifications = current_domain.repository_for(Notification)
        for planned in plan_for_placement(order):
            notifications.add(
                Notification.create(
                    recipient_type=planned.recipient_type,
                    recipient_id=planned.recipient_id,
                    title=planned.title,
                    body=planned.body,
                    order_id=str(order.id),
                )
            )

        logger.info(
            "Order placed",
            order_id=str(order.id),
            customer_id=str(order.customer_id),
            delivery_type=order.delivery_type,
            line_count=len(lines),
            total=order.total,
        )
        return str(order.id)
