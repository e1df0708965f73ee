"""BDD tests for the order lifecycle."""

from datetime import UTC, datetime, timedelta

from ordering.order.expiry import ExpireStaleOrders
from protean import current_domain
from pytest_bdd import parsers, scenarios, when

scenarios("features/order_lifecycle.feature")


# ---------------------------------------------------------------------------
# When steps
# ---------------------------------------------------------------------------
@when(
    parsers.re(
        r'customer "(?P<customer_id>[^"]+)" orders (?P<qty_a>\d+) "(?P<dish_a>[^"]+)" '
        r'and (?P<qty_b>\d+) "(?P<dish_b>[^"]+)" for (?P<delivery_type>\w+)'
    )
)
def _(place_for, customer_id, qty_a, dish_a, qty_b, dish_b, delivery_type):
    place_for(customer_id, delivery_type, [(dish_a, int(qty_a)), (dish_b, int(qty_b))])


@when(parsers.parse('the chef accepts the order assigning courier "{courier_id}"'))
def _(move_order, courier_id):
    move_order("accepted", "chef", courier_id=courier_id)


@when("the chef accepts the order")
def _(move_order):
    move_order("accepted", "chef")


@when("the chef marks the order prepared")
def _(move_order):
    move_order("prepared", "chef")


@when("the courier picks up the order")
def _(context, move_order):
    move_order("picked_up", "delivery")
    assert context["error"] is None


@when("the courier tries to pick up the order")
def _(move_order):
    move_order("picked_up", "delivery")


@when("the courier delivers the order")
def _(move_order):
    move_order("delivered", "delivery")


@when(parsers.parse("{minutes:d} minutes pass without a chef response"))
def _(minutes):
    current_domain.process(
        ExpireStaleOrders(as_of=datetime.now(UTC) + timedelta(minutes=minutes)),
        asynchronous=False,
    )
