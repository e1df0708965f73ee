"""Shared BDD fixtures and step definitions for the ordering domain."""

import json

import pytest
from ordering.menu.menu_item import MenuItem
from ordering.notification.notification import Notification
from ordering.order.order import Order
from ordering.order.placement import PlaceOrder
from ordering.order.transition import TransitionOrder
from protean import current_domain
from protean.exceptions import InvalidOperationError, ValidationError
from pytest_bdd import given, parsers, then


# ---------------------------------------------------------------------------
# Scenario state
# ---------------------------------------------------------------------------
@pytest.fixture()
def context():
    return {"menu": {}, "customer_id": None, "order_id": None, "error": None}


def _place(context, customer_id, delivery_type, quantities):
    lines = [{"menu_item_id": context["menu"][dish], "quantity": qty} for dish, qty in quantities]
    context["customer_id"] = customer_id
    context["order_id"] = current_domain.process(
        PlaceOrder(
            customer_id=customer_id,
            city_id="city-001",
            delivery_type=delivery_type,
            items=json.dumps(lines),
        ),
        asynchronous=False,
    )


def _transition(context, new_status, changed_by, courier_id=None):
    try:
        current_domain.process(
            TransitionOrder(
                order_id=context["order_id"],
                new_status=new_status,
                changed_by=changed_by,
                courier_id=courier_id,
            ),
            asynchronous=False,
        )
    except (ValidationError, InvalidOperationError) as exc:
        context["error"] = exc


@pytest.fixture()
def place_for(context):
    """Place an order for the scenario: ``place_for(customer_id, delivery_type, [(dish, qty), ...])``."""
    return lambda customer_id, delivery_type, quantities: _place(context, customer_id, delivery_type, quantities)


@pytest.fixture()
def move_order(context):
    """Transition the scenario order, capturing a rejection in ``context["error"]``."""
    return lambda new_status, changed_by, courier_id=None: _transition(context, new_status, changed_by, courier_id)


def _order(context):
    return current_domain.repository_for(Order).get(context["order_id"])


def _notifications(context):
    return current_domain.repository_for(Notification)._dao.query.filter(order_id=context["order_id"]).all().items


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given(parsers.parse('chef "{chef_id}" offers "{name}" at {price:d}'))
def _(context, chef_id, name, price):
    item = MenuItem(chef_id=chef_id, name=name, price=float(price))
    current_domain.repository_for(MenuItem).add(item)
    context["menu"][name] = str(item.id)


@given(
    parsers.re(
        r'customer "(?P<customer_id>[^"]+)" has ordered (?P<qty_a>\d+) "(?P<dish_a>[^"]+)" '
        r'and (?P<qty_b>\d+) "(?P<dish_b>[^"]+)" for (?P<delivery_type>\w+)'
    )
)
def _(context, customer_id, qty_a, dish_a, qty_b, dish_b, delivery_type):
    _place(context, customer_id, delivery_type, [(dish_a, int(qty_a)), (dish_b, int(qty_b))])


@given(
    parsers.re(
        r'customer "(?P<customer_id>[^"]+)" has ordered (?P<qty>\d+) "(?P<dish>[^"]+)" for (?P<delivery_type>\w+)'
    )
)
def _(context, customer_id, qty, dish, delivery_type):
    _place(context, customer_id, delivery_type, [(dish, int(qty))])


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.parse("the order total is {total:d}"))
def _(context, total):
    assert _order(context).total == float(total)


@then(parsers.parse('the order is "{status}"'))
def _(context, status):
    assert _order(context).status == status


@then(parsers.parse('the status history reads "{statuses}"'))
def _(context, statuses):
    expected = [s.strip() for s in statuses.split(",")]
    assert [entry.status for entry in _order(context).timeline()] == expected


@then(parsers.parse('chefs "{first}" and "{second}" each have an unsent "{title}" notification'))
def _(context, first, second, title):
    chef_notifications = [n for n in _notifications(context) if n.recipient_type == "chef"]
    assert sorted(n.recipient_id for n in chef_notifications) == sorted([first, second])
    assert all(n.title == title and n.sent is False for n in chef_notifications)


@then(parsers.parse('courier "{courier_id}" has a "{title}" notification'))
def _(context, courier_id, title):
    assert any(
        n.recipient_type == "delivery" and n.recipient_id == courier_id and n.title == title
        for n in _notifications(context)
    )


@then(parsers.parse("the customer has {count:d} notifications"))
def _(context, count):
    customer = [n for n in _notifications(context) if n.recipient_type == "customer"]
    assert len(customer) == count


@then(parsers.parse('the customer has a "{title}" notification'))
def _(context, title):
    assert any(
        n.recipient_type == "customer" and n.recipient_id == context["customer_id"] and n.title == title
        for n in _notifications(context)
    )


@then("the transition is rejected")
def _(context):
    assert isinstance(context["error"], ValidationError)
