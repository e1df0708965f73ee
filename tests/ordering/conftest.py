import pytest
from protean import current_domain
from protean.integrations.pytest import DomainFixture


@pytest.fixture(scope="session")
def ordering_bed():
    from ordering.domain import ordering

    bed = DomainFixture(ordering)
    bed.setup()
    yield bed
    bed.teardown()


@pytest.fixture(scope="session", autouse=True)
def setup_db(ordering_bed):
    from ordering.domain import ordering
    from ordering.utils.db import drop_db, setup_db

    setup_db(ordering)

    yield

    drop_db(ordering)


@pytest.fixture(autouse=True)
def _ctx(ordering_bed):
    with ordering_bed.domain_context():
        yield


@pytest.fixture(autouse=True)
def run_around_tests(_ctx):
    """Give every test a fresh push channel and empty stores."""
    from ordering.channel import reset_push_channel

    reset_push_channel()

    yield

    reset_push_channel()

    # Clear all databases
    for _, provider in current_domain.providers.items():
        provider._data_reset()

    # Drain event stores
    current_domain.event_store.store._data_reset()


# ---------------------------------------------------------------------------
# Shared helpers
# ---------------------------------------------------------------------------
@pytest.fixture()
def push_adapter():
    """Install a fresh fake push adapter and hand it to the test."""
    from ordering.channel import set_push_channel
    from ordering.channel.fake_push import FakePushAdapter

    adapter = FakePushAdapter()
    set_push_channel(adapter)
    return adapter


@pytest.fixture()
def no_auto_dispatch(monkeypatch):
    """Keep new notifications undelivered until a test dispatches them."""
    from ordering import settings

    monkeypatch.setattr(settings, "auto_dispatch_notifications", lambda: False)


@pytest.fixture()
def menu_items():
    """Two dishes from two different chefs: biryani at 100 and lassi at 50."""
    from ordering.menu.menu_item import MenuItem

    repo = current_domain.repository_for(MenuItem)
    biryani = MenuItem(chef_id="chef-a", name="Chicken Biryani", price=100.0)
    lassi = MenuItem(chef_id="chef-b", name="Mango Lassi", price=50.0)
    repo.add(biryani)
    repo.add(lassi)
    return {"biryani": str(biryani.id), "lassi": str(lassi.id)}


@pytest.fixture()
def place_order(menu_items):
    """Factory placing an order through the command; returns the order id."""
    import json

    from ordering.order.placement import PlaceOrder

    def _place(delivery_type="delivery", lines=None, customer_id="cust-001", **extra):
        if lines is None:
            lines = [
                {"menu_item_id": menu_items["biryani"], "quantity": 2},
                {"menu_item_id": menu_items["lassi"], "quantity": 1},
            ]
        return current_domain.process(
            PlaceOrder(
                customer_id=customer_id,
                city_id="city-001",
                delivery_type=delivery_type,
                items=json.dumps(lines),
                **extra,
            ),
            asynchronous=False,
        )

    return _place


@pytest.fixture()
def transition():
    """Factory running TransitionOrder through the domain."""
    from ordering.order.transition import TransitionOrder

    def _transition(order_id, new_status, changed_by, courier_id=None):
        return current_domain.process(
            TransitionOrder(
                order_id=order_id,
                new_status=new_status,
                changed_by=changed_by,
                courier_id=courier_id,
            ),
            asynchronous=False,
        )

    return _transition


@pytest.fixture()
def notifications_for():
    """Notifications recorded for an order, oldest first."""
    from ordering.notification.notification import Notification

    def _notifications_for(order_id):
        items = (
            current_domain.repository_for(Notification)._dao.query.filter(order_id=str(order_id)).all().items
        )
        return sorted(items, key=lambda n: n.created_at)

    return _notifications_for


@pytest.fixture()
def register_token():
    from ordering.recipient.registration import RegisterPushToken

    def _register(recipient_type, recipient_id, token):
        return current_domain.process(
            RegisterPushToken(recipient_type=recipient_type, recipient_id=recipient_id, token=token),
            asynchronous=False,
        )

    return _register
