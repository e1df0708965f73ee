"""Faker-based data generators for Locust load test scenarios.

Payloads match the field names expected by the API's Pydantic request
schemas. Menu item ids come from ``LOADTEST_MENU_ITEM_IDS`` (comma
separated), seeded beforehand with ``python src/manage.py seed-menu``.
"""

import os
import random
import uuid

from faker import Faker

fake = Faker()


def menu_item_ids() -> list[str]:
    raw = os.environ.get("LOADTEST_MENU_ITEM_IDS", "")
    return [item.strip() for item in raw.split(",") if item.strip()]


def customer_id() -> str:
    return f"cust-lt-{uuid.uuid4().hex[:8]}"


def courier_id() -> str:
    return f"courier-lt-{uuid.uuid4().hex[:8]}"


def push_token() -> str:
    return fake.sha256()


def order_data(customer: str, delivery_type: str = "delivery") -> dict:
    """An order for one to three dishes from the seeded menu."""
    available = menu_item_ids()
    dishes = random.sample(available, k=min(len(available), random.randint(1, 3)))
    return {
        "customer_id": customer,
        "city_id": fake.city(),
        "delivery_type": delivery_type,
        "items": [{"menu_item_id": dish, "quantity": random.randint(1, 4)} for dish in dishes],
        "special_instructions": fake.sentence(nb_words=6) if random.random() < 0.3 else None,
        "delivery_instructions": fake.street_address() if delivery_type == "delivery" else None,
    }
