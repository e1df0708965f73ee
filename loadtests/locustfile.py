"""Kitchenline Load Testing — Locust entry point.

Usage:
    # Seed the menu and export its ids first:
    python src/manage.py seed-menu menu.json
    export LOADTEST_MENU_ITEM_IDS=menu-1,menu-2,menu-3

    # All scenarios (web UI):
    locust -f loadtests/locustfile.py

    # Headless (CI mode):
    locust -f loadtests/locustfile.py OrderingUser --headless \
           -u 50 -r 5 -t 300s --csv=results/loadtest
"""

import logging
import time

from locust import events

# Import all user classes so Locust discovers them
from loadtests.data_generators import menu_item_ids
from loadtests.helpers.response import extract_error_detail
from loadtests.scenarios.ordering import MaintenanceUser, OrderingUser  # noqa: F401

logger = logging.getLogger("loadtest")


@events.request.add_listener
def on_request(request_type, name, response, exception, **_kw):
    """Log error details for every failed request."""
    if exception:
        logger.error("[EXCEPTION] %s %s: %s", request_type, name, exception)
    elif response is not None and response.status_code >= 400:
        detail = extract_error_detail(response)
        logger.error("[%s] %s %s: %s", response.status_code, request_type, name, detail)


@events.test_start.add_listener
def on_test_start(environment, **_kwargs):
    """Log a marker when load test begins."""
    print(f"\n[LOADTEST] Started at {time.strftime('%H:%M:%S')}")
    print(f"[LOADTEST] Target host: {environment.host}")
    if not menu_item_ids():
        print("[LOADTEST] LOADTEST_MENU_ITEM_IDS is empty; every order will be rejected")
    print()


@events.test_stop.add_listener
def on_test_stop(**_kwargs):
    print(f"\n[LOADTEST] Stopped at {time.strftime('%H:%M:%S')}\n")
