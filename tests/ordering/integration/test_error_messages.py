"""Tests for flattening domain exceptions into API error messages."""

from ordering.api.errors import error_message
from protean.exceptions import InvalidOperationError, ObjectNotFoundError, ValidationError


class TestErrorMessage:
    def test_field_errors_are_prefixed(self):
        exc = ValidationError({"status": ["Cannot transition from placed to delivered"]})
        assert error_message(exc) == "status: Cannot transition from placed to delivered"

    def test_multiple_fields_joined(self):
        exc = ValidationError({"items": ["Item 1 is missing menu_item_id"], "city_id": ["is required"]})
        assert error_message(exc) == "items: Item 1 is missing menu_item_id; city_id: is required"

    def test_entity_level_messages_unprefixed(self):
        exc = ObjectNotFoundError({"_entity": "Order with id ord-404 does not exist"})
        assert error_message(exc) == "Order with id ord-404 does not exist"

    def test_plain_message(self):
        exc = InvalidOperationError("Order ord-1 is no longer placed")
        assert error_message(exc) == "Order ord-1 is no longer placed"
