"""
Orders API Integration Tests

Tests the /api/orders/ endpoints end to end, including how ledger errors are
mapped onto HTTP responses.

Run with: pytest backend/orders/tests/test_orders_api.py -v
"""
from decimal import Decimal
from unittest.mock import patch

import pytest
from django.utils import timezone

from orders.models import Order

ORDERS_URL = "/api/orders/"


def order_payload(**overrides):
    payload = {
        "items": [
            {"menu_item_id": "1", "name": "Pad Thai", "price": "60.00", "quantity": 2},
            {"menu_item_id": "2", "name": "Thai Tea", "price": "35.00"},
        ],
        "payment_method": "cash",
        "cash_received": "200.00",
    }
    payload.update(overrides)
    return payload


@pytest.mark.django_db
class TestPlaceOrderAPI:
    """Test POST /api/orders/"""

    def test_place_order(self, api_client, open_shift):
        response = api_client.post(ORDERS_URL, order_payload(), format="json")

        assert response.status_code == 201
        assert response.data["id"] == f"{timezone.localdate():%Y%m%d}-0001"
        assert response.data["subtotal"] == "155.00"
        assert response.data["total"] == "155.00"
        assert response.data["change_due"] == "45.00"
        assert response.data["status"] == "cooking"
        assert response.data["sync_status"] == "pending"
        assert response.data["shift"] == open_shift.id
        assert len(response.data["items"]) == 2
        assert response.data["items"][1]["quantity"] == 1

    def test_place_order_with_discount(self, api_client, open_shift):
        response = api_client.post(ORDERS_URL, order_payload(discount="10%"), format="json")

        assert response.status_code == 201
        assert response.data["discount_value"] == "15.50"
        assert response.data["total"] == "139.50"

    def test_empty_cart(self, api_client, open_shift):
        response = api_client.post(ORDERS_URL, order_payload(items=[]), format="json")

        assert response.status_code == 400
        assert response.data["code"] == "empty_cart"

    def test_no_open_shift(self, api_client, store_settings):
        response = api_client.post(ORDERS_URL, order_payload(), format="json")

        assert response.status_code == 400
        assert response.data["code"] == "no_open_shift"

    def test_insufficient_cash(self, api_client, open_shift):
        response = api_client.post(ORDERS_URL, order_payload(cash_received="100.00"), format="json")

        assert response.status_code == 400
        assert response.data["code"] == "validation_error"
        assert Order.objects.count() == 0

    def test_invalid_payload(self, api_client, open_shift):
        response = api_client.post(ORDERS_URL, order_payload(payment_method="card"), format="json")

        assert response.status_code == 400
        assert "payment_method" in response.data


@pytest.mark.django_db
class TestOrderLifecycleAPI:
    """Test the advance, complete and cancel actions"""

    def test_advance_and_complete(self, api_client, place_order):
        order = place_order(Decimal("50.00"))

        response = api_client.post(f"{ORDERS_URL}{order.id}/advance/", {"status": "ready"}, format="json")
        assert response.status_code == 200
        assert response.data["status"] == "ready"

        response = api_client.post(f"{ORDERS_URL}{order.id}/complete/")
        assert response.status_code == 200
        assert response.data["status"] == "completed"
        assert response.data["preparation_time_seconds"] is not None

    def test_invalid_transition_is_conflict(self, api_client, place_order):
        order = place_order(Decimal("50.00"))
        api_client.post(f"{ORDERS_URL}{order.id}/advance/", {"status": "ready"}, format="json")

        response = api_client.post(f"{ORDERS_URL}{order.id}/advance/", {"status": "cooking"}, format="json")

        assert response.status_code == 409
        assert response.data["code"] == "invalid_transition"

    def test_cancel(self, api_client, completed_order):
        response = api_client.post(f"{ORDERS_URL}{completed_order.id}/cancel/")

        assert response.status_code == 200
        assert response.data["order"]["status"] == "cancelled"
        assert response.data["order"]["reversal_id"] == f"R-{completed_order.id}"
        assert response.data["reversal"]["total"] == "-100.00"
        assert response.data["reversal"]["is_reversal"] is True
        assert response.data["reversal"]["reversal_of"] == completed_order.id

    def test_cancel_uncompleted_order_is_conflict(self, api_client, place_order):
        order = place_order(Decimal("50.00"))

        response = api_client.post(f"{ORDERS_URL}{order.id}/cancel/")

        assert response.status_code == 409

    def test_unknown_order(self, api_client, open_shift):
        response = api_client.post(f"{ORDERS_URL}19990101-0001/complete/")

        assert response.status_code == 404
        assert response.data["code"] == "order_not_found"

    def test_unexpected_error_is_contained(self, api_client, place_order):
        """
        CRITICAL: An unexpected exception becomes a 500 JSON response
        instead of escaping the view.
        """
        order = place_order(Decimal("50.00"))

        with patch("orders.views.OrderService.complete_order", side_effect=RuntimeError("boom")):
            response = api_client.post(f"{ORDERS_URL}{order.id}/complete/")

        assert response.status_code == 500
        assert response.data["code"] == "internal_error"


@pytest.mark.django_db
class TestOrderQueriesAPI:
    """Test listing and filtering orders"""

    def test_filter_by_status(self, api_client, place_order):
        cooking = place_order(Decimal("10.00"))
        done = place_order(Decimal("20.00"))
        api_client.post(f"{ORDERS_URL}{done.id}/complete/")

        response = api_client.get(ORDERS_URL, {"status": "cooking"})

        assert response.status_code == 200
        assert [row["id"] for row in response.data["results"]] == [cooking.id]

    def test_filter_by_date(self, api_client, place_order):
        order = place_order(Decimal("10.00"))

        today = api_client.get(ORDERS_URL, {"date": timezone.localdate().isoformat()})
        other_day = api_client.get(ORDERS_URL, {"date": "1999-01-01"})

        assert [row["id"] for row in today.data["results"]] == [order.id]
        assert other_day.data["count"] == 0

    def test_filter_reversals(self, api_client, completed_order):
        api_client.post(f"{ORDERS_URL}{completed_order.id}/cancel/")

        response = api_client.get(ORDERS_URL, {"is_reversal": "true"})

        assert [row["id"] for row in response.data["results"]] == [f"R-{completed_order.id}"]

    def test_filter_by_sync_status(self, api_client, place_order):
        place_order(Decimal("10.00"))

        response = api_client.get(ORDERS_URL, {"sync_status": "synced"})

        assert response.data["count"] == 0

    def test_retrieve(self, api_client, place_order):
        order = place_order(Decimal("10.00"))

        response = api_client.get(f"{ORDERS_URL}{order.id}/")

        assert response.status_code == 200
        assert response.data["total"] == "10.00"

    def test_orders_cannot_be_deleted_over_api(self, api_client, place_order):
        order = place_order(Decimal("10.00"))

        response = api_client.delete(f"{ORDERS_URL}{order.id}/")

        assert response.status_code == 405
