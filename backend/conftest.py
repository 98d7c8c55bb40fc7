"""
Root conftest.py for all backend tests.

This file makes fixtures available to all test files across all apps.
"""
from decimal import Decimal

import pytest


# ============================================================================
# AUTO-USE FIXTURES (Run automatically for every test)
# ============================================================================

@pytest.fixture(autouse=True)
def reset_app_settings():
    """
    Drop the AppSettings singleton's loaded values around each test.

    The singleton outlives the per-test transaction rollback, so without this
    a test that changes GlobalSettings would leak its values into the next.
    """
    from settings.config import app_settings

    app_settings.invalidate()
    yield
    app_settings.invalidate()


# ============================================================================
# OPTIONAL FIXTURES (Use explicitly when needed)
# ============================================================================

@pytest.fixture
def api_client():
    """
    Provide DRF API client for API tests.

    Usage:
        def test_my_api(api_client):
            response = api_client.get('/api/orders/')
            assert response.status_code == 200
    """
    from rest_framework.test import APIClient
    return APIClient()


@pytest.fixture
def store_settings(db):
    """
    GlobalSettings with VAT and service charge off and auto-sync disabled,
    so totals equal the cart subtotal unless a test turns them on.
    """
    from settings.models import GlobalSettings

    obj = GlobalSettings.load()
    obj.vat_enabled_by_default = False
    obj.service_charge_enabled = False
    obj.auto_sync_enabled = False
    obj.remote_ledger_url = "https://ledger.example.com/exec"
    obj.save()
    return obj


@pytest.fixture
def open_shift(store_settings):
    """An open shift with a 500.00 opening float."""
    from shifts.services import ShiftService

    return ShiftService.start_shift(Decimal("500.00"))


@pytest.fixture
def cart():
    """Two lines, subtotal 200.00."""
    return [
        {"menu_item_id": "1", "name": "Pad Thai", "price": Decimal("60.00"), "quantity": 2},
        {"menu_item_id": "2", "name": "Green Curry", "price": Decimal("80.00"), "quantity": 1},
    ]


@pytest.fixture
def place_order(open_shift):
    """
    Factory placing an order of a single line priced `total`.

    Usage:
        order = place_order(Decimal("220.00"), "cash")
    """
    from orders.services import OrderService

    def _place(total, payment_method="cash", **kwargs):
        line = {"name": "Item", "price": total, "quantity": 1}
        return OrderService.place_order([line], payment_method, **kwargs)

    return _place


@pytest.fixture
def completed_order(place_order):
    """A completed 100.00 cash order."""
    from orders.services import OrderService

    order = place_order(Decimal("100.00"), "cash")
    return OrderService.complete_order(order.id)
