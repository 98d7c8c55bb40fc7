"""
Shifts API Integration Tests

Run with: pytest backend/shifts/tests/test_shifts_api.py -v
"""
from decimal import Decimal

import pytest

from shifts.models import Shift

SHIFTS_URL = "/api/shifts/"


@pytest.mark.django_db
class TestShiftAPI:
    """Test the open-shift operations over HTTP"""

    def test_current_without_shift(self, api_client, store_settings):
        response = api_client.get(f"{SHIFTS_URL}current/")

        assert response.status_code == 200
        assert response.data == {"shift": None, "summary": None}

    def test_start_shift(self, api_client, store_settings):
        response = api_client.post(f"{SHIFTS_URL}start/", {"opening_float": "500.00"}, format="json")

        assert response.status_code == 201
        assert response.data["status"] == "OPEN"
        assert response.data["opening_float_amount"] == "500.00"
        assert response.data["activities"][0]["type"] == "SHIFT_START"

    def test_second_start_is_conflict(self, api_client, open_shift):
        response = api_client.post(f"{SHIFTS_URL}start/", {"opening_float": "100.00"}, format="json")

        assert response.status_code == 409
        assert response.data["code"] == "shift_already_open"
        assert response.data["details"]["shift_id"] == open_shift.id

    def test_current_with_summary(self, api_client, place_order):
        place_order(Decimal("220.00"), "cash")
        place_order(Decimal("150.00"), "qr")
        api_client.post(
            f"{SHIFTS_URL}paid-in-out/",
            {"type": "PAID_OUT", "amount": "50.00", "description": "Ice"},
            format="json",
        )

        response = api_client.get(f"{SHIFTS_URL}current/")

        assert response.status_code == 200
        assert response.data["summary"]["expected_cash"] == "670.00"
        assert response.data["summary"]["net_sales"] == "370.00"
        assert len(response.data["shift"]["activities"]) == 4

    def test_paid_in_out_validation(self, api_client, open_shift):
        response = api_client.post(
            f"{SHIFTS_URL}paid-in-out/", {"type": "PAID_OUT", "amount": "0"}, format="json"
        )

        assert response.status_code == 400
        assert response.data["code"] == "validation_error"

    def test_drawer_open(self, api_client, open_shift):
        response = api_client.post(f"{SHIFTS_URL}drawer-open/", {"description": "Check float"}, format="json")

        assert response.status_code == 201
        assert response.data["type"] == "MANUAL_OPEN"
        assert response.data["amount"] == "0.00"

    def test_drawer_open_without_shift(self, api_client, store_settings):
        response = api_client.post(f"{SHIFTS_URL}drawer-open/", {}, format="json")

        assert response.status_code == 400
        assert response.data["code"] == "no_open_shift"

    def test_end_shift(self, api_client, place_order):
        place_order(Decimal("100.00"), "cash")

        response = api_client.post(
            f"{SHIFTS_URL}end/",
            {"closing_cash_counted": "590.00", "cash_for_next_shift": "500.00"},
            format="json",
        )

        assert response.status_code == 200
        assert response.data["status"] == "CLOSED"
        assert response.data["expected_cash_in_drawer"] == "600.00"
        assert response.data["cash_over_short"] == "-10.00"
        assert response.data["cash_to_deposit"] == "90.00"

    def test_history_filter(self, api_client, open_shift):
        api_client.post(f"{SHIFTS_URL}end/", {"closing_cash_counted": "500.00"}, format="json")
        api_client.post(f"{SHIFTS_URL}start/", {"opening_float": "500.00"}, format="json")

        closed = api_client.get(SHIFTS_URL, {"status": "CLOSED"})
        detail = api_client.get(f"{SHIFTS_URL}{open_shift.id}/")

        assert [row["id"] for row in closed.data["results"]] == [open_shift.id]
        assert detail.status_code == 200
        assert [a["type"] for a in detail.data["activities"]] == ["SHIFT_START", "SHIFT_END"]
        assert Shift.objects.filter(status=Shift.ShiftStatus.OPEN).count() == 1

    def test_history_for_one_day(self, api_client, open_shift):
        today = open_shift.id.split("-")[0]
        day = f"{today[:4]}-{today[4:6]}-{today[6:]}"

        response = api_client.get(SHIFTS_URL, {"day": day})
        other_day = api_client.get(SHIFTS_URL, {"day": "1999-01-01"})

        assert [row["id"] for row in response.data["results"]] == [open_shift.id]
        assert other_day.data["results"] == []

    @pytest.mark.parametrize("day", ["yesterday", "2026-02-30"])
    def test_history_bad_day(self, api_client, open_shift, day):
        response = api_client.get(SHIFTS_URL, {"day": day})

        assert response.status_code == 400
        assert "day" in response.data
