"""
Store Settings Tests

Tests the GlobalSettings singleton, the lazy AppSettings cache and the
settings API.

Run with: pytest backend/settings/tests/test_app_settings.py -v
"""
from decimal import Decimal

import pytest
from django.core.exceptions import ValidationError

from core_backend.models import SystemLog
from settings.config import app_settings
from settings.models import DailySummaryMode, GlobalSettings
from settings.services import SettingsService


@pytest.mark.django_db
class TestGlobalSettings:
    """Test the single-row settings model"""

    def test_load_creates_defaults(self):
        obj = GlobalSettings.load()

        assert obj.pk == 1
        assert obj.currency == "THB"
        assert obj.vat_rate_percent == Decimal("7.00")
        assert obj.max_shifts_per_day == 3
        assert obj.daily_summary_mode == DailySummaryMode.GROSS

    def test_only_one_row(self):
        GlobalSettings.load()
        GlobalSettings(shop_name="Second Shop").save()

        assert GlobalSettings.objects.count() == 1
        assert GlobalSettings.load().shop_name == "Second Shop"

    def test_cannot_delete(self):
        with pytest.raises(ValidationError):
            GlobalSettings.load().delete()

    def test_currency_uppercased(self):
        obj = GlobalSettings.load()
        obj.currency = "usd"
        obj.save()

        assert GlobalSettings.load().currency == "USD"


@pytest.mark.django_db
class TestAppSettings:
    """Test the lazily loaded settings cache"""

    def test_lazy_load(self, store_settings):
        app_settings.invalidate()

        assert app_settings.shop_name == "My Shop"
        assert app_settings.vat_rate_percent == Decimal("7.00")

    def test_save_reloads_cache(self, store_settings):
        """
        IMPORTANT: A settings change is visible to the ledger immediately,
        without a restart.
        """
        assert app_settings.vat_enabled_by_default is False

        store_settings.vat_enabled_by_default = True
        store_settings.vat_rate_percent = Decimal("10.00")
        store_settings.save()

        assert app_settings.vat_enabled_by_default is True
        assert app_settings.vat_rate_percent == Decimal("10.00")

    def test_remote_url_falls_back_to_environment(self, settings, store_settings):
        settings.REMOTE_LEDGER_URL = "https://fallback.example.com/exec"
        store_settings.remote_ledger_url = ""
        store_settings.save()

        assert app_settings.remote_ledger_url == "https://fallback.example.com/exec"

    def test_unknown_attribute(self, store_settings):
        with pytest.raises(AttributeError):
            app_settings.not_a_setting


@pytest.mark.django_db
class TestSettingsService:
    def test_update_records_changes(self, store_settings):
        obj = SettingsService.update_global_settings({"shop_name": "Som Tam Corner", "max_shifts_per_day": 2})

        assert obj.shop_name == "Som Tam Corner"
        assert app_settings.max_shifts_per_day == 2
        log = SystemLog.objects.get(message="Settings updated")
        assert set(log.details["changes"]) == {"shop_name", "max_shifts_per_day"}

    def test_update_without_changes_writes_nothing(self, store_settings):
        SettingsService.update_global_settings({"shop_name": store_settings.shop_name})

        assert not SystemLog.objects.filter(message="Settings updated").exists()


@pytest.mark.django_db
class TestSettingsAPI:
    def test_get_settings(self, api_client, store_settings):
        response = api_client.get("/api/settings/")

        assert response.status_code == 200
        assert response.data["currency"] == "THB"
        assert response.data["auto_sync_enabled"] is False

    def test_patch_settings(self, api_client, store_settings):
        response = api_client.patch(
            "/api/settings/", {"vat_enabled_by_default": True, "daily_summary_mode": "net"}, format="json"
        )

        assert response.status_code == 200
        assert response.data["vat_enabled_by_default"] is True
        assert app_settings.daily_summary_mode == DailySummaryMode.NET

    def test_invalid_currency_rejected(self, api_client, store_settings):
        response = api_client.patch("/api/settings/", {"currency": "BAHT"}, format="json")

        assert response.status_code == 400
        assert GlobalSettings.load().currency == "THB"

    def test_rate_out_of_range_rejected(self, api_client, store_settings):
        response = api_client.patch("/api/settings/", {"vat_rate_percent": "150"}, format="json")

        assert response.status_code == 400
