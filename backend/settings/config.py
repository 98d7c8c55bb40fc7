"""
Process-wide view of the store settings.

Ledger code reads `app_settings.<field>` instead of querying GlobalSettings,
so a hot path such as placing an order does not hit the settings table. The
values are read from the database on first access and refreshed by the
post_save signal in settings/signals.py.
"""

from decimal import Decimal
from typing import Any, Optional
import logging

from django.conf import settings as django_settings
from django.core.exceptions import ImproperlyConfigured
from django.db import DatabaseError

logger = logging.getLogger(__name__)

# GlobalSettings field -> converter applied when it is copied onto AppSettings
STORE_FIELDS = {
    "shop_name": str,
    "currency": str,
    "vat_enabled_by_default": bool,
    "vat_rate_percent": Decimal,
    "service_charge_enabled": bool,
    "service_charge_rate_percent": Decimal,
    "max_shifts_per_day": int,
    "auto_sync_enabled": bool,
    "sync_interval_minutes": int,
    "sync_batch_size": int,
    "remote_ledger_url": str,
    "daily_summary_mode": str,
}


class AppSettings:
    """
    Lazy singleton over the GlobalSettings row.

    Nothing is read at import time, so `migrate` can run on an empty
    database; the first attribute access loads every field at once.
    """

    _instance: Optional["AppSettings"] = None
    _initialized: bool = False

    def __new__(cls) -> "AppSettings":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __getattr__(self, name: str) -> Any:
        # Only called for names missing from __dict__
        if name.startswith("__") or name not in STORE_FIELDS:
            raise AttributeError(f"'AppSettings' object has no attribute '{name}'")
        if not self._initialized:
            self.reload(log=False)
        return self.__dict__[name]

    def load_settings(self) -> None:
        from .models import GlobalSettings

        try:
            row = GlobalSettings.load()
        except DatabaseError as e:
            raise ImproperlyConfigured(f"Store settings could not be read: {e}")

        for field, convert in STORE_FIELDS.items():
            setattr(self, field, convert(getattr(row, field)))

        if not self.remote_ledger_url:
            self.remote_ledger_url = getattr(django_settings, "REMOTE_LEDGER_URL", "")

    def reload(self, log: bool = True) -> None:
        self.load_settings()
        self._initialized = True
        if log:
            logger.info("Store settings reloaded")

    def invalidate(self) -> None:
        """Forget the loaded values; the next read goes to the database."""
        for field in STORE_FIELDS:
            self.__dict__.pop(field, None)
        self._initialized = False

    def __str__(self) -> str:
        return (
            f"AppSettings(shop='{self.shop_name}', currency={self.currency}, "
            f"vat={'on' if self.vat_enabled_by_default else 'off'}, "
            f"auto_sync={'on' if self.auto_sync_enabled else 'off'})"
        )


app_settings = AppSettings()
