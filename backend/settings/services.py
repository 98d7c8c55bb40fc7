"""
Settings Service Layer

Business logic for reading and changing the store settings, kept out of the
views so management commands and tests go through the same path.
"""

from typing import Dict, Any

from django.db import transaction

from core_backend.audit import AuditLog
from .models import GlobalSettings
import logging

logger = logging.getLogger(__name__)


class SettingsService:
    """
    Service layer for managing the GlobalSettings singleton.
    """

    @staticmethod
    def get_global_settings() -> GlobalSettings:
        """
        Get the GlobalSettings instance, creating it with defaults on first use.
        """
        return GlobalSettings.load()

    @staticmethod
    @transaction.atomic
    def update_global_settings(data: Dict[str, Any]) -> GlobalSettings:
        """
        Apply a partial update to the settings. The post_save signal reloads
        app_settings, so the new values are visible as soon as this returns.
        """
        obj = GlobalSettings.load()
        changed = {}
        for field, value in data.items():
            if getattr(obj, field) != value:
                changed[field] = {"from": getattr(obj, field), "to": value}
                setattr(obj, field, value)
        if not changed:
            return obj

        obj.full_clean()
        obj.save()
        logger.info(f"Global settings updated: {', '.join(changed)}")
        AuditLog.action("Settings updated", details={"changes": changed})
        return obj
