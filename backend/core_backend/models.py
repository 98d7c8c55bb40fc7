from django.core.serializers.json import DjangoJSONEncoder
from django.db import models
from django.utils import timezone
from django.utils.translation import gettext_lazy as _


class SystemLog(models.Model):
    """
    Audit trail of ledger actions and failures.

    Rows are written outside the ledger transaction so a failed operation still
    leaves its trace after the rollback.
    """

    class LogType(models.TextChoices):
        ACTION = "ACTION", _("Action")
        ERROR = "ERROR", _("Error")
        SYNC = "SYNC", _("Sync")
        SYSTEM = "SYSTEM", _("System")

    class Level(models.TextChoices):
        INFO = "INFO", _("Info")
        WARN = "WARN", _("Warning")
        CRITICAL = "CRITICAL", _("Critical")

    timestamp = models.DateTimeField(default=timezone.now, db_index=True)
    type = models.CharField(max_length=10, choices=LogType.choices, default=LogType.ACTION)
    level = models.CharField(max_length=10, choices=Level.choices, default=Level.INFO)
    message = models.CharField(max_length=255)
    details = models.JSONField(default=dict, blank=True, encoder=DjangoJSONEncoder)
    order_id = models.CharField(max_length=32, blank=True, db_index=True)
    shift_id = models.CharField(max_length=32, blank=True, db_index=True)

    class Meta:
        ordering = ["-timestamp", "-id"]
        indexes = [
            models.Index(fields=["type", "level"], name="syslog_type_level_idx"),
        ]

    def __str__(self):
        return f"[{self.level}] {self.type}: {self.message}"
