"""
Sync app models.

Infrastructure bookkeeping for pushing orders to the remote ledger. The
outbox itself is the orders table (Order.sync_status); SyncRun records
what each pass did and SyncLease keeps two passes from overlapping.
"""
import uuid
from datetime import timedelta

from django.db import models
from django.db.models import Q
from django.utils import timezone
from django.utils.translation import gettext_lazy as _


class SyncRun(models.Model):
    """One sync pass against the remote ledger."""

    class Trigger(models.TextChoices):
        MANUAL = "manual", _("Manual")
        SCHEDULED = "scheduled", _("Scheduled")
        ORDER_PLACED = "order_placed", _("Order placed")
        ORDER_COMPLETED = "order_completed", _("Order completed")
        ORDER_CANCELLED = "order_cancelled", _("Order cancelled")
        PAID_IN = "paid_in", _("Paid in")
        PAID_OUT = "paid_out", _("Paid out")

    class RunStatus(models.TextChoices):
        RUNNING = "running", _("Running")
        SUCCESS = "success", _("Success")
        FAILED = "failed", _("Failed")
        NOTHING_PENDING = "nothing_pending", _("Nothing pending")
        NOT_CONFIGURED = "not_configured", _("Not configured")

    trigger = models.CharField(max_length=20, choices=Trigger.choices, default=Trigger.MANUAL)
    status = models.CharField(max_length=20, choices=RunStatus.choices, default=RunStatus.RUNNING)
    started_at = models.DateTimeField(default=timezone.now, db_index=True)
    finished_at = models.DateTimeField(null=True, blank=True)
    order_count = models.PositiveIntegerField(default=0)
    order_ids = models.JSONField(default=list, blank=True)
    error = models.TextField(blank=True)
    remote_message = models.CharField(max_length=255, blank=True)

    class Meta:
        verbose_name = _("Sync Run")
        verbose_name_plural = _("Sync Runs")
        ordering = ["-started_at", "-id"]

    def __str__(self):
        return f"Sync {self.started_at:%Y-%m-%d %H:%M:%S} [{self.trigger}] {self.status} ({self.order_count} orders)"

    @property
    def duration_seconds(self):
        if not self.finished_at:
            return None
        return (self.finished_at - self.started_at).total_seconds()


class SyncLease(models.Model):
    """
    In-flight flag for sync passes, shared by every process that uses the
    database: web requests, Celery worker children and beat-driven passes.

    A single row (pk=1). A pass holds the lease while `expires_at` is in the
    future; acquiring it is one conditional UPDATE, so two processes can never
    both succeed. The expiry frees the lease if its holder dies mid-pass.
    """

    id = models.PositiveSmallIntegerField(primary_key=True, default=1, editable=False)
    holder = models.CharField(max_length=32, blank=True)
    trigger = models.CharField(max_length=20, blank=True)
    acquired_at = models.DateTimeField(null=True, blank=True)
    expires_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        verbose_name = _("Sync Lease")
        verbose_name_plural = _("Sync Lease")

    def __str__(self):
        if self.is_held():
            return f"Sync lease held by {self.holder} [{self.trigger}] until {self.expires_at:%H:%M:%S}"
        return "Sync lease free"

    def is_held(self, now=None):
        return self.expires_at is not None and self.expires_at > (now or timezone.now())

    @classmethod
    def acquire(cls, trigger, timeout_seconds):
        """Take the lease. Returns the holder token, or None if it is held."""
        now = timezone.now()
        cls.objects.get_or_create(pk=1)
        token = uuid.uuid4().hex
        taken = (
            cls.objects.filter(pk=1)
            .filter(Q(expires_at__isnull=True) | Q(expires_at__lte=now))
            .update(
                holder=token,
                trigger=trigger,
                acquired_at=now,
                expires_at=now + timedelta(seconds=timeout_seconds),
            )
        )
        return token if taken else None

    @classmethod
    def release(cls, token):
        # Only the holder may release; an expired lease may already be someone else's
        return cls.objects.filter(pk=1, holder=token).update(holder="", expires_at=None)

    @classmethod
    def current(cls):
        return cls.objects.filter(pk=1).first()
