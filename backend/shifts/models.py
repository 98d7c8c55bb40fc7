import uuid
from decimal import Decimal

from django.db import models
from django.db.models import Q
from django.utils import timezone
from django.utils.translation import gettext_lazy as _

from core_backend.exceptions import InvariantViolation


class Shift(models.Model):
    """
    A bounded work session backed by one opening cash float.

    Ids are day-scoped and sequential: "YYYYMMDD-S1", "YYYYMMDD-S2", ...
    At most one shift is OPEN at any time. Reconciliation figures are frozen
    on the row when the shift is closed and a CLOSED shift is never modified.
    """

    class ShiftStatus(models.TextChoices):
        OPEN = "OPEN", _("Open")
        CLOSED = "CLOSED", _("Closed")

    id = models.CharField(max_length=20, primary_key=True, editable=False)
    status = models.CharField(
        max_length=10, choices=ShiftStatus.choices, default=ShiftStatus.OPEN, db_index=True
    )
    start_time = models.DateTimeField(default=timezone.now, db_index=True)
    end_time = models.DateTimeField(null=True, blank=True)
    last_activity_at = models.DateTimeField(null=True, blank=True)

    opening_float_amount = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))
    closing_cash_counted = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True)
    cash_for_next_shift = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True)

    # Frozen at close
    expected_cash_in_drawer = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True)
    cash_over_short = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        null=True,
        blank=True,
        help_text="Counted cash minus expected cash. Negative means the drawer is short.",
    )
    cash_to_deposit = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True)
    total_sales = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True)
    total_cash_sales = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True)
    total_qr_sales = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True)
    total_paid_in = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True)
    total_paid_out = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True)
    total_refunds = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True)

    class Meta:
        ordering = ["-start_time"]
        constraints = [
            models.UniqueConstraint(
                fields=["status"],
                condition=Q(status="OPEN"),
                name="unique_open_shift",
            ),
        ]

    def __str__(self):
        return f"Shift {self.id} ({self.status})"

    @property
    def is_open(self):
        return self.status == self.ShiftStatus.OPEN

    def save(self, *args, **kwargs):
        if not self._state.adding and Shift.objects.filter(
            pk=self.pk, status=self.ShiftStatus.CLOSED
        ).exists():
            raise InvariantViolation(
                f"Shift {self.pk} is closed and cannot be modified.",
                details={"shift_id": self.pk},
            )
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise InvariantViolation(
            "Shifts are part of the cash ledger and cannot be deleted.",
            details={"shift_id": self.pk},
        )


class CashDrawerActivityQuerySet(models.QuerySet):
    def update(self, **kwargs):
        raise InvariantViolation("Cash drawer activities are append-only.")

    def delete(self):
        raise InvariantViolation("Cash drawer activities are append-only.")


class CashDrawerActivity(models.Model):
    """
    One append-only entry in a shift's cash drawer ledger.

    `amount` is always a non-negative magnitude; the activity type decides
    whether it adds to or removes from the drawer. `sequence` is the 1-based
    insertion order within the shift.
    """

    class ActivityType(models.TextChoices):
        SHIFT_START = "SHIFT_START", _("Shift start")
        SALE = "SALE", _("Sale")
        REFUND = "REFUND", _("Refund")
        PAID_IN = "PAID_IN", _("Paid in")
        PAID_OUT = "PAID_OUT", _("Paid out")
        SHIFT_END = "SHIFT_END", _("Shift end")
        MANUAL_OPEN = "MANUAL_OPEN", _("Manual drawer open")

    class PaymentMethod(models.TextChoices):
        CASH = "cash", _("Cash")
        QR = "qr", _("QR")
        NONE = "none", _("None")

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    shift = models.ForeignKey(Shift, on_delete=models.PROTECT, related_name="activities")
    sequence = models.PositiveIntegerField()
    timestamp = models.DateTimeField(default=timezone.now)
    type = models.CharField(max_length=20, choices=ActivityType.choices)
    amount = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))
    payment_method = models.CharField(
        max_length=10, choices=PaymentMethod.choices, default=PaymentMethod.NONE
    )
    description = models.CharField(max_length=255, blank=True)
    order = models.ForeignKey(
        "orders.Order",
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="drawer_activities",
    )

    objects = CashDrawerActivityQuerySet.as_manager()

    class Meta:
        ordering = ["shift", "sequence"]
        verbose_name_plural = "Cash drawer activities"
        constraints = [
            models.UniqueConstraint(fields=["shift", "sequence"], name="unique_activity_sequence"),
        ]
        indexes = [
            models.Index(fields=["shift", "type"], name="drawer_shift_type_idx"),
        ]

    def __str__(self):
        return f"{self.shift_id}#{self.sequence} {self.type} {self.amount}"

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise InvariantViolation(
                "Cash drawer activities are append-only.",
                details={"activity_id": str(self.pk)},
            )
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise InvariantViolation(
            "Cash drawer activities are append-only.",
            details={"activity_id": str(self.pk)},
        )
