from decimal import Decimal

from django.db import models
from django.utils import timezone
from django.utils.translation import gettext_lazy as _

from core_backend.exceptions import InvariantViolation

REVERSAL_PREFIX = "R-"


class Order(models.Model):
    """
    One sale, keyed by a day-scoped sequential id ("YYYYMMDD-NNNN").

    Orders are never deleted. Cancelling a completed order marks it cancelled
    and inserts a paired reversal order "R-<id>" whose items and money are the
    negation of the original.
    """

    class OrderStatus(models.TextChoices):
        COOKING = "cooking", _("Cooking")  # Placed and paid, in the kitchen
        READY = "ready", _("Ready")  # Waiting for pickup/serving
        COMPLETED = "completed", _("Completed")
        CANCELLED = "cancelled", _("Cancelled")  # Reversed by an R- order

    class PaymentMethod(models.TextChoices):
        CASH = "cash", _("Cash")
        QR = "qr", _("QR")

    class SyncStatus(models.TextChoices):
        PENDING = "pending", _("Pending")
        SYNCED = "synced", _("Synced")
        # Reserved for remote-side rejections; batch failures keep orders pending.
        FAILED = "failed", _("Failed")

    id = models.CharField(max_length=32, primary_key=True, editable=False)
    shift = models.ForeignKey(
        "shifts.Shift",
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="orders",
        help_text="Shift the order was placed in (or reversed in, for reversal orders).",
    )
    timestamp = models.DateTimeField(default=timezone.now)

    # --- Money (two decimal places, banker's rounding) ---
    subtotal = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))
    discount_value = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))
    service_charge_value = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))
    tax = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))
    total = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))
    vat_rate = models.DecimalField(
        max_digits=5,
        decimal_places=2,
        default=Decimal("0.00"),
        help_text="VAT percent applied to this order; 0 when VAT was off.",
    )

    payment_method = models.CharField(max_length=10, choices=PaymentMethod.choices)
    cash_received = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True)

    # --- Lifecycle ---
    status = models.CharField(max_length=20, choices=OrderStatus.choices, default=OrderStatus.COOKING)
    sync_status = models.CharField(max_length=10, choices=SyncStatus.choices, default=SyncStatus.PENDING)
    synced_at = models.DateTimeField(null=True, blank=True)
    reversal_of = models.OneToOneField(
        "self",
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="reversal",
    )
    cancelled_at = models.DateTimeField(null=True, blank=True)
    ready_at = models.DateTimeField(null=True, blank=True)
    preparation_time_seconds = models.PositiveIntegerField(null=True, blank=True)

    class Meta:
        ordering = ["-timestamp", "-id"]
        verbose_name = _("Order")
        verbose_name_plural = _("Orders")
        indexes = [
            models.Index(fields=["timestamp"], name="order_timestamp_idx"),
            models.Index(fields=["status", "timestamp"], name="order_status_ts_idx"),
            models.Index(fields=["sync_status", "timestamp"], name="order_sync_ts_idx"),
        ]

    def __str__(self):
        return f"Order {self.id} ({self.status}) {self.total}"

    @property
    def is_reversal(self):
        return self.reversal_of_id is not None

    @property
    def change_due(self):
        if self.cash_received is None or self.payment_method != self.PaymentMethod.CASH:
            return None
        return self.cash_received - self.total

    @property
    def business_date(self):
        return timezone.localdate(self.timestamp)

    def save(self, *args, **kwargs):
        # Cancelled originals and reversals are frozen; only sync bookkeeping moves.
        update_fields = kwargs.get("update_fields")
        if not self._state.adding and not (
            update_fields and set(update_fields) <= {"sync_status", "synced_at"}
        ):
            if Order.objects.filter(pk=self.pk).filter(
                models.Q(status=self.OrderStatus.CANCELLED) | models.Q(reversal_of__isnull=False)
            ).exists():
                raise InvariantViolation(
                    f"Order {self.pk} is final and cannot be modified.",
                    details={"order_id": self.pk},
                )
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise InvariantViolation(
            "Orders are never deleted; cancel the order instead.",
            details={"order_id": self.pk},
        )


class OrderItem(models.Model):
    """
    A line on an order, with the price captured at the time of sale.
    Quantities are negative on reversal orders.
    """

    order = models.ForeignKey(Order, on_delete=models.CASCADE, related_name="items")
    menu_item_id = models.CharField(max_length=64, blank=True)
    name = models.CharField(max_length=200)
    price = models.DecimalField(max_digits=12, decimal_places=2)
    quantity = models.IntegerField()

    class Meta:
        ordering = ["id"]
        verbose_name = _("Order Item")
        verbose_name_plural = _("Order Items")

    def __str__(self):
        return f"{self.quantity} x {self.name} on Order {self.order_id}"

    @property
    def total_price(self):
        return self.price * self.quantity
