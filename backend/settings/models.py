from decimal import Decimal

from django.core.exceptions import ValidationError
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models
from django.utils.translation import gettext_lazy as _


class DailySummaryMode(models.TextChoices):
    GROSS = "gross", _("Gross (cancellations are not netted)")
    NET = "net", _("Net (cancellations are subtracted)")


class GlobalSettings(models.Model):
    """
    Store-wide settings for this terminal.

    There is exactly one row (pk=1). Use GlobalSettings.load() or the
    settings.config.app_settings singleton instead of querying directly.
    """

    SINGLETON_PK = 1

    # === STORE ===
    shop_name = models.CharField(
        max_length=100,
        default="My Shop",
        help_text="Name printed on receipts and sent with synced orders.",
    )
    currency = models.CharField(
        max_length=3,
        default="THB",
        help_text="Three-letter currency code (ISO 4217).",
    )

    # === TAX & SERVICE CHARGE ===
    vat_enabled_by_default = models.BooleanField(
        default=False,
        help_text="Whether VAT is applied to new orders unless the cashier overrides it.",
    )
    vat_rate_percent = models.DecimalField(
        max_digits=5,
        decimal_places=2,
        default=Decimal("7.00"),
        validators=[MinValueValidator(Decimal("0")), MaxValueValidator(Decimal("100"))],
        help_text="VAT percent applied to (discounted subtotal + service charge).",
    )
    service_charge_enabled = models.BooleanField(
        default=False,
        help_text="Whether a service charge is added to every order.",
    )
    service_charge_rate_percent = models.DecimalField(
        max_digits=5,
        decimal_places=2,
        default=Decimal("10.00"),
        validators=[MinValueValidator(Decimal("0")), MaxValueValidator(Decimal("100"))],
        help_text="Service charge percent applied to the discounted subtotal.",
    )

    # === SHIFTS ===
    max_shifts_per_day = models.PositiveSmallIntegerField(
        default=3,
        validators=[MinValueValidator(1)],
        help_text="Maximum number of shifts that may be started on one calendar day.",
    )

    # === REMOTE SYNC ===
    auto_sync_enabled = models.BooleanField(
        default=True,
        help_text="Push pending orders to the remote ledger automatically.",
    )
    sync_interval_minutes = models.PositiveIntegerField(
        default=15,
        validators=[MinValueValidator(1)],
        help_text="Minutes between scheduled sync passes while auto-sync is on.",
    )
    sync_batch_size = models.PositiveIntegerField(
        default=200,
        validators=[MinValueValidator(1)],
        help_text="Maximum number of pending orders sent in one batch.",
    )
    remote_ledger_url = models.URLField(
        max_length=500,
        blank=True,
        help_text="Remote ledger endpoint. Falls back to the REMOTE_LEDGER_URL environment variable.",
    )

    # === REPORTING ===
    daily_summary_mode = models.CharField(
        max_length=10,
        choices=DailySummaryMode.choices,
        default=DailySummaryMode.GROSS,
        help_text="Whether cancelled orders are subtracted from the daily summary.",
    )

    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = "Global Settings"
        verbose_name_plural = "Global Settings"

    def __str__(self):
        return f"Global Settings ({self.shop_name})"

    def clean(self):
        if len(self.currency or "") != 3:
            raise ValidationError({"currency": "Currency must be a three-letter ISO 4217 code."})

    def save(self, *args, **kwargs):
        self.pk = self.SINGLETON_PK
        self.currency = (self.currency or "").upper()
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise ValidationError("Global settings cannot be deleted.")

    @classmethod
    def load(cls):
        obj, _created = cls.objects.get_or_create(pk=cls.SINGLETON_PK)
        return obj
