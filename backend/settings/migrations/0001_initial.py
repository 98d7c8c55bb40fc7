from decimal import Decimal

import django.core.validators
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="GlobalSettings",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("shop_name", models.CharField(default="My Shop", help_text="Name printed on receipts and sent with synced orders.", max_length=100)),
                ("currency", models.CharField(default="THB", help_text="Three-letter currency code (ISO 4217).", max_length=3)),
                ("vat_enabled_by_default", models.BooleanField(default=False, help_text="Whether VAT is applied to new orders unless the cashier overrides it.")),
                (
                    "vat_rate_percent",
                    models.DecimalField(
                        decimal_places=2,
                        default=Decimal("7.00"),
                        help_text="VAT percent applied to (discounted subtotal + service charge).",
                        max_digits=5,
                        validators=[
                            django.core.validators.MinValueValidator(Decimal("0")),
                            django.core.validators.MaxValueValidator(Decimal("100")),
                        ],
                    ),
                ),
                ("service_charge_enabled", models.BooleanField(default=False, help_text="Whether a service charge is added to every order.")),
                (
                    "service_charge_rate_percent",
                    models.DecimalField(
                        decimal_places=2,
                        default=Decimal("10.00"),
                        help_text="Service charge percent applied to the discounted subtotal.",
                        max_digits=5,
                        validators=[
                            django.core.validators.MinValueValidator(Decimal("0")),
                            django.core.validators.MaxValueValidator(Decimal("100")),
                        ],
                    ),
                ),
                (
                    "max_shifts_per_day",
                    models.PositiveSmallIntegerField(
                        default=3,
                        help_text="Maximum number of shifts that may be started on one calendar day.",
                        validators=[django.core.validators.MinValueValidator(1)],
                    ),
                ),
                ("auto_sync_enabled", models.BooleanField(default=True, help_text="Push pending orders to the remote ledger automatically.")),
                (
                    "sync_interval_minutes",
                    models.PositiveIntegerField(
                        default=15,
                        help_text="Minutes between scheduled sync passes while auto-sync is on.",
                        validators=[django.core.validators.MinValueValidator(1)],
                    ),
                ),
                (
                    "sync_batch_size",
                    models.PositiveIntegerField(
                        default=200,
                        help_text="Maximum number of pending orders sent in one batch.",
                        validators=[django.core.validators.MinValueValidator(1)],
                    ),
                ),
                (
                    "remote_ledger_url",
                    models.URLField(
                        blank=True,
                        help_text="Remote ledger endpoint. Falls back to the REMOTE_LEDGER_URL environment variable.",
                        max_length=500,
                    ),
                ),
                (
                    "daily_summary_mode",
                    models.CharField(
                        choices=[("gross", "Gross (cancellations are not netted)"), ("net", "Net (cancellations are subtracted)")],
                        default="gross",
                        help_text="Whether cancelled orders are subtracted from the daily summary.",
                        max_length=10,
                    ),
                ),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "verbose_name": "Global Settings",
                "verbose_name_plural": "Global Settings",
            },
        ),
    ]
