from decimal import Decimal

import django.db.models.deletion
import django.utils.timezone
from django.db import migrations, models


def money(**kwargs):
    return models.DecimalField(decimal_places=2, max_digits=12, **kwargs)


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("shifts", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="Order",
            fields=[
                ("id", models.CharField(editable=False, max_length=32, primary_key=True, serialize=False)),
                ("timestamp", models.DateTimeField(default=django.utils.timezone.now)),
                ("subtotal", money(default=Decimal("0.00"))),
                ("discount_value", money(default=Decimal("0.00"))),
                ("service_charge_value", money(default=Decimal("0.00"))),
                ("tax", money(default=Decimal("0.00"))),
                ("total", money(default=Decimal("0.00"))),
                (
                    "vat_rate",
                    models.DecimalField(
                        decimal_places=2,
                        default=Decimal("0.00"),
                        help_text="VAT percent applied to this order; 0 when VAT was off.",
                        max_digits=5,
                    ),
                ),
                ("payment_method", models.CharField(choices=[("cash", "Cash"), ("qr", "QR")], max_length=10)),
                ("cash_received", money(blank=True, null=True)),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("cooking", "Cooking"),
                            ("ready", "Ready"),
                            ("completed", "Completed"),
                            ("cancelled", "Cancelled"),
                        ],
                        default="cooking",
                        max_length=20,
                    ),
                ),
                (
                    "sync_status",
                    models.CharField(
                        choices=[("pending", "Pending"), ("synced", "Synced"), ("failed", "Failed")],
                        default="pending",
                        max_length=10,
                    ),
                ),
                ("synced_at", models.DateTimeField(blank=True, null=True)),
                ("cancelled_at", models.DateTimeField(blank=True, null=True)),
                ("ready_at", models.DateTimeField(blank=True, null=True)),
                ("preparation_time_seconds", models.PositiveIntegerField(blank=True, null=True)),
                (
                    "reversal_of",
                    models.OneToOneField(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="reversal",
                        to="orders.order",
                    ),
                ),
                (
                    "shift",
                    models.ForeignKey(
                        blank=True,
                        help_text="Shift the order was placed in (or reversed in, for reversal orders).",
                        null=True,
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="orders",
                        to="shifts.shift",
                    ),
                ),
            ],
            options={
                "verbose_name": "Order",
                "verbose_name_plural": "Orders",
                "ordering": ["-timestamp", "-id"],
                "indexes": [
                    models.Index(fields=["timestamp"], name="order_timestamp_idx"),
                    models.Index(fields=["status", "timestamp"], name="order_status_ts_idx"),
                    models.Index(fields=["sync_status", "timestamp"], name="order_sync_ts_idx"),
                ],
            },
        ),
        migrations.CreateModel(
            name="OrderItem",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("menu_item_id", models.CharField(blank=True, max_length=64)),
                ("name", models.CharField(max_length=200)),
                ("price", models.DecimalField(decimal_places=2, max_digits=12)),
                ("quantity", models.IntegerField()),
                (
                    "order",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="items",
                        to="orders.order",
                    ),
                ),
            ],
            options={
                "verbose_name": "Order Item",
                "verbose_name_plural": "Order Items",
                "ordering": ["id"],
            },
        ),
    ]
