import uuid
from decimal import Decimal

import django.db.models.deletion
import django.utils.timezone
from django.db import migrations, models


def money(**kwargs):
    return models.DecimalField(decimal_places=2, max_digits=12, **kwargs)


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Shift",
            fields=[
                ("id", models.CharField(editable=False, max_length=20, primary_key=True, serialize=False)),
                (
                    "status",
                    models.CharField(
                        choices=[("OPEN", "Open"), ("CLOSED", "Closed")],
                        db_index=True,
                        default="OPEN",
                        max_length=10,
                    ),
                ),
                ("start_time", models.DateTimeField(db_index=True, default=django.utils.timezone.now)),
                ("end_time", models.DateTimeField(blank=True, null=True)),
                ("last_activity_at", models.DateTimeField(blank=True, null=True)),
                ("opening_float_amount", money(default=Decimal("0.00"))),
                ("closing_cash_counted", money(blank=True, null=True)),
                ("cash_for_next_shift", money(blank=True, null=True)),
                ("expected_cash_in_drawer", money(blank=True, null=True)),
                (
                    "cash_over_short",
                    money(
                        blank=True,
                        help_text="Counted cash minus expected cash. Negative means the drawer is short.",
                        null=True,
                    ),
                ),
                ("cash_to_deposit", money(blank=True, null=True)),
                ("total_sales", money(blank=True, null=True)),
                ("total_cash_sales", money(blank=True, null=True)),
                ("total_qr_sales", money(blank=True, null=True)),
                ("total_paid_in", money(blank=True, null=True)),
                ("total_paid_out", money(blank=True, null=True)),
                ("total_refunds", money(blank=True, null=True)),
            ],
            options={
                "ordering": ["-start_time"],
                "constraints": [
                    models.UniqueConstraint(
                        condition=models.Q(("status", "OPEN")),
                        fields=("status",),
                        name="unique_open_shift",
                    )
                ],
            },
        ),
        migrations.CreateModel(
            name="CashDrawerActivity",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("sequence", models.PositiveIntegerField()),
                ("timestamp", models.DateTimeField(default=django.utils.timezone.now)),
                (
                    "type",
                    models.CharField(
                        choices=[
                            ("SHIFT_START", "Shift start"),
                            ("SALE", "Sale"),
                            ("REFUND", "Refund"),
                            ("PAID_IN", "Paid in"),
                            ("PAID_OUT", "Paid out"),
                            ("SHIFT_END", "Shift end"),
                            ("MANUAL_OPEN", "Manual drawer open"),
                        ],
                        max_length=20,
                    ),
                ),
                ("amount", money(default=Decimal("0.00"))),
                (
                    "payment_method",
                    models.CharField(
                        choices=[("cash", "Cash"), ("qr", "QR"), ("none", "None")],
                        default="none",
                        max_length=10,
                    ),
                ),
                ("description", models.CharField(blank=True, max_length=255)),
                (
                    "shift",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="activities",
                        to="shifts.shift",
                    ),
                ),
            ],
            options={
                "verbose_name_plural": "Cash drawer activities",
                "ordering": ["shift", "sequence"],
                "indexes": [models.Index(fields=["shift", "type"], name="drawer_shift_type_idx")],
                "constraints": [
                    models.UniqueConstraint(fields=("shift", "sequence"), name="unique_activity_sequence")
                ],
            },
        ),
    ]
