import django.utils.timezone
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="SyncRun",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                (
                    "trigger",
                    models.CharField(
                        choices=[
                            ("manual", "Manual"),
                            ("scheduled", "Scheduled"),
                            ("order_placed", "Order placed"),
                            ("order_completed", "Order completed"),
                            ("order_cancelled", "Order cancelled"),
                            ("paid_in", "Paid in"),
                            ("paid_out", "Paid out"),
                        ],
                        default="manual",
                        max_length=20,
                    ),
                ),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("running", "Running"),
                            ("success", "Success"),
                            ("failed", "Failed"),
                            ("nothing_pending", "Nothing pending"),
                            ("not_configured", "Not configured"),
                        ],
                        default="running",
                        max_length=20,
                    ),
                ),
                ("started_at", models.DateTimeField(db_index=True, default=django.utils.timezone.now)),
                ("finished_at", models.DateTimeField(blank=True, null=True)),
                ("order_count", models.PositiveIntegerField(default=0)),
                ("order_ids", models.JSONField(blank=True, default=list)),
                ("error", models.TextField(blank=True)),
                ("remote_message", models.CharField(blank=True, max_length=255)),
            ],
            options={
                "verbose_name": "Sync Run",
                "verbose_name_plural": "Sync Runs",
                "ordering": ["-started_at", "-id"],
            },
        ),
    ]
