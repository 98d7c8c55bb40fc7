import django.core.serializers.json
import django.utils.timezone
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="SystemLog",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("timestamp", models.DateTimeField(db_index=True, default=django.utils.timezone.now)),
                (
                    "type",
                    models.CharField(
                        choices=[("ACTION", "Action"), ("ERROR", "Error"), ("SYNC", "Sync"), ("SYSTEM", "System")],
                        default="ACTION",
                        max_length=10,
                    ),
                ),
                (
                    "level",
                    models.CharField(
                        choices=[("INFO", "Info"), ("WARN", "Warning"), ("CRITICAL", "Critical")],
                        default="INFO",
                        max_length=10,
                    ),
                ),
                ("message", models.CharField(max_length=255)),
                ("details", models.JSONField(blank=True, default=dict, encoder=django.core.serializers.json.DjangoJSONEncoder)),
                ("order_id", models.CharField(blank=True, db_index=True, max_length=32)),
                ("shift_id", models.CharField(blank=True, db_index=True, max_length=32)),
            ],
            options={
                "ordering": ["-timestamp", "-id"],
                "indexes": [models.Index(fields=["type", "level"], name="syslog_type_level_idx")],
            },
        ),
    ]
