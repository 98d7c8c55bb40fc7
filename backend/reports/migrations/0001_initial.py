from decimal import Decimal

from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="DailySummary",
            fields=[
                ("date", models.DateField(primary_key=True, serialize=False)),
                ("total_sales", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=14)),
                ("transaction_count", models.IntegerField(default=0)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "ordering": ["-date"],
                "verbose_name_plural": "Daily summaries",
            },
        ),
    ]
