import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    dependencies = [
        ("orders", "0001_initial"),
        ("shifts", "0001_initial"),
    ]

    operations = [
        migrations.AddField(
            model_name="cashdraweractivity",
            name="order",
            field=models.ForeignKey(
                blank=True,
                null=True,
                on_delete=django.db.models.deletion.PROTECT,
                related_name="drawer_activities",
                to="orders.order",
            ),
        ),
    ]
