import decimal

import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):
    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="FuelPrice",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                (
                    "status",
                    models.CharField(
                        choices=[("active", "Active"), ("archived", "Archived"), ("purged", "Purged")],
                        db_index=True,
                        default="active",
                        max_length=10,
                    ),
                ),
                ("archived_at", models.DateTimeField(blank=True, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("date", models.DateField(default=django.utils.timezone.localdate)),
                (
                    "shift",
                    models.CharField(
                        blank=True,
                        choices=[("morning", "Morning"), ("evening", "Evening")],
                        max_length=10,
                    ),
                ),
                ("regular_price", models.DecimalField(blank=True, decimal_places=3, max_digits=8, null=True)),
                ("midgrade_price", models.DecimalField(blank=True, decimal_places=3, max_digits=8, null=True)),
                ("premium_price", models.DecimalField(blank=True, decimal_places=3, max_digits=8, null=True)),
                ("diesel_price", models.DecimalField(blank=True, decimal_places=3, max_digits=8, null=True)),
                ("added_regular", models.DecimalField(decimal_places=3, default=decimal.Decimal("0.000"), max_digits=10)),
                (
                    "user",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="fuel_prices",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "verbose_name": "fuel price",
                "ordering": ["-date", "-created_at"],
                "indexes": [
                    models.Index(fields=["date", "shift"], name="fuel_price_date_shift_idx"),
                ],
            },
        ),
    ]
