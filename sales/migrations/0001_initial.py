import decimal

import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


def _amount():
    return models.DecimalField(decimal_places=2, default=decimal.Decimal("0.00"), max_digits=12)


class Migration(migrations.Migration):
    initial = True

    dependencies = [
        ("banking", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="DailySale",
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
                ("date", models.DateField(unique=True)),
                ("fuel_sale", _amount()),
                ("store_sale", _amount()),
                ("gst", _amount()),
                ("store_discount", _amount()),
                ("penny_rounding", _amount()),
                ("daily_total", _amount()),
                ("card", _amount()),
                ("cash", _amount()),
                ("coupon", _amount()),
                ("delivery", _amount()),
                ("reported_total", _amount()),
                ("number_of_safedrops", models.PositiveIntegerField(default=0)),
                ("safedrops_amount", _amount()),
                ("cash_on_hand", _amount()),
                (
                    "approval_status",
                    models.CharField(
                        choices=[("pending", "Pending"), ("approved", "Approved")],
                        default="pending",
                        max_length=10,
                    ),
                ),
                ("notes", models.TextField(blank=True)),
                (
                    "user",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="daily_sales",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "verbose_name": "daily sale",
                "ordering": ["-date"],
            },
        ),
        migrations.CreateModel(
            name="SafedropResolution",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("amount", models.DecimalField(decimal_places=2, max_digits=12)),
                (
                    "type",
                    models.CharField(
                        choices=[("safedrops", "Safedrops"), ("cash_in_hand", "Cash in hand")],
                        default="safedrops",
                        max_length=20,
                    ),
                ),
                ("notes", models.TextField(blank=True)),
                ("reversed_at", models.DateTimeField(blank=True, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "account",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="safedrop_resolutions",
                        to="banking.account",
                    ),
                ),
                (
                    "daily_sale",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="safedrop_resolutions",
                        to="sales.dailysale",
                    ),
                ),
                (
                    "transaction",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="safedrop_resolutions",
                        to="banking.transaction",
                    ),
                ),
                (
                    "user",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="safedrop_resolutions",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "verbose_name": "safedrop resolution",
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(fields=["daily_sale", "type"], name="sales_res_sale_type_idx"),
                ],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(("amount__gt", 0)),
                        name="sales_resolution_amount_positive",
                    ),
                ],
            },
        ),
    ]
