import decimal

import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


def lifecycle_fields():
    return [
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
    ]


def amount():
    return models.DecimalField(decimal_places=2, default=decimal.Decimal("0.00"), max_digits=12)


class Migration(migrations.Migration):
    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Employee",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                *lifecycle_fields(),
                ("full_legal_name", models.CharField(max_length=255)),
                ("preferred_name", models.CharField(blank=True, max_length=255)),
                ("email", models.EmailField(blank=True, max_length=254)),
                ("phone_number", models.CharField(blank=True, max_length=30)),
                ("address", models.CharField(blank=True, max_length=255)),
                ("postal_code", models.CharField(blank=True, max_length=20)),
                ("country", models.CharField(blank=True, max_length=80)),
                ("sin_number", models.CharField(blank=True, max_length=20)),
                ("position", models.CharField(blank=True, max_length=120)),
                ("department", models.CharField(blank=True, max_length=120)),
                ("hire_date", models.DateField(blank=True, null=True)),
                ("hourly_rate", models.DecimalField(decimal_places=2, default=decimal.Decimal("0.00"), max_digits=10)),
                (
                    "employment_status",
                    models.CharField(
                        choices=[("active", "Active"), ("inactive", "Inactive")],
                        default="active",
                        max_length=10,
                    ),
                ),
                (
                    "user",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="employees",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "verbose_name": "employee",
                "ordering": ["full_legal_name"],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(hourly_rate__gte=0),
                        name="employee_rate_non_negative",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="Payroll",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                *lifecycle_fields(),
                ("pay_date", models.DateField()),
                ("pay_period", models.CharField(blank=True, max_length=255)),
                ("payment_date", models.DateField(blank=True, null=True)),
                ("regular_hours", amount()),
                ("regular_rate", amount()),
                ("regular_current", amount()),
                ("stat_hours", amount()),
                ("stat_rate", amount()),
                ("stat_current", amount()),
                ("overtime_hours", amount()),
                ("overtime_rate", amount()),
                ("overtime_current", amount()),
                ("total_hours", amount()),
                ("total_current", amount()),
                ("cpp_emp_current", amount()),
                ("ei_emp_current", amount()),
                ("fit_current", amount()),
                ("total_deduction_current", amount()),
                ("vac_earned_current", amount()),
                ("vac_paid_current", amount()),
                ("net_pay", amount()),
                (
                    "employee",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="payrolls",
                        to="payroll.employee",
                    ),
                ),
            ],
            options={
                "verbose_name": "payroll",
                "ordering": ["-pay_date", "-id"],
                "indexes": [
                    models.Index(fields=["employee", "pay_date"], name="payroll_emp_pay_date_idx"),
                ],
            },
        ),
        migrations.CreateModel(
            name="WorkHour",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("date", models.DateField()),
                ("start_time", models.TimeField(blank=True, null=True)),
                ("end_time", models.TimeField(blank=True, null=True)),
                ("total_hours", models.DecimalField(blank=True, decimal_places=2, max_digits=5, null=True)),
                ("project", models.CharField(blank=True, max_length=255)),
                ("description", models.TextField(blank=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "employee",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="work_hours",
                        to="payroll.employee",
                    ),
                ),
                (
                    "user",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="work_hours",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "ordering": ["-date", "-start_time"],
                "indexes": [
                    models.Index(fields=["employee", "date"], name="work_hour_emp_date_idx"),
                ],
            },
        ),
    ]
