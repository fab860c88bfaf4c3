# payroll/models/employee.py

from __future__ import annotations

from decimal import Decimal

from django.conf import settings
from django.db import models

from core.lifecycle import LifecycleError, LifecycleModel
from payroll.models.payroll import Payroll


class Employee(LifecycleModel):
    """
    HR record for one employee.

    `employment_status` (active/inactive) is HR state; `status` is the record
    lifecycle (active/archived) shared by every business model.
    """

    EMPLOYMENT_ACTIVE = "active"
    EMPLOYMENT_INACTIVE = "inactive"

    EMPLOYMENT_CHOICES = [
        (EMPLOYMENT_ACTIVE, "Active"),
        (EMPLOYMENT_INACTIVE, "Inactive"),
    ]

    full_legal_name = models.CharField(max_length=255)
    preferred_name = models.CharField(max_length=255, blank=True)
    email = models.EmailField(blank=True)
    phone_number = models.CharField(max_length=30, blank=True)

    address = models.CharField(max_length=255, blank=True)
    postal_code = models.CharField(max_length=20, blank=True)
    country = models.CharField(max_length=80, blank=True)
    sin_number = models.CharField(max_length=20, blank=True)

    position = models.CharField(max_length=120, blank=True)
    department = models.CharField(max_length=120, blank=True)
    hire_date = models.DateField(null=True, blank=True)
    hourly_rate = models.DecimalField(max_digits=10, decimal_places=2, default=Decimal("0.00"))
    employment_status = models.CharField(
        max_length=10,
        choices=EMPLOYMENT_CHOICES,
        default=EMPLOYMENT_ACTIVE,
    )

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="employees",
    )

    class Meta:
        ordering = ["full_legal_name"]
        verbose_name = "employee"
        constraints = [
            models.CheckConstraint(
                condition=models.Q(hourly_rate__gte=0),
                name="employee_rate_non_negative",
            ),
        ]

    def __str__(self):
        return self.display_name

    @property
    def display_name(self) -> str:
        return self.preferred_name or self.full_legal_name

    def save(self, *args, **kwargs):
        if not kwargs.get("update_fields"):
            self.full_clean()
        return super().save(*args, **kwargs)

    def assert_can_purge(self):
        if self.work_hours.exists() or Payroll.all_objects.filter(employee=self).exists():
            raise LifecycleError(
                "Employee has work hours or payroll records; archive it instead."
            )
