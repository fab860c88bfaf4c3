"""
======================================================
PATH: payroll/models/payroll.py
======================================================
PAYROLL (one pay period, one employee)

Only current-period amounts are stored. Year-to-date figures are computed
from the employee's other payrolls when a pay stub is built, so editing or
archiving an earlier payroll never leaves stale YTD columns behind.

Totals left at zero are derived on save:
- total_hours            = regular + stat + overtime hours
- total_current (gross)  = regular + stat + overtime current
- total_deduction        = cpp + ei + fit
- net_pay                = gross + vacation paid - deductions
"""

from __future__ import annotations

from decimal import Decimal

from django.db import models

from core.lifecycle import LifecycleModel

ZERO = Decimal("0.00")


def _amount():
    return models.DecimalField(max_digits=12, decimal_places=2, default=ZERO)


EARNING_LINES = ("regular", "stat", "overtime")
DEDUCTION_FIELDS = ("cpp_emp_current", "ei_emp_current", "fit_current")


class Payroll(LifecycleModel):
    employee = models.ForeignKey(
        "payroll.Employee",
        on_delete=models.PROTECT,
        related_name="payrolls",
    )
    pay_date = models.DateField()
    pay_period = models.CharField(max_length=255, blank=True)
    payment_date = models.DateField(null=True, blank=True)

    regular_hours = _amount()
    regular_rate = _amount()
    regular_current = _amount()
    stat_hours = _amount()
    stat_rate = _amount()
    stat_current = _amount()
    overtime_hours = _amount()
    overtime_rate = _amount()
    overtime_current = _amount()

    total_hours = _amount()
    total_current = _amount()

    cpp_emp_current = _amount()
    ei_emp_current = _amount()
    fit_current = _amount()
    total_deduction_current = _amount()

    vac_earned_current = _amount()
    vac_paid_current = _amount()

    net_pay = _amount()

    class Meta:
        ordering = ["-pay_date", "-id"]
        verbose_name = "payroll"
        indexes = [
            models.Index(fields=["employee", "pay_date"], name="payroll_emp_pay_date_idx"),
        ]

    def __str__(self):
        return f"{self.employee_id} @ {self.pay_date}"

    def fill_totals(self):
        if not self.total_hours:
            self.total_hours = sum((getattr(self, f"{line}_hours") for line in EARNING_LINES), ZERO)
        if not self.total_current:
            self.total_current = sum((getattr(self, f"{line}_current") for line in EARNING_LINES), ZERO)
        if not self.total_deduction_current:
            self.total_deduction_current = sum((getattr(self, f) for f in DEDUCTION_FIELDS), ZERO)
        if not self.net_pay:
            self.net_pay = self.total_current + self.vac_paid_current - self.total_deduction_current

    def save(self, *args, **kwargs):
        if not kwargs.get("update_fields"):
            self.fill_totals()
            self.full_clean()
        return super().save(*args, **kwargs)
