"""
======================================================
PATH: payroll/models/work_hour.py
======================================================
WORK HOURS

One shift worked by one employee. total_hours is derived from start/end when
not given; an end time earlier than the start time means the shift crossed
midnight (22:00 -> 06:00 is 8 hours).
"""

from __future__ import annotations

from datetime import datetime, time, timedelta
from decimal import ROUND_HALF_UP, Decimal

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import models

from core.money import TWOPLACES


def compute_total_hours(start: time, end: time) -> Decimal:
    if start == end:
        raise ValidationError({"end_time": ["End time must differ from start time."]})

    anchor = datetime(2000, 1, 1)
    begin = datetime.combine(anchor, start)
    finish = datetime.combine(anchor, end)
    if finish < begin:
        finish += timedelta(days=1)

    minutes = Decimal((finish - begin).seconds // 60)
    return (minutes / Decimal("60")).quantize(TWOPLACES, rounding=ROUND_HALF_UP)


class WorkHour(models.Model):
    employee = models.ForeignKey(
        "payroll.Employee",
        on_delete=models.PROTECT,
        related_name="work_hours",
    )
    date = models.DateField()
    start_time = models.TimeField(null=True, blank=True)
    end_time = models.TimeField(null=True, blank=True)
    total_hours = models.DecimalField(max_digits=5, decimal_places=2, null=True, blank=True)

    project = models.CharField(max_length=255, blank=True)
    description = models.TextField(blank=True)

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="work_hours",
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-date", "-start_time"]
        indexes = [
            models.Index(fields=["employee", "date"], name="work_hour_emp_date_idx"),
        ]

    def __str__(self):
        return f"{self.employee_id} {self.date} ({self.total_hours}h)"

    def clean(self):
        has_times = self.start_time is not None and self.end_time is not None
        if self.start_time is not None and self.end_time is None:
            raise ValidationError({"end_time": ["End time is required when a start time is given."]})

        if has_times:
            self.total_hours = compute_total_hours(self.start_time, self.end_time)
        elif self.total_hours is None:
            raise ValidationError({"total_hours": ["Give start/end times or total hours."]})

        if not (Decimal("0") < self.total_hours <= Decimal("24")):
            raise ValidationError({"total_hours": ["Total hours must be between 0 and 24."]})

    def save(self, *args, **kwargs):
        self.full_clean()
        return super().save(*args, **kwargs)
