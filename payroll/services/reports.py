"""
======================================================
PATH: payroll/services/reports.py
======================================================
PAYROLL REPORTS

Plain-data builders (dicts of Decimals / dates) consumed by the JSON API and
by the HTML templates:

- work_hour_summary()       totals for one employee and/or date window
- build_work_hour_report()  per-employee hours x hourly rate for a period
- build_pay_stub()          current + year-to-date lines for one payroll
- payroll_summary()         payroll count, this year's net pay, latest payroll

YTD rule: same employee, same calendar year, pay_date on or before the stub's
pay_date, active rows only (the stub's own payroll always counts).
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal

from django.db.models import Count, Q, Sum
from django.template.loader import render_to_string
from django.utils import timezone

from core.lifecycle import Status
from core.money import TWOPLACES, ZERO
from payroll.models import Employee, Payroll, WorkHour

YTD_FIELDS = (
    "regular_hours",
    "regular_current",
    "stat_hours",
    "stat_current",
    "overtime_hours",
    "overtime_current",
    "total_hours",
    "total_current",
    "cpp_emp_current",
    "ei_emp_current",
    "fit_current",
    "total_deduction_current",
    "vac_earned_current",
    "vac_paid_current",
    "net_pay",
)


def _q(value) -> Decimal:
    return Decimal(value or 0).quantize(TWOPLACES, rounding=ROUND_HALF_UP)


# -------------------------------------------------
# WORK HOURS
# -------------------------------------------------
def work_hours_between(*, employee_id=None, start=None, end=None):
    qs = WorkHour.objects.all()
    if employee_id:
        qs = qs.filter(employee_id=employee_id)
    if start:
        qs = qs.filter(date__gte=start)
    if end:
        qs = qs.filter(date__lte=end)
    return qs


def work_hour_summary(*, employee_id=None, start=None, end=None) -> dict:
    agg = work_hours_between(employee_id=employee_id, start=start, end=end).aggregate(
        total=Sum("total_hours"), entries=Count("id")
    )
    total = _q(agg["total"])
    entries = agg["entries"] or 0
    return {
        "total_hours": total,
        "total_entries": entries,
        "avg_hours_per_entry": _q(total / entries) if entries else ZERO,
    }


def build_work_hour_report(*, start, end, employee_ids=None, pay_day=None) -> dict:
    employees = Employee.objects.all()
    if employee_ids:
        employees = employees.filter(pk__in=employee_ids)

    rows = []
    grand_hours = ZERO
    grand_pay = ZERO

    for employee in employees.order_by("full_legal_name"):
        entries = list(
            work_hours_between(employee_id=employee.pk, start=start, end=end).order_by("date", "start_time")
        )
        total_hours = _q(sum((e.total_hours for e in entries), ZERO))
        if not employee_ids and not entries:
            continue

        earnings = _q(total_hours * employee.hourly_rate)
        rows.append(
            {
                "id": employee.pk,
                "name": employee.display_name,
                "full_legal_name": employee.full_legal_name,
                "position": employee.position,
                "sin_number": employee.sin_number,
                "address": employee.address,
                "postal_code": employee.postal_code,
                "country": employee.country,
                "hourly_rate": _q(employee.hourly_rate),
                "total_hours": total_hours,
                "total_earnings": earnings,
                "entries": [
                    {
                        "date": e.date,
                        "start_time": e.start_time,
                        "end_time": e.end_time,
                        "total_hours": e.total_hours,
                        "project": e.project,
                    }
                    for e in entries
                ],
            }
        )
        grand_hours += total_hours
        grand_pay += earnings

    return {
        "period_start": start,
        "period_end": end,
        "pay_day": pay_day,
        "generated_at": timezone.now(),
        "employees": rows,
        "total_employees": len(rows),
        "total_hours": _q(grand_hours),
        "total_earnings": _q(grand_pay),
    }


# -------------------------------------------------
# PAY STUBS
# -------------------------------------------------
def year_to_date(payroll: Payroll) -> dict:
    qs = Payroll.all_objects.filter(
        Q(status=Status.ACTIVE) | Q(pk=payroll.pk),
        employee_id=payroll.employee_id,
        pay_date__year=payroll.pay_date.year,
        pay_date__lte=payroll.pay_date,
    )
    agg = qs.aggregate(**{f: Sum(f) for f in YTD_FIELDS})
    return {f: _q(agg[f]) for f in YTD_FIELDS}


def _earning(payroll: Payroll, ytd: dict, line: str) -> dict:
    return {
        "hours": _q(getattr(payroll, f"{line}_hours")),
        "rate": _q(getattr(payroll, f"{line}_rate")),
        "current_amount": _q(getattr(payroll, f"{line}_current")),
        "ytd_amount": ytd[f"{line}_current"],
    }


def build_pay_stub(payroll: Payroll) -> dict:
    employee = payroll.employee
    ytd = year_to_date(payroll)

    return {
        "payroll_id": payroll.pk,
        "employee_id": employee.pk,
        "name": employee.display_name,
        "position": employee.position,
        "sin_number": employee.sin_number,
        "address": employee.address,
        "postal_code": employee.postal_code,
        "country": employee.country,
        "pay_day": payroll.pay_date,
        "pay_period": payroll.pay_period,
        "payment_date": payroll.payment_date,
        "hourly_rate": _q(payroll.regular_rate or employee.hourly_rate),
        "earnings": {
            "regular": _earning(payroll, ytd, "regular"),
            "stat_holiday_paid": _earning(payroll, ytd, "stat"),
            "overtime": _earning(payroll, ytd, "overtime"),
            "vac_paid": {
                "hours": ZERO,
                "rate": ZERO,
                "current_amount": _q(payroll.vac_paid_current),
                "ytd_amount": ytd["vac_paid_current"],
            },
            "total": {
                "hours": _q(payroll.total_hours),
                "rate": ZERO,
                "current_amount": _q(payroll.total_current + payroll.vac_paid_current),
                "ytd_amount": ytd["total_current"] + ytd["vac_paid_current"],
            },
        },
        "deductions": {
            "cpp_employee": {"current_amount": _q(payroll.cpp_emp_current), "ytd_amount": ytd["cpp_emp_current"]},
            "ei_employee": {"current_amount": _q(payroll.ei_emp_current), "ytd_amount": ytd["ei_emp_current"]},
            "federal_income_tax": {"current_amount": _q(payroll.fit_current), "ytd_amount": ytd["fit_current"]},
            "total": {
                "current_amount": _q(payroll.total_deduction_current),
                "ytd_amount": ytd["total_deduction_current"],
            },
        },
        "vacation_summary": {
            "vac_earned": _q(payroll.vac_earned_current),
            "vac_earned_ytd": ytd["vac_earned_current"],
            "vac_paid": _q(payroll.vac_paid_current),
            "vac_paid_ytd": ytd["vac_paid_current"],
        },
        "net_pay": _q(payroll.net_pay),
        "net_pay_ytd": ytd["net_pay"],
    }


def payroll_summary(employee: Employee, *, today=None) -> dict:
    today = today or timezone.localdate()
    qs = Payroll.objects.filter(employee=employee)
    return {
        "employee_id": employee.pk,
        "employee_name": employee.display_name,
        "total_payrolls": qs.count(),
        "current_year_total": _q(qs.filter(pay_date__year=today.year).aggregate(t=Sum("net_pay"))["t"]),
        "latest_payroll": qs.order_by("-pay_date", "-pk").first(),
    }


# -------------------------------------------------
# HTML
# -------------------------------------------------
def render_work_hour_report(report: dict) -> str:
    return render_to_string("payroll/work_hour_report.html", report)


def render_pay_stub(stub: dict) -> str:
    return render_to_string("payroll/pay_stub.html", {"stub": stub, "generated_at": timezone.now()})
