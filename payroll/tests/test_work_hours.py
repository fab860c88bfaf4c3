from datetime import date, time
from decimal import Decimal

from django.contrib.auth import get_user_model
from django.core.exceptions import ValidationError
from django.test import TestCase
from rest_framework.test import APIClient

from payroll.models import Employee, WorkHour, compute_total_hours
from payroll.services.reports import build_work_hour_report, work_hour_summary

User = get_user_model()


class ComputeHoursTests(TestCase):
    def test_same_day(self):
        self.assertEqual(compute_total_hours(time(9, 0), time(17, 30)), Decimal("8.50"))

    def test_crosses_midnight(self):
        self.assertEqual(compute_total_hours(time(22, 0), time(6, 0)), Decimal("8.00"))

    def test_zero_length_rejected(self):
        with self.assertRaises(ValidationError):
            compute_total_hours(time(9, 0), time(9, 0))


# =========================================================
# REPORT SERVICES
# =========================================================
class WorkHourReportTests(TestCase):
    """
    GUARANTEES:
    - totals respect the employee and date filters
    - estimated pay = hours x hourly rate, per employee and overall
    """

    def setUp(self):
        self.ana = Employee.objects.create(full_legal_name="Ana Lopez", preferred_name="Ana", hourly_rate=Decimal("18.50"))
        self.ben = Employee.objects.create(full_legal_name="Ben Smith", hourly_rate=Decimal("20.00"))
        self.idle = Employee.objects.create(full_legal_name="Cy Idle", hourly_rate=Decimal("15.00"))

        WorkHour.objects.create(employee=self.ana, date=date(2025, 3, 1), start_time=time(6), end_time=time(14))
        WorkHour.objects.create(employee=self.ana, date=date(2025, 3, 2), start_time=time(22), end_time=time(2))
        WorkHour.objects.create(employee=self.ben, date=date(2025, 3, 2), total_hours=Decimal("5.00"))
        WorkHour.objects.create(employee=self.ben, date=date(2025, 4, 1), total_hours=Decimal("7.00"))

    def test_summary(self):
        s = work_hour_summary(employee_id=self.ana.pk)
        self.assertEqual(s["total_hours"], Decimal("12.00"))
        self.assertEqual(s["total_entries"], 2)
        self.assertEqual(s["avg_hours_per_entry"], Decimal("6.00"))

        empty = work_hour_summary(start=date(2026, 1, 1))
        self.assertEqual(empty["total_entries"], 0)
        self.assertEqual(empty["avg_hours_per_entry"], Decimal("0.00"))

    def test_report_for_period(self):
        report = build_work_hour_report(start=date(2025, 3, 1), end=date(2025, 3, 31))

        names = [row["name"] for row in report["employees"]]
        self.assertEqual(names, ["Ana", "Ben Smith"])
        self.assertEqual(report["employees"][0]["total_earnings"], Decimal("222.00"))
        self.assertEqual(report["employees"][1]["total_hours"], Decimal("5.00"))
        self.assertEqual(report["total_hours"], Decimal("17.00"))
        self.assertEqual(report["total_earnings"], Decimal("322.00"))

    def test_report_for_selected_employees_keeps_idle_rows(self):
        report = build_work_hour_report(
            start=date(2025, 3, 1), end=date(2025, 3, 31), employee_ids=[self.idle.pk]
        )
        self.assertEqual(report["total_employees"], 1)
        self.assertEqual(report["employees"][0]["total_hours"], Decimal("0.00"))


# =========================================================
# API
# =========================================================
class WorkHourApiTests(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.editor = User.objects.create_user(email="editor@example.com", password="pass")
        self.client.force_authenticate(self.editor)
        self.employee = Employee.objects.create(full_legal_name="Ana Lopez", hourly_rate=Decimal("20.00"))

    def test_create_computes_hours(self):
        res = self.client.post(
            "/api/payroll/work-hours/",
            {"employee_id": self.employee.pk, "date": "2025-03-01", "start_time": "23:00", "end_time": "07:30"},
            format="json",
        )

        self.assertEqual(res.status_code, 201)
        self.assertTrue(res.data["success"])
        self.assertEqual(res.data["data"]["total_hours"], "8.50")
        self.assertEqual(WorkHour.objects.get().user, self.editor)

    def test_missing_hours_rejected(self):
        res = self.client.post(
            "/api/payroll/work-hours/",
            {"employee_id": self.employee.pk, "date": "2025-03-01"},
            format="json",
        )
        self.assertEqual(res.status_code, 422)
        self.assertIn("total_hours", res.data["errors"])

    def test_summary_and_report(self):
        WorkHour.objects.create(employee=self.employee, date=date(2025, 3, 1), total_hours=Decimal("8"))

        res = self.client.get("/api/payroll/work-hours/summary/", {"employee_id": self.employee.pk})
        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.data["data"]["total_hours"], Decimal("8.00"))

        res = self.client.get(
            "/api/payroll/work-hours/report/", {"start_date": "2025-03-01", "end_date": "2025-03-31"}
        )
        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.data["data"]["total_earnings"], Decimal("160.00"))

    def test_report_html(self):
        WorkHour.objects.create(employee=self.employee, date=date(2025, 3, 1), total_hours=Decimal("8"))

        res = self.client.get(
            "/api/payroll/work-hours/report/",
            {"start_date": "2025-03-01", "end_date": "2025-03-31", "format": "html"},
        )

        self.assertEqual(res.status_code, 200)
        self.assertTrue(res["Content-Type"].startswith("text/html"))
        body = res.content.decode()
        self.assertIn("Work Hour Report", body)
        self.assertIn("Ana Lopez", body)
        self.assertIn("160.00", body)

    def test_report_requires_period(self):
        res = self.client.get("/api/payroll/work-hours/report/", {"start_date": "2025-03-31", "end_date": "2025-03-01"})
        self.assertEqual(res.status_code, 422)
        self.assertIn("end_date", res.data["errors"])

    def test_delete_is_physical(self):
        wh = WorkHour.objects.create(employee=self.employee, date=date(2025, 3, 1), total_hours=Decimal("4"))
        res = self.client.delete(f"/api/payroll/work-hours/{wh.pk}/")
        self.assertEqual(res.status_code, 200)
        self.assertFalse(WorkHour.objects.exists())
