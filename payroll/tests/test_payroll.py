from datetime import date
from decimal import Decimal

from django.contrib.auth import get_user_model
from django.test import TestCase
from django.utils import timezone
from rest_framework.test import APIClient

from core.lifecycle import LifecycleError
from payroll.models import Employee, Payroll, WorkHour
from payroll.services.reports import build_pay_stub, payroll_summary

User = get_user_model()


def make_payroll(employee, pay_date, **amounts):
    fields = {
        "regular_hours": Decimal("80.00"),
        "regular_rate": Decimal("20.00"),
        "regular_current": Decimal("1600.00"),
        "cpp_emp_current": Decimal("80.00"),
        "ei_emp_current": Decimal("25.00"),
        "fit_current": Decimal("150.00"),
    }
    fields.update(amounts)
    return Payroll.objects.create(employee=employee, pay_date=pay_date, **fields)


# =========================================================
# MODEL + STUB
# =========================================================
class PayStubTests(TestCase):
    """
    GUARANTEES:
    - zero totals are derived from the lines
    - YTD = same employee, same year, up to this pay date, active rows
    """

    def setUp(self):
        self.employee = Employee.objects.create(full_legal_name="Ana Lopez", hourly_rate=Decimal("20.00"))
        self.other = Employee.objects.create(full_legal_name="Ben Smith")

    def test_totals_are_derived(self):
        p = make_payroll(self.employee, date(2025, 1, 15), overtime_current=Decimal("90.00"))

        self.assertEqual(p.total_current, Decimal("1690.00"))
        self.assertEqual(p.total_deduction_current, Decimal("255.00"))
        self.assertEqual(p.net_pay, Decimal("1435.00"))

    def test_ytd_rules(self):
        make_payroll(self.employee, date(2024, 12, 31))
        make_payroll(self.employee, date(2025, 1, 15))
        archived = make_payroll(self.employee, date(2025, 1, 20))
        archived.archive()
        current = make_payroll(self.employee, date(2025, 1, 31))
        make_payroll(self.employee, date(2025, 2, 15))
        make_payroll(self.other, date(2025, 1, 31))

        stub = build_pay_stub(current)

        self.assertEqual(stub["earnings"]["regular"]["current_amount"], Decimal("1600.00"))
        self.assertEqual(stub["earnings"]["regular"]["ytd_amount"], Decimal("3200.00"))
        self.assertEqual(stub["deductions"]["total"]["ytd_amount"], Decimal("510.00"))
        self.assertEqual(stub["net_pay_ytd"], Decimal("2690.00"))

    def test_summary(self):
        make_payroll(self.employee, date(2025, 1, 15))
        latest = make_payroll(self.employee, date(2025, 1, 31))
        make_payroll(self.employee, date(2024, 12, 15))

        s = payroll_summary(self.employee, today=date(2025, 6, 1))
        self.assertEqual(s["total_payrolls"], 3)
        self.assertEqual(s["current_year_total"], Decimal("2690.00"))
        self.assertEqual(s["latest_payroll"], latest)

    def test_employee_purge_blocked_by_history(self):
        WorkHour.objects.create(employee=self.other, date=date(2025, 1, 2), total_hours=Decimal("3"))
        with self.assertRaises(LifecycleError):
            self.other.purge()


# =========================================================
# API
# =========================================================
class PayrollApiTests(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.editor = User.objects.create_user(email="editor@example.com", password="pass")
        self.client.force_authenticate(self.editor)
        self.employee = Employee.objects.create(full_legal_name="Ana Lopez", preferred_name="Ana")

    def test_create_and_filter(self):
        res = self.client.post(
            "/api/payroll/payrolls/",
            {
                "employee_id": self.employee.pk,
                "pay_date": "2025-01-15",
                "regular_current": "1000.00",
                "fit_current": "100.00",
            },
            format="json",
        )
        self.assertEqual(res.status_code, 201)
        self.assertEqual(res.data["data"]["net_pay"], "900.00")

        other = Employee.objects.create(full_legal_name="Ben Smith")
        make_payroll(other, date(2025, 1, 15))
        res = self.client.get("/api/payroll/payrolls/", {"employee_id": self.employee.pk})
        self.assertEqual(res.data["total"], 1)

    def test_negative_amount_rejected(self):
        res = self.client.post(
            "/api/payroll/payrolls/",
            {"employee_id": self.employee.pk, "pay_date": "2025-01-15", "net_pay": "-1"},
            format="json",
        )
        self.assertEqual(res.status_code, 422)

    def test_bulk_create_is_atomic(self):
        res = self.client.post(
            "/api/payroll/payrolls/bulk/",
            {
                "payrolls": [
                    {"employee_id": self.employee.pk, "pay_date": "2025-01-15", "regular_current": "500"},
                    {"employee_id": self.employee.pk, "pay_date": "2025-01-31", "regular_current": "600"},
                ]
            },
            format="json",
        )
        self.assertEqual(res.status_code, 201)
        self.assertEqual(Payroll.objects.count(), 2)

        res = self.client.post(
            "/api/payroll/payrolls/bulk/",
            {"payrolls": [{"employee_id": self.employee.pk}]},
            format="json",
        )
        self.assertEqual(res.status_code, 422)
        self.assertEqual(Payroll.objects.count(), 2)

    def test_stub_json_and_html(self):
        p = make_payroll(self.employee, date(2025, 1, 15))

        res = self.client.get(f"/api/payroll/payrolls/{p.pk}/stub/")
        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.data["data"]["name"], "Ana")

        res = self.client.get(f"/api/payroll/payrolls/{p.pk}/stub/", {"format": "html"})
        self.assertEqual(res.status_code, 200)
        body = res.content.decode()
        self.assertIn("Pay Stub", body)
        self.assertIn("1345.00", body)

    def test_summary_endpoint(self):
        make_payroll(self.employee, timezone.localdate())
        res = self.client.get(f"/api/payroll/payrolls/summary/{self.employee.pk}/")

        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.data["data"]["total_payrolls"], 1)
        self.assertEqual(res.data["data"]["current_year_total"], Decimal("1345.00"))
        self.assertIsNotNone(res.data["data"]["latest_payroll"])

    def test_employee_lifecycle(self):
        res = self.client.delete(f"/api/payroll/employees/{self.employee.pk}/")
        self.assertEqual(res.status_code, 200)
        self.assertEqual(self.client.get("/api/payroll/employees/").data["total"], 0)
        self.assertEqual(self.client.post(f"/api/payroll/employees/{self.employee.pk}/restore/").status_code, 200)
