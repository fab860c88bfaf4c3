from decimal import Decimal

from django.core.exceptions import ValidationError
from django.test import TestCase

from core.exceptions import api_exception_handler
from core.lifecycle import LifecycleError, NotArchivedError, Status, can_transition
from core.money import money, positive_money, price
from loans.models import Loan


class MoneyTests(TestCase):
    def test_rounds_half_up(self):
        self.assertEqual(money("10.005"), Decimal("10.01"))
        self.assertEqual(money(None), Decimal("0.00"))
        self.assertEqual(price("1.3995"), Decimal("1.400"))
        self.assertIsNone(price(""))

    def test_invalid_values(self):
        with self.assertRaises(ValidationError):
            money("abc")
        with self.assertRaises(ValidationError):
            money("NaN")
        with self.assertRaises(ValidationError):
            positive_money("0")


# =========================================================
# LIFECYCLE
# =========================================================
class LifecycleTests(TestCase):
    """
    GUARANTEES:
    - archive hides from `objects`, keeps in `all_objects`
    - restore only from archived
    - purge removes the row; plain delete() is refused
    """

    def setUp(self):
        self.loan = Loan.objects.create(name="Truck", amount=Decimal("100.00"))

    def test_transition_table(self):
        self.assertTrue(can_transition(Status.ACTIVE, Status.ARCHIVED))
        self.assertFalse(can_transition(Status.ACTIVE, Status.ACTIVE))
        self.assertFalse(can_transition(Status.PURGED, Status.ACTIVE))

    def test_archive_and_restore(self):
        self.loan.archive()
        self.assertFalse(Loan.objects.filter(pk=self.loan.pk).exists())
        self.assertTrue(Loan.all_objects.filter(pk=self.loan.pk).exists())
        self.assertIsNotNone(self.loan.archived_at)

        self.loan.restore()
        self.assertTrue(Loan.objects.filter(pk=self.loan.pk).exists())
        self.assertIsNone(self.loan.archived_at)

        with self.assertRaises(NotArchivedError):
            self.loan.restore()

    def test_archive_twice_rejected(self):
        self.loan.archive()
        with self.assertRaises(LifecycleError):
            self.loan.archive()

    def test_purge_and_delete(self):
        with self.assertRaises(LifecycleError):
            self.loan.delete()

        pk = self.loan.pk
        self.loan.purge()
        self.assertEqual(self.loan.status, Status.PURGED)
        self.assertFalse(Loan.all_objects.filter(pk=pk).exists())


class ExceptionHandlerTests(TestCase):
    def test_field_errors_render_422(self):
        res = api_exception_handler(ValidationError({"amount": ["Too big."]}), {})

        self.assertEqual(res.status_code, 422)
        self.assertEqual(res.data["message"], "Validation failed")
        self.assertEqual(res.data["errors"], {"amount": ["Too big."]})

    def test_status_code_attribute_wins(self):
        res = api_exception_handler(NotArchivedError("Loan is not deleted"), {})

        self.assertEqual(res.status_code, 400)
        self.assertEqual(res.data["message"], "Loan is not deleted")

    def test_unexpected_errors_are_logged(self):
        with self.assertLogs("core.exceptions", level="ERROR"):
            res = api_exception_handler(RuntimeError("kaboom"), {})

        self.assertEqual(res.status_code, 500)
        self.assertEqual(res.data["message"], "Server error")
