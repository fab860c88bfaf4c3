from datetime import date
from decimal import Decimal

from django.contrib.auth import get_user_model
from django.core.exceptions import ValidationError
from django.test import TestCase
from rest_framework.test import APIClient

from banking.models import Account, Transaction
from banking.services.ledger import compute_ledger_balance
from loans.api.serializers import LoanSerializer
from loans.models import Loan
from loans.services.payments import process_payment

User = get_user_model()


class LoanPaymentServiceTests(TestCase):
    def setUp(self):
        self.user = User.objects.create_user(email="editor@example.com", password="pass")
        self.loan = Loan.objects.create(name="Equipment", amount=Decimal("1000.00"))
        self.bank = Account.objects.create(bank_name="RBC", account_name="Operating")

    def test_deposit_reduces_principal_and_records_expense(self):
        result = process_payment(loan=self.loan, amount="250.00", payment_type="deposit", user=self.user)

        self.assertEqual(result.loan.amount, Decimal("750.00"))
        self.assertEqual(result.overpaid_amount, Decimal("0.00"))
        tx = result.transaction
        self.assertEqual(tx.type, Transaction.TYPE_EXPENSE)
        self.assertEqual(tx.category, "Loan Payment")
        self.assertEqual(tx.reference_number, f"LN-{self.loan.pk}")
        self.assertIsNone(tx.account)

    def test_withdrawal_increases_principal_and_records_income(self):
        result = process_payment(loan=self.loan, amount="100.00", payment_type="withdrawal")

        self.assertEqual(result.loan.amount, Decimal("1100.00"))
        self.assertEqual(result.transaction.type, Transaction.TYPE_INCOME)

    def test_overpayment_clamps_at_zero(self):
        with self.assertLogs("loans.services.payments", level="WARNING"):
            result = process_payment(loan=self.loan, amount="1200.00", payment_type="deposit")

        self.assertEqual(result.loan.amount, Decimal("0.00"))
        self.assertEqual(result.overpaid_amount, Decimal("200.00"))
        self.assertEqual(result.transaction.amount, Decimal("1200.00"))

    def test_account_balance_moves_through_ledger(self):
        process_payment(loan=self.loan, amount="300.00", payment_type="withdrawal", account=self.bank)
        process_payment(loan=self.loan, amount="100.00", payment_type="deposit", account=self.bank.pk)

        self.bank.refresh_from_db()
        self.assertEqual(self.bank.balance, Decimal("200.00"))
        self.assertEqual(self.bank.balance, compute_ledger_balance(self.bank))

    def test_invalid_type_and_amount(self):
        with self.assertRaises(ValidationError):
            process_payment(loan=self.loan, amount="10.00", payment_type="refund")
        with self.assertRaises(ValidationError):
            process_payment(loan=self.loan, amount="-1", payment_type="deposit")

        self.loan.refresh_from_db()
        self.assertEqual(self.loan.amount, Decimal("1000.00"))
        self.assertFalse(Transaction.objects.exists())


class LoanApiTests(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.editor = User.objects.create_user(email="editor@example.com", password="pass")
        self.client.force_authenticate(self.editor)
        self.loan = Loan.objects.create(name="Truck", amount=Decimal("500.00"))

    def test_payment_endpoint(self):
        res = self.client.post(
            f"/api/loans/{self.loan.pk}/payments/",
            {"date": str(date(2025, 4, 1)), "amount": "600.00", "type": "deposit"},
            format="json",
        )

        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.data["data"]["amount"], "0.00")
        self.assertEqual(res.data["overpaid_amount"], "100.00")
        self.assertEqual(res.data["transaction"]["transaction_date"], "2025-04-01")

    def test_payment_validation(self):
        res = self.client.post(
            f"/api/loans/{self.loan.pk}/payments/",
            {"date": "2025-04-01", "amount": "0", "type": "deposit"},
            format="json",
        )
        self.assertEqual(res.status_code, 422)
        self.assertIn("amount", res.data["errors"])

    def test_crud_and_lifecycle(self):
        res = self.client.post("/api/loans/", {"name": "Fridge", "amount": "250.00"}, format="json")
        self.assertEqual(res.status_code, 201)
        loan_id = res.data["data"]["id"]

        self.assertEqual(self.client.get("/api/loans/").data["total"], 2)
        self.assertEqual(self.client.delete(f"/api/loans/{loan_id}/").status_code, 200)
        self.assertEqual(self.client.get("/api/loans/").data["total"], 1)
        self.assertEqual(self.client.post(f"/api/loans/{loan_id}/restore/").status_code, 200)

    def test_principal_is_read_only_after_create(self):
        res = self.client.patch(
            f"/api/loans/{self.loan.pk}/",
            {"name": "Truck lease", "amount": "1.00"},
            format="json",
        )

        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.data["data"]["name"], "Truck lease")
        self.assertEqual(res.data["data"]["amount"], "500.00")

    def test_edit_from_stale_row_keeps_payment(self):
        stale = Loan.objects.get(pk=self.loan.pk)
        process_payment(loan=self.loan, amount="200.00", payment_type="deposit")

        s = LoanSerializer(stale, data={"notes": "Refinanced"}, partial=True)
        s.is_valid(raise_exception=True)
        s.save()

        self.loan.refresh_from_db()
        self.assertEqual(self.loan.notes, "Refinanced")
        self.assertEqual(self.loan.amount, Decimal("300.00"))
