# loans/api/views.py

from drf_spectacular.utils import extend_schema
from rest_framework.decorators import action
from rest_framework.response import Response

from banking.api.serializers import TransactionSerializer
from core.api import LifecycleViewSet
from loans.api.serializers import LoanPaymentSerializer, LoanSerializer
from loans.models import Loan
from loans.services.payments import process_payment


@extend_schema(tags=["loans"])
class LoanViewSet(LifecycleViewSet):
    """
    /api/loans/                CRUD + archive / restore / force-delete
    /api/loans/{id}/payments/  POST deposit or withdrawal
    """

    model = Loan
    serializer_class = LoanSerializer
    sort_fields = ("id", "name", "amount", "created_at", "updated_at")

    @extend_schema(request=LoanPaymentSerializer, responses={200: LoanSerializer})
    @action(detail=True, methods=["post"])
    def payments(self, request, *args, **kwargs):
        loan = self.get_object()
        s = LoanPaymentSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        data = s.validated_data

        result = process_payment(
            loan=loan,
            amount=data["amount"],
            payment_type=data["type"],
            payment_date=data["date"],
            notes=data.get("notes", ""),
            account=data.get("account_id"),
            user=request.user,
        )
        return Response(
            {
                "message": "Payment processed successfully",
                "data": LoanSerializer(result.loan).data,
                "transaction": TransactionSerializer(result.transaction).data,
                "overpaid_amount": f"{result.overpaid_amount:.2f}",
            }
        )
