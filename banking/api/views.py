# banking/api/views.py

"""
BANKING API

/api/banking/accounts/       CRUD + archive / restore / force-delete
/api/banking/transactions/   list (filters), retrieve, create income/expense,
                             POST {id}/void/
/api/banking/transfers/      list, create (no overdraft), GET summary/

Balances only move through banking.services.ledger.
"""

from __future__ import annotations

from drf_spectacular.utils import extend_schema
from rest_framework import mixins, status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from banking.api.filters import TransactionFilter
from banking.api.serializers import (
    AccountSerializer,
    TransactionCreateSerializer,
    TransactionSerializer,
    TransferCreateSerializer,
    TransferSummarySerializer,
)
from banking.models import Account, Transaction
from banking.services.accounts import create_account, transfer_summary
from banking.services.ledger import record_expense, record_income, transfer, void_transaction
from core.api import LifecycleViewSet
from core.pagination import PerPagePagination, SortableMixin
from users.permissions import IsAdmin, IsAdminOrEditor, IsNotStaff


@extend_schema(tags=["banking"])
class AccountViewSet(LifecycleViewSet):
    model = Account
    serializer_class = AccountSerializer
    sort_fields = ("id", "bank_name", "account_name", "balance", "created_at", "updated_at")

    def perform_create(self, serializer):
        data = dict(serializer.validated_data)
        opening_balance = data.pop("opening_balance", None)
        serializer.instance = create_account(
            user=self.request.user,
            opening_balance=opening_balance,
            **data,
        )


class _LedgerViewSet(SortableMixin, viewsets.GenericViewSet):
    pagination_class = PerPagePagination
    sort_fields = ("id", "amount", "transaction_date", "created_at")

    def get_permissions(self):
        if self.action == "void":
            return [IsAuthenticated(), IsAdmin()]
        if self.action in ("list", "retrieve", "summary"):
            return [IsAuthenticated(), IsNotStaff()]
        return [IsAuthenticated(), IsNotStaff(), IsAdminOrEditor()]

    def base_queryset(self):
        return Transaction.all_objects.select_related("account", "from_account", "to_account")

    def get_queryset(self):
        return self.sort_queryset(self.base_queryset())

    def retrieve(self, request, *args, **kwargs):
        return Response({"data": TransactionSerializer(self.get_object()).data})


@extend_schema(tags=["banking"])
class TransactionViewSet(mixins.ListModelMixin, _LedgerViewSet):
    serializer_class = TransactionSerializer
    filterset_class = TransactionFilter

    def get_serializer_class(self):
        if self.action == "create":
            return TransactionCreateSerializer
        return TransactionSerializer

    @extend_schema(request=TransactionCreateSerializer, responses={201: TransactionSerializer})
    def create(self, request, *args, **kwargs):
        s = TransactionCreateSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        data = dict(s.validated_data)

        post = record_income if data.pop("type") == Transaction.TYPE_INCOME else record_expense
        tx = post(account=data.pop("account_id"), user=request.user, **data)

        return Response(
            {"message": "Transaction created successfully", "data": TransactionSerializer(tx).data},
            status=status.HTTP_201_CREATED,
        )

    @extend_schema(request=None, responses={200: TransactionSerializer})
    @action(detail=True, methods=["post"])
    def void(self, request, *args, **kwargs):
        tx = void_transaction(self.get_object(), user=request.user)
        return Response(
            {"message": "Transaction voided successfully", "data": TransactionSerializer(tx).data}
        )


@extend_schema(tags=["banking"])
class TransferViewSet(mixins.ListModelMixin, _LedgerViewSet):
    serializer_class = TransactionSerializer

    def base_queryset(self):
        return super().base_queryset().filter(type=Transaction.TYPE_TRANSFER)

    def get_serializer_class(self):
        if self.action == "create":
            return TransferCreateSerializer
        return TransactionSerializer

    @extend_schema(request=TransferCreateSerializer, responses={201: TransactionSerializer})
    def create(self, request, *args, **kwargs):
        s = TransferCreateSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        data = dict(s.validated_data)

        tx = transfer(
            from_account=data.pop("from_account_id"),
            to_account=data.pop("to_account_id"),
            user=request.user,
            allow_overdraft=False,
            **data,
        )
        return Response(
            {"message": "Bank transfer completed successfully", "data": TransactionSerializer(tx).data},
            status=status.HTTP_201_CREATED,
        )

    @extend_schema(responses={200: TransferSummarySerializer})
    @action(detail=False, methods=["get"])
    def summary(self, request, *args, **kwargs):
        qs = self.base_queryset()
        date_from = request.query_params.get("date_from")
        date_to = request.query_params.get("date_to")
        if date_from:
            qs = qs.filter(transaction_date__gte=date_from)
        if date_to:
            qs = qs.filter(transaction_date__lte=date_to)
        return Response({"data": TransferSummarySerializer(transfer_summary(qs)).data})
