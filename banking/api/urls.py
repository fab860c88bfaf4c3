# banking/api/urls.py

from django.urls import include, path
from rest_framework.routers import DefaultRouter

from banking.api.views import AccountViewSet, TransactionViewSet, TransferViewSet

router = DefaultRouter()
router.register("accounts", AccountViewSet, basename="bank-account")
router.register("transactions", TransactionViewSet, basename="transaction")
router.register("transfers", TransferViewSet, basename="transfer")

urlpatterns = [
    path("", include(router.urls)),
]
