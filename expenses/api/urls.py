# expenses/api/urls.py

from django.urls import include, path
from rest_framework.routers import SimpleRouter

from expenses.api.views import ExpenseTypeViewSet

# Mounted at /api/expense-types/ (empty prefix, no API-root view)
router = SimpleRouter()
router.register("", ExpenseTypeViewSet, basename="expense-type")

urlpatterns = [
    path("", include(router.urls)),
]
