# loans/api/urls.py

from django.urls import include, path
from rest_framework.routers import SimpleRouter

from loans.api.views import LoanViewSet

# Mounted at /api/loans/ (empty prefix, no API-root view)
router = SimpleRouter()
router.register("", LoanViewSet, basename="loan")

urlpatterns = [
    path("", include(router.urls)),
]
