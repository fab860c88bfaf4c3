# payroll/api/urls.py

from django.urls import include, path
from rest_framework.routers import DefaultRouter

from payroll.api.views import EmployeeViewSet, PayrollViewSet, WorkHourViewSet

router = DefaultRouter()
router.register("employees", EmployeeViewSet, basename="employee")
router.register("work-hours", WorkHourViewSet, basename="work-hour")
router.register("payrolls", PayrollViewSet, basename="payroll")

urlpatterns = [
    path("", include(router.urls)),
]
