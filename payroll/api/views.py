# payroll/api/views.py

"""
PAYROLL API

/api/payroll/employees/                       CRUD + lifecycle
/api/payroll/employees/{id}/work-hours/       one employee's hours
/api/payroll/work-hours/                      CRUD   {"success": true, "data": ...}
/api/payroll/work-hours/recent/               last 10 entries
/api/payroll/work-hours/summary/              totals (?employee_id, ?start_date, ?end_date)
/api/payroll/work-hours/report/               period report, JSON or ?format=html
/api/payroll/payrolls/                        CRUD + lifecycle (?employee_id)
/api/payroll/payrolls/bulk/                   POST many payrolls at once
/api/payroll/payrolls/{id}/stub/              pay stub with YTD, JSON or ?format=html
/api/payroll/payrolls/summary/{employee_id}/  payroll count, this year's net pay, latest
"""

from __future__ import annotations

from django.db import transaction
from django.shortcuts import get_object_or_404
from drf_spectacular.utils import extend_schema
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.renderers import JSONRenderer, StaticHTMLRenderer
from rest_framework.response import Response

from core.api import LifecycleViewSet
from payroll.api.serializers import (
    EmployeeSerializer,
    PayrollBulkSerializer,
    PayrollSerializer,
    WorkHourQuerySerializer,
    WorkHourReportQuerySerializer,
    WorkHourSerializer,
)
from payroll.models import Employee, Payroll, WorkHour
from payroll.services.reports import (
    build_pay_stub,
    build_work_hour_report,
    payroll_summary,
    render_pay_stub,
    render_work_hour_report,
    work_hour_summary,
    work_hours_between,
)
from users.permissions import IsAdminOrEditor, IsNotStaff

REPORT_RENDERERS = [JSONRenderer, StaticHTMLRenderer]


def _wants_html(request) -> bool:
    return getattr(request.accepted_renderer, "format", "") == "html"


def _id_list(params, key: str) -> list[str]:
    out = []
    for raw in params.getlist(key) + params.getlist(f"{key}[]"):
        out.extend(part.strip() for part in str(raw).split(",") if part.strip())
    return out


@extend_schema(tags=["payroll"])
class EmployeeViewSet(LifecycleViewSet):
    model = Employee
    serializer_class = EmployeeSerializer
    sort_fields = ("id", "full_legal_name", "preferred_name", "position", "hire_date", "created_at", "updated_at")

    @action(detail=True, methods=["get"], url_path="work-hours")
    def work_hours(self, request, *args, **kwargs):
        employee = self.get_object()
        qs = WorkHour.objects.filter(employee=employee).select_related("employee")
        return Response({"success": True, "data": WorkHourSerializer(qs, many=True).data})


@extend_schema(tags=["payroll"])
class WorkHourViewSet(viewsets.ModelViewSet):
    serializer_class = WorkHourSerializer
    permission_classes = [IsAuthenticated, IsNotStaff, IsAdminOrEditor]
    pagination_class = None
    http_method_names = ["get", "post", "put", "patch", "delete", "head", "options"]

    def get_queryset(self):
        q = WorkHourQuerySerializer(data=self.request.query_params)
        q.is_valid(raise_exception=True)
        return (
            work_hours_between(
                employee_id=q.validated_data.get("employee_id"),
                start=q.validated_data.get("start_date"),
                end=q.validated_data.get("end_date"),
            )
            .select_related("employee")
            .order_by("-date", "-start_time")
        )

    def list(self, request, *args, **kwargs):
        data = self.get_serializer(self.get_queryset(), many=True).data
        return Response({"success": True, "data": data})

    def retrieve(self, request, *args, **kwargs):
        return Response({"success": True, "data": self.get_serializer(self.get_object()).data})

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        serializer.save(user=request.user)
        return Response(
            {"success": True, "message": "Work hours recorded successfully", "data": serializer.data},
            status=status.HTTP_201_CREATED,
        )

    def update(self, request, *args, **kwargs):
        partial = kwargs.pop("partial", False)
        serializer = self.get_serializer(self.get_object(), data=request.data, partial=partial)
        serializer.is_valid(raise_exception=True)
        serializer.save()
        return Response({"success": True, "message": "Work hours updated successfully", "data": serializer.data})

    def destroy(self, request, *args, **kwargs):
        self.get_object().delete()
        return Response({"success": True, "message": "Work hours deleted successfully"})

    @action(detail=False, methods=["get"])
    def recent(self, request, *args, **kwargs):
        qs = WorkHour.objects.select_related("employee").order_by("-date", "-start_time")[:10]
        return Response({"success": True, "data": self.get_serializer(qs, many=True).data})

    @action(detail=False, methods=["get"])
    def summary(self, request, *args, **kwargs):
        q = WorkHourQuerySerializer(data=request.query_params)
        q.is_valid(raise_exception=True)
        data = work_hour_summary(
            employee_id=q.validated_data.get("employee_id"),
            start=q.validated_data.get("start_date"),
            end=q.validated_data.get("end_date"),
        )
        return Response({"success": True, "data": data})

    @action(detail=False, methods=["get"], renderer_classes=REPORT_RENDERERS)
    def report(self, request, *args, **kwargs):
        params = {k: v for k, v in request.query_params.items() if k in ("start_date", "end_date", "pay_day")}
        params["employee_ids"] = _id_list(request.query_params, "employee_ids")
        q = WorkHourReportQuerySerializer(data=params)
        q.is_valid(raise_exception=True)

        report = build_work_hour_report(
            start=q.validated_data["start_date"],
            end=q.validated_data["end_date"],
            employee_ids=q.validated_data.get("employee_ids") or None,
            pay_day=q.validated_data.get("pay_day"),
        )
        if _wants_html(request):
            return Response(render_work_hour_report(report))
        return Response({"success": True, "data": report})


@extend_schema(tags=["payroll"])
class PayrollViewSet(LifecycleViewSet):
    model = Payroll
    serializer_class = PayrollSerializer
    sort_fields = ("id", "pay_date", "employee_id", "net_pay", "payment_date", "created_at", "updated_at")
    default_sort = "pay_date"

    def scope_queryset(self, qs):
        qs = qs.select_related("employee")
        employee_id = self.request.query_params.get("employee_id")
        if employee_id and str(employee_id).isdigit():
            qs = qs.filter(employee_id=int(employee_id))
        return qs

    @extend_schema(request=PayrollBulkSerializer, responses={201: PayrollSerializer(many=True)})
    @action(detail=False, methods=["post"])
    def bulk(self, request, *args, **kwargs):
        s = PayrollBulkSerializer(data=request.data)
        s.is_valid(raise_exception=True)

        with transaction.atomic():
            created = [Payroll.objects.create(**row) for row in s.validated_data["payrolls"]]

        return Response(
            {
                "message": f"{len(created)} payroll record(s) created successfully",
                "data": PayrollSerializer(created, many=True).data,
            },
            status=status.HTTP_201_CREATED,
        )

    @action(detail=True, methods=["get"], renderer_classes=REPORT_RENDERERS)
    def stub(self, request, *args, **kwargs):
        stub = build_pay_stub(self.get_object())
        if _wants_html(request):
            return Response(render_pay_stub(stub))
        return Response({"data": stub})

    @action(detail=False, methods=["get"], url_path=r"summary/(?P<employee_id>\d+)")
    def summary(self, request, employee_id=None, *args, **kwargs):
        employee = get_object_or_404(Employee.all_objects, pk=employee_id)
        summary = payroll_summary(employee)
        latest = summary.pop("latest_payroll")
        summary["latest_payroll"] = PayrollSerializer(latest).data if latest else None
        return Response({"data": summary})
