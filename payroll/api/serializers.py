# payroll/api/serializers.py

from decimal import Decimal

from rest_framework import serializers

from payroll.models import Employee, Payroll, WorkHour
from payroll.models.payroll import ZERO


class EmployeeSerializer(serializers.ModelSerializer):
    display_name = serializers.CharField(read_only=True)
    hourly_rate = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=Decimal("0"), required=False)

    class Meta:
        model = Employee
        fields = [
            "id",
            "full_legal_name",
            "preferred_name",
            "display_name",
            "email",
            "phone_number",
            "address",
            "postal_code",
            "country",
            "sin_number",
            "position",
            "department",
            "hire_date",
            "hourly_rate",
            "employment_status",
            "user",
            "status",
            "archived_at",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ("id", "status", "archived_at", "created_at", "updated_at")


class EmployeeRefSerializer(serializers.ModelSerializer):
    display_name = serializers.CharField(read_only=True)

    class Meta:
        model = Employee
        fields = ["id", "full_legal_name", "display_name", "position"]


class WorkHourSerializer(serializers.ModelSerializer):
    employee_id = serializers.PrimaryKeyRelatedField(source="employee", queryset=Employee.objects.all())
    employee = EmployeeRefSerializer(read_only=True)
    start_time = serializers.TimeField(format="%H:%M", required=False, allow_null=True)
    end_time = serializers.TimeField(format="%H:%M", required=False, allow_null=True)
    total_hours = serializers.DecimalField(
        max_digits=5, decimal_places=2, required=False, allow_null=True, min_value=Decimal("0.01")
    )

    class Meta:
        model = WorkHour
        fields = [
            "id",
            "employee_id",
            "employee",
            "date",
            "start_time",
            "end_time",
            "total_hours",
            "project",
            "description",
            "user",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ("id", "user", "created_at", "updated_at")


class WorkHourQuerySerializer(serializers.Serializer):
    employee_id = serializers.IntegerField(required=False)
    start_date = serializers.DateField(required=False)
    end_date = serializers.DateField(required=False)

    def validate(self, attrs):
        start, end = attrs.get("start_date"), attrs.get("end_date")
        if start and end and end < start:
            raise serializers.ValidationError({"end_date": ["End date must be on or after the start date."]})
        return attrs


class WorkHourReportQuerySerializer(WorkHourQuerySerializer):
    start_date = serializers.DateField()
    end_date = serializers.DateField()
    pay_day = serializers.DateField(required=False)
    employee_ids = serializers.ListField(child=serializers.IntegerField(min_value=1), required=False)


def _money(**kwargs):
    return serializers.DecimalField(
        max_digits=12, decimal_places=2, min_value=ZERO, required=False, **kwargs
    )


class PayrollSerializer(serializers.ModelSerializer):
    employee_id = serializers.PrimaryKeyRelatedField(source="employee", queryset=Employee.objects.all())
    employee = EmployeeRefSerializer(read_only=True)

    regular_hours = _money()
    regular_rate = _money()
    regular_current = _money()
    stat_hours = _money()
    stat_rate = _money()
    stat_current = _money()
    overtime_hours = _money()
    overtime_rate = _money()
    overtime_current = _money()
    total_hours = _money()
    total_current = _money()
    cpp_emp_current = _money()
    ei_emp_current = _money()
    fit_current = _money()
    total_deduction_current = _money()
    vac_earned_current = _money()
    vac_paid_current = _money()
    net_pay = _money()

    class Meta:
        model = Payroll
        fields = [
            "id",
            "employee_id",
            "employee",
            "pay_date",
            "pay_period",
            "payment_date",
            "regular_hours",
            "regular_rate",
            "regular_current",
            "stat_hours",
            "stat_rate",
            "stat_current",
            "overtime_hours",
            "overtime_rate",
            "overtime_current",
            "total_hours",
            "total_current",
            "cpp_emp_current",
            "ei_emp_current",
            "fit_current",
            "total_deduction_current",
            "vac_earned_current",
            "vac_paid_current",
            "net_pay",
            "status",
            "archived_at",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ("id", "status", "archived_at", "created_at", "updated_at")


class PayrollBulkSerializer(serializers.Serializer):
    payrolls = PayrollSerializer(many=True, allow_empty=False)
