# payroll/admin.py

from django.contrib import admin

from payroll.models import Employee, Payroll, WorkHour


@admin.register(Employee)
class EmployeeAdmin(admin.ModelAdmin):
    list_display = ("full_legal_name", "preferred_name", "position", "hourly_rate", "employment_status", "status")
    list_filter = ("employment_status", "status")
    search_fields = ("full_legal_name", "preferred_name", "email")

    def get_queryset(self, request):
        return Employee.all_objects.all()


@admin.register(WorkHour)
class WorkHourAdmin(admin.ModelAdmin):
    list_display = ("employee", "date", "start_time", "end_time", "total_hours")
    list_filter = ("date",)


@admin.register(Payroll)
class PayrollAdmin(admin.ModelAdmin):
    list_display = ("employee", "pay_date", "total_current", "net_pay", "status")
    list_filter = ("status",)
    date_hierarchy = "pay_date"

    def get_queryset(self, request):
        return Payroll.all_objects.select_related("employee")
