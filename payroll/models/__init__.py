# payroll/models/__init__.py

from payroll.models.employee import Employee
from payroll.models.payroll import Payroll
from payroll.models.work_hour import WorkHour, compute_total_hours

__all__ = ["Employee", "Payroll", "WorkHour", "compute_total_hours"]
