"""Attendance Session & Payroll Accrual Engine.

This package is organized by feature modules (policies, attendance, payroll,
reports, ...) with a thin Flask controller layer and service/repository layers.
"""

__version__ = "1.0.0"
