"""Read-only projections for the dashboard: KPI tiles, salary chart, payroll table.

Every projection goes through PayrollService (and therefore the same
AccrualCalculator), so the earned totals agree across all of them.
"""

from __future__ import annotations

import csv
import io
from dataclasses import dataclass
from datetime import date
from typing import Optional

from ..attendance.repository import AttendanceRepository
from ..payroll.model import MonthlyAccrual, TeamAccrualSummary
from ..payroll.service import PayrollService
from ..workers.repository import WorkerRepository

PAYROLL_CSV_COLUMNS = [
    ("name", "Employee"),
    ("role", "Role"),
    ("total_days", "Total Days"),
    ("present_days", "Present"),
    ("half_days", "Half Day"),
    ("full_days", "Full Day"),
    ("overtime_days", "Overtime"),
    ("absent_days", "Absent"),
    ("total_hours", "Total Hours"),
    ("monthly_salary", "Monthly Salary"),
    ("per_diem_rate", "Per Day Salary"),
    ("earned_salary", "Earned Salary"),
]


@dataclass(frozen=True)
class PayrollTable:
    month: date
    rows: list[dict]
    summary: TeamAccrualSummary


class ReportService:
    def __init__(self, payroll: PayrollService, attendance: AttendanceRepository, workers: WorkerRepository):
        self._payroll = payroll
        self._attendance = attendance
        self._workers = workers

    def payroll_table(self, month: date) -> PayrollTable:
        accruals = self._payroll.team_accruals(month)
        return PayrollTable(
            month=month.replace(day=1),
            rows=[a.to_row() for a in accruals],
            summary=self._payroll.summarize(accruals),
        )

    def kpi_tiles(self, month: date) -> dict:
        summary = self._payroll.summarize(self._payroll.team_accruals(month))
        return {
            "month": month.strftime("%Y-%m"),
            "total_salary_budget": summary.total_budget,
            "earned_salary": summary.total_earned,
            "percentage_earned": round(summary.percentage_earned, 1),
            "absent_days": summary.total_absent_days,
            "headcount": summary.headcount,
        }

    def salary_chart(self, month: date, *, limit: Optional[int] = None, in_thousands: bool = False) -> list[dict]:
        accruals = self._payroll.team_accruals(month, limit=limit)
        return [self._chart_point(a, in_thousands=in_thousands) for a in accruals]

    @staticmethod
    def _chart_point(accrual: MonthlyAccrual, *, in_thousands: bool) -> dict:
        name = (accrual.worker_name or "").split()
        point = {
            "worker_id": accrual.worker_id,
            "name": name[0] if name else "Employee",
            "earned": accrual.earned_salary,
            "budget": accrual.monthly_salary,
        }
        if in_thousands:
            point["earned_k"] = round(accrual.earned_salary / 1000)
            point["budget_k"] = round(accrual.monthly_salary / 1000)
        return point

    def today_overview(self, today: date) -> dict:
        """Absent = active workers without a session today."""
        workers = self._workers.list_active()
        sessions = self._attendance.list_sessions_for_workers([w.worker_id for w in workers], today, today)
        checked_in = {s.worker_id for s in sessions}
        open_count = sum(1 for s in sessions if s.is_open)
        return {
            "date": today.isoformat(),
            "total_staff": len(workers),
            "present": len(checked_in),
            "absent": max(0, len(workers) - len(checked_in)),
            "not_checked_out": open_count,
        }

    def payroll_csv(self, month: date) -> str:
        table = self.payroll_table(month)
        out = io.StringIO()
        writer = csv.writer(out)
        writer.writerow([label for _, label in PAYROLL_CSV_COLUMNS])
        for row in table.rows:
            values = dict(row)
            values["per_diem_rate"] = round(values["per_diem_rate"])
            writer.writerow([values[key] for key, _ in PAYROLL_CSV_COLUMNS])
        return out.getvalue()
