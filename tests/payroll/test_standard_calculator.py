from datetime import date, datetime, timedelta

from attendance_engine.attendance.model import AttendanceSession
from attendance_engine.core.enums import AttendanceStatus
from attendance_engine.payroll.calculator.standard_calculator import (
    StandardAccrualCalculator,
    compute_accrual,
    round_half_up,
)
from attendance_engine.payroll.model import MonthlyAccrual


def _sessions(*groups):
    """groups: (status, count, hours) tuples -> consecutive sessions from 2026-04-01."""
    out = []
    day = date(2026, 4, 1)
    for status, count, hours in groups:
        for _ in range(count):
            check_in = datetime.combine(day, datetime.min.time()).replace(hour=9)
            out.append(
                AttendanceSession(
                    session_id=len(out) + 1,
                    worker_id=1,
                    work_date=day,
                    check_in_time=check_in,
                    check_out_time=check_in + timedelta(hours=hours),
                    actual_working_hours=hours,
                    status=status,
                )
            )
            day += timedelta(days=1)
    return out


def test_month_of_mixed_statuses():
    sessions = _sessions(
        (AttendanceStatus.FULL_DAY, 20, 8.5),
        (AttendanceStatus.HALF_DAY, 4, 4.5),
        (AttendanceStatus.OVERTIME, 2, 11),
    )

    accrual = StandardAccrualCalculator().compute_accrual(30000, 30, sessions)

    assert accrual.per_diem_rate == 1000
    assert accrual.earned_days == 25
    assert accrual.earned_salary == 25000
    assert accrual.variance == 5000
    assert accrual.count(AttendanceStatus.FULL_DAY) == 20
    assert accrual.count(AttendanceStatus.HALF_DAY) == 4
    assert accrual.count(AttendanceStatus.OVERTIME) == 2
    assert accrual.absent_days == 4
    assert accrual.total_hours == 20 * 8.5 + 4 * 4.5 + 2 * 11


def test_present_counts_as_full_day_and_absent_as_zero():
    sessions = _sessions((AttendanceStatus.PRESENT, 3, 2), (AttendanceStatus.ABSENT, 2, 0))

    accrual = compute_accrual(31000, 31, sessions)

    assert accrual.earned_days == 3
    assert accrual.earned_salary == 3000
    # Absent rows do not count as attended days
    assert accrual.absent_days == 31 - 3


def test_no_sessions_earns_nothing():
    accrual = compute_accrual(28000, 28, [])

    assert accrual.earned_salary == 0
    assert accrual.variance == 28000
    assert accrual.absent_days == 28


def test_zero_days_in_month_does_not_divide():
    accrual = compute_accrual(30000, 0, _sessions((AttendanceStatus.FULL_DAY, 2, 8)))

    assert accrual.per_diem_rate == 0
    assert accrual.earned_salary == 0
    assert accrual.variance == 30000


def test_working_days_drive_absent_count():
    sessions = _sessions((AttendanceStatus.FULL_DAY, 18, 8))

    accrual = compute_accrual(30000, 30, sessions, working_days=22)

    assert accrual.absent_days == 4


def test_absent_days_never_negative():
    sessions = _sessions((AttendanceStatus.FULL_DAY, 5, 8))

    assert compute_accrual(30000, 30, sessions, working_days=3).absent_days == 0


def test_earned_salary_rounds_half_up():
    # per diem of exactly 0.5
    accrual = compute_accrual(15, 30, _sessions((AttendanceStatus.FULL_DAY, 1, 8)))

    assert accrual.per_diem_rate == 0.5
    assert accrual.earned_salary == 1
    assert round_half_up(2.5) == 3
    assert round_half_up(2.4999) == 2
    assert round_half_up(0.49999999999999994) == 0


def test_repeated_calls_are_identical():
    sessions = _sessions(
        (AttendanceStatus.FULL_DAY, 7, 8),
        (AttendanceStatus.HALF_DAY, 3, 5),
        (AttendanceStatus.OVERTIME, 5, 10.5),
        (AttendanceStatus.PRESENT, 1, 1),
    )
    calc = StandardAccrualCalculator()

    first = calc.compute_accrual(47123.45, 31, sessions)
    second = calc.compute_accrual(47123.45, 31, list(sessions))

    assert (first.earned_salary, first.earned_days, first.variance) == (
        second.earned_salary,
        second.earned_days,
        second.variance,
    )


def test_team_aggregate():
    calc = StandardAccrualCalculator()
    a = calc.compute_accrual(30000, 30, _sessions((AttendanceStatus.FULL_DAY, 15, 8)))
    b = calc.compute_accrual(60000, 30, _sessions((AttendanceStatus.FULL_DAY, 30, 8)))

    summary = calc.aggregate([a, b])

    assert summary.total_earned == 15000 + 60000
    assert summary.total_budget == 90000
    assert summary.percentage_earned == 75000 / 90000 * 100
    assert summary.headcount == 2


def test_aggregate_without_workers_is_zero():
    summary = StandardAccrualCalculator().aggregate([])

    assert summary.total_budget == 0
    assert summary.total_earned == 0
    assert summary.percentage_earned == 0


def test_aggregate_with_zero_budget_is_zero_percent():
    zero = MonthlyAccrual(
        monthly_salary=0,
        days_in_month=30,
        per_diem_rate=0,
        earned_days=10,
        earned_salary=0,
        variance=0,
    )

    assert StandardAccrualCalculator().aggregate([zero]).percentage_earned == 0
