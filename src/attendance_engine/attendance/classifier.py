"""Status classification of a closed attendance session.

Thresholds are checked from the highest down, so the first match wins:
overtime, then full day, then half day; anything shorter is plain Present.
"""

from __future__ import annotations

from ..core.enums import AttendanceStatus
from ..policies.model import WeekdayPolicy

_RANK = {
    AttendanceStatus.PRESENT: 0,
    AttendanceStatus.HALF_DAY: 1,
    AttendanceStatus.FULL_DAY: 2,
    AttendanceStatus.OVERTIME: 3,
}


def classify_status(actual_working_hours: float, policy: WeekdayPolicy) -> AttendanceStatus:
    if actual_working_hours >= policy.overtime_hours:
        return AttendanceStatus.OVERTIME
    if actual_working_hours >= policy.full_day_hours:
        return AttendanceStatus.FULL_DAY
    if actual_working_hours >= policy.half_day_hours:
        return AttendanceStatus.HALF_DAY
    return AttendanceStatus.PRESENT


def status_rank(status: AttendanceStatus) -> int:
    """Position in ``Present < Half Day < Full Day < Overtime``."""
    return _RANK[status]


class StatusClassifier:
    """Injectable wrapper so services and reports share one classifier."""

    def classify(self, actual_working_hours: float, policy: WeekdayPolicy) -> AttendanceStatus:
        return classify_status(actual_working_hours, policy)
