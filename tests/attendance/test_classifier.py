from datetime import time

import pytest

from attendance_engine.attendance.classifier import StatusClassifier, classify_status, status_rank
from attendance_engine.core.enums import AttendanceStatus, Weekday
from attendance_engine.policies.model import WeekdayPolicy


@pytest.fixture
def policy():
    return WeekdayPolicy(
        weekday=Weekday.MONDAY,
        is_working_day=True,
        start_time=time(9, 0),
        end_time=time(18, 0),
        full_day_hours=8,
        half_day_hours=4,
        overtime_hours=10,
    )


@pytest.mark.parametrize(
    "hours, expected",
    [
        (9, AttendanceStatus.FULL_DAY),
        (11, AttendanceStatus.OVERTIME),
        (5, AttendanceStatus.HALF_DAY),
        (2, AttendanceStatus.PRESENT),
    ],
)
def test_classification_examples(policy, hours, expected):
    assert classify_status(hours, policy) == expected


def test_thresholds_are_inclusive(policy):
    assert classify_status(10, policy) == AttendanceStatus.OVERTIME
    assert classify_status(8, policy) == AttendanceStatus.FULL_DAY
    assert classify_status(4, policy) == AttendanceStatus.HALF_DAY
    assert classify_status(3.99, policy) == AttendanceStatus.PRESENT


def test_zero_hours_is_present(policy):
    assert classify_status(0, policy) == AttendanceStatus.PRESENT


def test_classification_is_monotonic_in_hours(policy):
    hours = [h / 4 for h in range(0, 14 * 4)]
    ranks = [status_rank(classify_status(h, policy)) for h in hours]

    assert ranks == sorted(ranks)


def test_classifier_wrapper_matches_function(policy):
    classifier = StatusClassifier()
    for h in (0, 3.5, 4, 7.9, 8, 9.99, 10, 12):
        assert classifier.classify(h, policy) == classify_status(h, policy)
