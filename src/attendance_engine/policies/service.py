from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date, time
from typing import Optional

from ..common.cache import TTLCache
from ..common.datetime_utils import iter_dates
from ..common.validators import require_non_negative
from ..core.enums import Weekday
from ..core.exceptions import PolicyValidationError, ValidationError
from .model import WeekdayPolicy, default_policy, validate_policy
from .repository import PolicyRepository

logger = logging.getLogger(__name__)


class PolicyService:
    """Read and update the per-weekday working-hours policy.

    ``version`` increases on every update; accrual cache keys include it so a
    policy edit never serves figures computed under the old thresholds.
    """

    def __init__(
        self,
        policies: PolicyRepository,
        *,
        enforce_order: bool = False,
        cache: Optional[TTLCache] = None,
    ):
        self._policies = policies
        self._enforce_order = bool(enforce_order)
        self._cache = cache
        self._version = 1

    @property
    def version(self) -> int:
        return self._version

    def list_policies(self) -> list[WeekdayPolicy]:
        stored = {p.weekday: p for p in self._policies.list_all()}
        return [stored.get(day) or default_policy(day) for day in Weekday.ordered()]

    def get_policy(self, weekday: Weekday) -> WeekdayPolicy:
        policy = self._policies.get(weekday)
        if policy is None:
            logger.warning("No working-hours row for %s, using defaults", weekday.value)
            return default_policy(weekday)
        return policy

    def get_policy_for_date(self, work_date: date) -> WeekdayPolicy:
        return self.get_policy(Weekday.from_index(work_date.weekday()))

    def is_working_day(self, work_date: date) -> bool:
        return self.get_policy_for_date(work_date).is_working_day

    def working_days_between(self, start: date, end: date) -> int:
        if end < start:
            return 0
        by_day = {p.weekday: p for p in self.list_policies()}
        return sum(1 for d in iter_dates(start, end) if by_day[Weekday.from_index(d.weekday())].is_working_day)

    def check(self, policy: WeekdayPolicy) -> list[str]:
        """Validation hook for settings screens; never raises."""
        return validate_policy(policy)

    def update_policy(
        self,
        weekday: Weekday,
        *,
        is_working_day: Optional[bool] = None,
        start_time: Optional[time] = None,
        end_time: Optional[time] = None,
        full_day_hours: Optional[float] = None,
        half_day_hours: Optional[float] = None,
        overtime_hours: Optional[float] = None,
    ) -> WeekdayPolicy:
        current = self.get_policy(weekday)
        changes: dict = {}
        if is_working_day is not None:
            changes["is_working_day"] = bool(is_working_day)
        if start_time is not None:
            changes["start_time"] = start_time
        if end_time is not None:
            changes["end_time"] = end_time
        if full_day_hours is not None:
            changes["full_day_hours"] = require_non_negative(full_day_hours, "full_day_hours")
        if half_day_hours is not None:
            changes["half_day_hours"] = require_non_negative(half_day_hours, "half_day_hours")
        if overtime_hours is not None:
            changes["overtime_hours"] = require_non_negative(overtime_hours, "overtime_hours")
        if not changes:
            raise ValidationError("Nothing to update", field="policy")

        updated = replace(current, **changes)
        self._save(updated)
        return updated

    def apply_to_all(self, source: Weekday = Weekday.MONDAY) -> list[WeekdayPolicy]:
        """Copy one day's times and thresholds onto every other day."""
        template = self.get_policy(source)
        problems = validate_policy(replace(template, is_working_day=True))
        if problems and self._enforce_order:
            raise PolicyValidationError(problems, weekday=source.value)

        result = []
        for policy in self.list_policies():
            if policy.weekday != source:
                policy = policy.with_schedule_of(template)
                self._save(policy, bump=False)
            result.append(policy)
        self._bump()
        return result

    def seed_defaults(self) -> None:
        existing = {p.weekday for p in self._policies.list_all()}
        for day in Weekday.ordered():
            if day not in existing:
                self._policies.upsert(default_policy(day))
                logger.info("Seeded default working hours for %s", day.value)

    def _save(self, policy: WeekdayPolicy, *, bump: bool = True) -> None:
        problems = validate_policy(policy)
        if problems:
            if self._enforce_order:
                raise PolicyValidationError(problems, weekday=policy.weekday.value)
            logger.warning("Working hours for %s look inconsistent: %s", policy.weekday.value, "; ".join(problems))

        self._policies.upsert(policy)
        if bump:
            self._bump()

    def _bump(self) -> None:
        self._version += 1
        if self._cache is not None:
            self._cache.invalidate()
        logger.info("Working-hours policy updated (version=%s)", self._version)
