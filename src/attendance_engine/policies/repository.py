from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import Weekday
from .model import WeekdayPolicy


class PolicyRepository(Protocol):
    def get(self, weekday: Weekday) -> Optional[WeekdayPolicy]:
        raise NotImplementedError

    def list_all(self) -> Sequence[WeekdayPolicy]:
        raise NotImplementedError

    def upsert(self, policy: WeekdayPolicy) -> None:
        raise NotImplementedError
