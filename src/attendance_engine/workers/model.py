from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Worker:
    """Domain entity: a team member whose attendance is tracked.

    Note: Plain data object; the salary is the budgeted monthly amount.
    """

    worker_id: int
    full_name: str
    monthly_salary: float
    role: Optional[str] = None
    is_active: bool = True
