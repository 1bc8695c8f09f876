"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

from datetime import time

DEFAULT_HISTORY_LIMIT = 30
DEFAULT_ACCRUAL_CACHE_TTL_SECONDS = 300

# Seeded working-hours policy (Mon-Fri working, weekend off).
DEFAULT_START_TIME = time(9, 0)
DEFAULT_END_TIME = time(18, 0)
DEFAULT_FULL_DAY_HOURS = 8.0
DEFAULT_HALF_DAY_HOURS = 4.0
DEFAULT_OVERTIME_HOURS = 10.0
