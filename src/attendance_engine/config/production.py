import os

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "attendance_engine"),
    "connect_timeout": int(os.getenv("DB_CONNECT_TIMEOUT", "5")),
}

DEBUG = False
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))

# Policy version and accrual cache are per process. With several workers
# (gunicorn -w N) another process may serve accruals up to this many seconds
# stale after a policy edit or check-out; set 0 to disable caching there.
ACCRUAL_CACHE_TTL_SECONDS = int(os.getenv("ACCRUAL_CACHE_TTL_SECONDS", "300"))
ENFORCE_POLICY_ORDER = bool(int(os.getenv("ENFORCE_POLICY_ORDER", "0")))
ALLOW_NON_WORKING_DAY_CHECKIN = bool(int(os.getenv("ALLOW_NON_WORKING_DAY_CHECKIN", "1")))
