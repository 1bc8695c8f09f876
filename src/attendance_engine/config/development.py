import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "attendance_engine"),
}

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))
# Optional: also seed demo workers and the default working hours on startup
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))

ACCRUAL_CACHE_TTL_SECONDS = int(os.getenv("ACCRUAL_CACHE_TTL_SECONDS", "60"))
ENFORCE_POLICY_ORDER = bool(int(os.getenv("ENFORCE_POLICY_ORDER", "0")))
ALLOW_NON_WORKING_DAY_CHECKIN = bool(int(os.getenv("ALLOW_NON_WORKING_DAY_CHECKIN", "1")))
