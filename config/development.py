import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "branch_attendance"),
}

# Bearer token for the messaging bot that drives check-ins
API_SECRET = os.getenv("API_SECRET", "dev-api-secret")
# Bearer token for the scheduler that triggers the auto-checkout sweep
CRON_SECRET = os.getenv("CRON_SECRET", "dev-cron-secret")

# Business default zone, used for "today" when no branch zone applies
DEFAULT_TIMEZONE = os.getenv("DEFAULT_TIMEZONE", "America/Mexico_City")

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))

# Per client IP on /api/attendance/validate (Flask-Limiter syntax)
VALIDATE_RATE_LIMIT = os.getenv("VALIDATE_RATE_LIMIT", "100 per minute")
# Use a shared backend (e.g. redis://) when running several workers
RATELIMIT_STORAGE_URI = os.getenv("RATELIMIT_STORAGE_URI", "memory://")
