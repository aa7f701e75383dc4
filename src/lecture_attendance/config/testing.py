import os

SECRET_KEY = "test-secret"

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "lecture_attendance_test"),
}

# Fixed key so tokens survive between app instances in tests.
ATTENDANCE_TOKEN_KEY = "MDAwMDAwMDAwMDAwMDAwMDAwMDAwMDAwMDAwMDAwMDA="
ATTENDANCE_TOKEN_TTL_MINUTES = 10
ATTENDANCE_LATE_THRESHOLD_MINUTES = 10
ATTENDANCE_INACTIVE_THRESHOLD_MINUTES = 10

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
