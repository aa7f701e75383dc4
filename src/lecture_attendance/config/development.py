import os

from cryptography.fernet import Fernet

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "lecture_attendance"),
}

# Without a configured key, a throwaway one is generated: tokens stop working after a restart.
ATTENDANCE_TOKEN_KEY = os.getenv("ATTENDANCE_TOKEN_KEY") or Fernet.generate_key().decode("ascii")
ATTENDANCE_TOKEN_TTL_MINUTES = int(os.getenv("ATTENDANCE_TOKEN_TTL_MINUTES", "10"))
ATTENDANCE_LATE_THRESHOLD_MINUTES = int(os.getenv("ATTENDANCE_LATE_THRESHOLD_MINUTES", "10"))
ATTENDANCE_INACTIVE_THRESHOLD_MINUTES = int(os.getenv("ATTENDANCE_INACTIVE_THRESHOLD_MINUTES", "10"))

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))
