import os

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "lecture_attendance"),
}

# Required: the app refuses to start when this is empty.
ATTENDANCE_TOKEN_KEY = os.getenv("ATTENDANCE_TOKEN_KEY", "")
ATTENDANCE_TOKEN_TTL_MINUTES = int(os.getenv("ATTENDANCE_TOKEN_TTL_MINUTES", "10"))
ATTENDANCE_LATE_THRESHOLD_MINUTES = int(os.getenv("ATTENDANCE_LATE_THRESHOLD_MINUTES", "10"))
ATTENDANCE_INACTIVE_THRESHOLD_MINUTES = int(os.getenv("ATTENDANCE_INACTIVE_THRESHOLD_MINUTES", "10"))

DEBUG = False
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
