import os


def get_settings_module() -> str:
    # APP_ENV picks the settings module; anything unknown falls back to development.
    env = os.getenv("APP_ENV", "development").lower()

    if env in {"prod", "production"}:
        return "lecture_attendance.config.production"

    if env in {"test", "testing"}:
        return "lecture_attendance.config.testing"

    return "lecture_attendance.config.development"
