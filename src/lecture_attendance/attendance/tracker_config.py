from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from cryptography.fernet import Fernet

from ..core.constants import (
    DEFAULT_INACTIVE_THRESHOLD_MINUTES,
    DEFAULT_LATE_THRESHOLD_MINUTES,
    DEFAULT_TOKEN_TTL_MINUTES,
)


@dataclass(frozen=True)
class TrackerConfig:
    """Settings injected into the attendance tracker at construction.

    key is a Fernet key (32 url-safe base64-encoded bytes); it is loaded once at
    startup and never rotated while the process runs.
    """

    key: Union[str, bytes]
    token_ttl_minutes: int = DEFAULT_TOKEN_TTL_MINUTES
    late_threshold_minutes: int = DEFAULT_LATE_THRESHOLD_MINUTES
    inactive_threshold_minutes: int = DEFAULT_INACTIVE_THRESHOLD_MINUTES

    def __post_init__(self):
        if not self.key:
            raise ValueError("Attendance token key is not configured")
        # Fernet validates key length/encoding.
        Fernet(self.key)
        if int(self.token_ttl_minutes) <= 0:
            raise ValueError("Token TTL must be positive")
        if int(self.late_threshold_minutes) < 0 or int(self.inactive_threshold_minutes) < 0:
            raise ValueError("Attendance thresholds must not be negative")

    @classmethod
    def from_settings(cls, settings) -> "TrackerConfig":
        return cls(
            key=getattr(settings, "ATTENDANCE_TOKEN_KEY", ""),
            token_ttl_minutes=int(getattr(settings, "ATTENDANCE_TOKEN_TTL_MINUTES", DEFAULT_TOKEN_TTL_MINUTES)),
            late_threshold_minutes=int(
                getattr(settings, "ATTENDANCE_LATE_THRESHOLD_MINUTES", DEFAULT_LATE_THRESHOLD_MINUTES)
            ),
            inactive_threshold_minutes=int(
                getattr(settings, "ATTENDANCE_INACTIVE_THRESHOLD_MINUTES", DEFAULT_INACTIVE_THRESHOLD_MINUTES)
            ),
        )
