from __future__ import annotations

from enum import Enum


class LectureStatus(str, Enum):
    """Lifecycle state of a lecture, owned by scheduling."""

    SCHEDULED = "scheduled"
    RUNNING = "running"
    ENDED = "ended"
    CANCELLED = "cancelled"


class AttendanceStatus(str, Enum):
    """Per-student attendance status stored in the ledger."""

    PRESENT = "present"
    LATE = "late"
    LEFT = "left"
    ABSENT = "absent"
