from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import AttendanceStatus


@dataclass(frozen=True)
class HeartbeatRecord:
    """Liveness trail of one student in one lecture.

    joined_at is written once by the first heartbeat; last_seen_at moves with
    every heartbeat.
    """

    lecture_id: int
    student_id: int
    joined_at: Optional[datetime]
    last_seen_at: Optional[datetime]


@dataclass(frozen=True)
class AttendanceRecord:
    """Ledger row: per-student per-lecture status and duration."""

    lecture_id: int
    student_id: int
    status: AttendanceStatus
    checked_in_at: Optional[datetime] = None
    last_seen_at: Optional[datetime] = None
    minutes_attended: int = 0


@dataclass(frozen=True)
class IssuedToken:
    token: str
    expires_at: datetime


@dataclass(frozen=True)
class HeartbeatAck:
    lecture_id: int
    last_seen_at: datetime


@dataclass(frozen=True)
class FinalizeResult:
    lecture_id: int
    finalized_count: int


@dataclass(frozen=True)
class LiveAttendanceRow:
    """Read-model for the instructor's live roster view."""

    student_id: int
    status: AttendanceStatus
    checked_in_at: Optional[datetime]
    last_seen_at: Optional[datetime]
    minutes_attended: int


@dataclass(frozen=True)
class AttendanceSummary:
    lecture_id: int
    present_or_late: int
    left: int
    absent: int
