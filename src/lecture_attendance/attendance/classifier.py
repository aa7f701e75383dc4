from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional

from ..common.datetime_utils import whole_minutes_between
from ..core.constants import DEFAULT_INACTIVE_THRESHOLD_MINUTES, DEFAULT_LATE_THRESHOLD_MINUTES
from ..core.enums import AttendanceStatus
from ..lectures.model import Lecture
from .model import HeartbeatRecord


@dataclass(frozen=True)
class StatusDecision:
    status: AttendanceStatus
    checked_in_at: Optional[datetime] = None
    last_seen_at: Optional[datetime] = None
    minutes_attended: int = 0


@dataclass(frozen=True)
class AttendanceClassifier:
    """Derive a student's attendance status from their heartbeat trail.

    Rules are applied in order and the last one that matches wins:
    present by default, late when the first heartbeat came after
    starts_at + late threshold, left when the last heartbeat is older than
    now - inactive threshold. So left overrides late.
    """

    late_threshold_minutes: int = DEFAULT_LATE_THRESHOLD_MINUTES
    inactive_threshold_minutes: int = DEFAULT_INACTIVE_THRESHOLD_MINUTES

    def decide(self, *, lecture: Lecture, heartbeat: Optional[HeartbeatRecord], now: datetime) -> StatusDecision:
        if heartbeat is None or heartbeat.joined_at is None:
            return StatusDecision(status=AttendanceStatus.ABSENT)

        joined_at = heartbeat.joined_at
        last_seen_at = heartbeat.last_seen_at or joined_at

        status = AttendanceStatus.PRESENT

        if joined_at > lecture.starts_at + timedelta(minutes=self.late_threshold_minutes):
            status = AttendanceStatus.LATE

        if last_seen_at < now - timedelta(minutes=self.inactive_threshold_minutes):
            status = AttendanceStatus.LEFT

        # Time after the scheduled end does not count.
        minutes = max(0, whole_minutes_between(joined_at, min(last_seen_at, lecture.ends_at)))

        return StatusDecision(
            status=status,
            checked_in_at=joined_at,
            last_seen_at=last_seen_at,
            minutes_attended=minutes,
        )
