from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import AttendanceStatus
from .model import AttendanceRecord, HeartbeatRecord


class HeartbeatRepository(Protocol):
    def touch(self, *, lecture_id: int, student_id: int, seen_at: datetime) -> HeartbeatRecord:
        """Atomic upsert keyed by (lecture, student).

        joined_at is only set when the row is created; last_seen_at is always
        overwritten. Returns the row as stored after the write.
        """

        raise NotImplementedError

    def get(self, *, lecture_id: int, student_id: int) -> Optional[HeartbeatRecord]:
        raise NotImplementedError

    def list_for_lecture(self, lecture_id: int) -> Sequence[HeartbeatRecord]:
        raise NotImplementedError


class AttendanceRepository(Protocol):
    def upsert_observed(
        self,
        *,
        lecture_id: int,
        student_id: int,
        status: AttendanceStatus,
        checked_in_at: Optional[datetime],
        last_seen_at: datetime,
    ) -> None:
        """Interim write from a heartbeat; leaves minutes_attended alone."""

        raise NotImplementedError

    def save_final(self, records: Sequence[AttendanceRecord]) -> None:
        """Authoritative write from finalization.

        Each record fully replaces the stored row. All records are written
        together or not at all.
        """

        raise NotImplementedError

    def get(self, *, lecture_id: int, student_id: int) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def list_for_lecture(self, lecture_id: int) -> Sequence[AttendanceRecord]:
        raise NotImplementedError
