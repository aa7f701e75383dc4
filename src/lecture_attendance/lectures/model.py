from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import LectureStatus


@dataclass(frozen=True)
class Lecture:
    """Scheduled lecture as seen by the attendance tracker (read-mostly)."""

    lecture_id: int
    section_id: int
    instructor_id: int
    starts_at: datetime
    ends_at: datetime
    status: LectureStatus = LectureStatus.SCHEDULED
    ended_at: Optional[datetime] = None

    def is_open_at(self, moment: datetime) -> bool:
        """True when moment falls inside [starts_at, ends_at]."""
        return self.starts_at <= moment <= self.ends_at


@dataclass(frozen=True)
class LectureSweepResult:
    cancelled: int
    ended: int
    finalized: int
