from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import LectureStatus
from .model import Lecture


class LectureRepository(Protocol):
    def get_by_id(self, lecture_id: int) -> Optional[Lecture]:
        raise NotImplementedError

    def list_overdue(self, *, status: LectureStatus, now: datetime) -> Sequence[Lecture]:
        """Lectures in the given status whose ends_at is before now."""

        raise NotImplementedError

    # Status transitions only apply while the row still has expected_status;
    # they return False when another writer got there first.

    def mark_running(self, *, lecture_id: int, expected_status: LectureStatus = LectureStatus.SCHEDULED) -> bool:
        raise NotImplementedError

    def mark_ended(
        self, *, lecture_id: int, ended_at: datetime, expected_status: LectureStatus = LectureStatus.RUNNING
    ) -> bool:
        raise NotImplementedError

    def mark_cancelled(self, *, lecture_id: int, expected_status: LectureStatus = LectureStatus.SCHEDULED) -> bool:
        raise NotImplementedError
