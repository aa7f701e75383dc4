from __future__ import annotations

import logging
from dataclasses import replace
from datetime import datetime
from typing import Callable, Optional

from ..attendance.model import FinalizeResult
from ..attendance.service import AttendanceService
from ..common.datetime_utils import now_local, truncate_to_second
from ..core.enums import LectureStatus
from ..core.exceptions import AuthorizationError, InvalidLectureState, NotFound
from .model import Lecture, LectureSweepResult
from .repository import LectureRepository

logger = logging.getLogger(__name__)


class LectureLifecycleService:
    """Lecture transitions that open attendance or hand over to finalization.

    Every transition is a guarded update on the expected current status, so a
    concurrent start/end/sweep never overwrites a status it did not read.
    """

    def __init__(
        self,
        lectures: LectureRepository,
        attendance: AttendanceService,
        *,
        clock: Callable[[], datetime] = now_local,
    ):
        self._lectures = lectures
        self._attendance = attendance
        self._clock = clock

    def _get_owned_lecture(self, lecture_id: int, instructor_id: int) -> Lecture:
        lecture = self._lectures.get_by_id(int(lecture_id))
        if not lecture:
            raise NotFound("Lecture not found.")
        if lecture.instructor_id != int(instructor_id):
            raise AuthorizationError("Not allowed.")
        return lecture

    def start_lecture(self, lecture_id: int, *, instructor_id: int, now: Optional[datetime] = None) -> Lecture:
        now = truncate_to_second(now or self._clock())
        lecture = self._get_owned_lecture(lecture_id, instructor_id)

        if lecture.status in (LectureStatus.ENDED, LectureStatus.CANCELLED):
            raise InvalidLectureState("Lecture cannot be started.")
        if lecture.status == LectureStatus.RUNNING:
            return lecture

        if now < lecture.starts_at:
            raise InvalidLectureState("Too early to start lecture.")

        if now > lecture.ends_at:
            if self._lectures.mark_cancelled(lecture_id=lecture.lecture_id, expected_status=LectureStatus.SCHEDULED):
                logger.info("Lecture %s cancelled on late start by instructor %s", lecture.lecture_id, instructor_id)
            raise InvalidLectureState("Lecture time passed. Lecture cancelled.")

        if not self._lectures.mark_running(lecture_id=lecture.lecture_id, expected_status=LectureStatus.SCHEDULED):
            raise InvalidLectureState("Lecture cannot be started.")

        logger.info("Lecture %s started by instructor %s", lecture.lecture_id, instructor_id)
        return replace(lecture, status=LectureStatus.RUNNING)

    def end_lecture(self, lecture_id: int, *, instructor_id: int, now: Optional[datetime] = None) -> FinalizeResult:
        now = truncate_to_second(now or self._clock())
        lecture = self._get_owned_lecture(lecture_id, instructor_id)

        if lecture.status != LectureStatus.RUNNING:
            raise InvalidLectureState("Lecture is not running.")

        if not self._lectures.mark_ended(
            lecture_id=lecture.lecture_id, ended_at=now, expected_status=LectureStatus.RUNNING
        ):
            raise InvalidLectureState("Lecture is not running.")
        logger.info("Lecture %s ended by instructor %s", lecture.lecture_id, instructor_id)

        return self._attendance.finalize_lecture(lecture.lecture_id, now=now)

    def finalize_ended_lecture(self, lecture_id: int) -> FinalizeResult:
        """Re-run finalization for an ended lecture, as of its ended_at."""
        lecture = self._lectures.get_by_id(int(lecture_id))
        if not lecture:
            raise NotFound("Lecture not found.")
        if lecture.status != LectureStatus.ENDED:
            raise InvalidLectureState("Lecture has not ended.")

        return self._attendance.finalize_lecture(lecture.lecture_id, now=lecture.ended_at or self._clock())

    def auto_update_statuses(self, *, now: Optional[datetime] = None) -> LectureSweepResult:
        """Cancel scheduled lectures that never started; end and finalize overdue running ones."""
        now = truncate_to_second(now or self._clock())

        cancelled = 0
        for lecture in self._lectures.list_overdue(status=LectureStatus.SCHEDULED, now=now):
            if self._lectures.mark_cancelled(lecture_id=lecture.lecture_id, expected_status=LectureStatus.SCHEDULED):
                cancelled += 1

        ended = 0
        finalized = 0
        for lecture in self._lectures.list_overdue(status=LectureStatus.RUNNING, now=now):
            if not self._lectures.mark_ended(
                lecture_id=lecture.lecture_id, ended_at=now, expected_status=LectureStatus.RUNNING
            ):
                continue
            ended += 1
            try:
                self._attendance.finalize_lecture(lecture.lecture_id, now=now)
            except Exception:
                # Lecture stays ended; `flask finalize-lecture <id>` re-runs it.
                logger.exception("Finalization failed for ended lecture %s", lecture.lecture_id)
                continue
            finalized += 1

        logger.info("Auto updated lectures. Cancelled: %s, Ended: %s, Finalized: %s", cancelled, ended, finalized)
        return LectureSweepResult(cancelled=cancelled, ended=ended, finalized=finalized)
