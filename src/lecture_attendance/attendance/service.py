from __future__ import annotations

import logging
from collections import Counter
from datetime import datetime, timedelta
from typing import Callable, Optional

from ..common.datetime_utils import now_local, to_unix, truncate_to_second
from ..core.enums import AttendanceStatus, LectureStatus
from ..core.exceptions import (
    AuthorizationError,
    DomainError,
    LectureNotActive,
    NotEnrolled,
    NotFound,
    OutOfWindow,
    TokenExpired,
    TokenMismatch,
)
from ..enrollments.repository import EnrollmentRepository
from ..lectures.model import Lecture
from ..lectures.repository import LectureRepository
from .classifier import AttendanceClassifier
from .model import (
    AttendanceRecord,
    AttendanceSummary,
    FinalizeResult,
    HeartbeatAck,
    IssuedToken,
    LiveAttendanceRow,
)
from .repository import AttendanceRepository, HeartbeatRepository
from .tokens import AttendanceToken, AttendanceTokenCodec
from .tracker_config import TrackerConfig

logger = logging.getLogger(__name__)

_LIVE_ORDER = {
    AttendanceStatus.PRESENT: 1,
    AttendanceStatus.LATE: 2,
    AttendanceStatus.LEFT: 3,
    AttendanceStatus.ABSENT: 4,
}


class AttendanceService:
    """Heartbeat tokens, liveness tracking and end-of-lecture finalization.

    Two write paths touch the same (lecture, student) attendance row:

    - observed: every accepted heartbeat marks the student present;
    - authoritative: finalize_lecture recomputes the status from the
      heartbeat trail and overwrites whatever the heartbeats left there.
    """

    def __init__(
        self,
        lectures: LectureRepository,
        enrollments: EnrollmentRepository,
        heartbeats: HeartbeatRepository,
        attendance: AttendanceRepository,
        *,
        config: TrackerConfig,
        codec: Optional[AttendanceTokenCodec] = None,
        classifier: Optional[AttendanceClassifier] = None,
        clock: Callable[[], datetime] = now_local,
    ):
        self._lectures = lectures
        self._enrollments = enrollments
        self._heartbeats = heartbeats
        self._attendance = attendance
        self._config = config
        self._codec = codec or AttendanceTokenCodec(config.key)
        self._classifier = classifier or AttendanceClassifier(
            late_threshold_minutes=config.late_threshold_minutes,
            inactive_threshold_minutes=config.inactive_threshold_minutes,
        )
        self._clock = clock

    def _get_lecture(self, lecture_id: int) -> Lecture:
        lecture = self._lectures.get_by_id(int(lecture_id))
        if not lecture:
            raise NotFound("Lecture not found.")
        return lecture

    def _get_owned_lecture(self, lecture_id: int, instructor_id: int) -> Lecture:
        lecture = self._get_lecture(lecture_id)
        if lecture.instructor_id != int(instructor_id):
            raise AuthorizationError("Not allowed.")
        return lecture

    def issue_token(self, lecture_id: int, student_id: int, *, now: Optional[datetime] = None) -> IssuedToken:
        now = now or self._clock()
        lecture = self._get_lecture(lecture_id)

        if not lecture.is_open_at(now):
            raise OutOfWindow("You can only attend during lecture time.")

        if not self._enrollments.is_enrolled(section_id=lecture.section_id, student_id=int(student_id)):
            raise NotEnrolled("You are not enrolled in this section.")

        expires_at = now + timedelta(minutes=self._config.token_ttl_minutes)
        token = self._codec.encode(
            AttendanceToken(
                lecture_id=lecture.lecture_id,
                student_id=int(student_id),
                exp=to_unix(expires_at),
            )
        )
        logger.info("Issued attendance token: lecture=%s student=%s expires_at=%s", lecture.lecture_id, student_id, expires_at)
        return IssuedToken(token=token, expires_at=expires_at)

    def record_heartbeat(self, token: str, student_id: int, *, now: Optional[datetime] = None) -> HeartbeatAck:
        now = truncate_to_second(now or self._clock())

        try:
            payload = self._codec.decode(token)

            if payload.student_id != int(student_id):
                raise TokenMismatch("Token does not belong to this user.")

            if to_unix(now) > payload.exp:
                raise TokenExpired("Token expired. Please refresh token.")

            lecture = self._get_lecture(payload.lecture_id)

            if lecture.status in (LectureStatus.ENDED, LectureStatus.CANCELLED) or not lecture.is_open_at(now):
                raise LectureNotActive("Lecture time ended or not started.")
        except DomainError as e:
            logger.info("Heartbeat rejected: student=%s kind=%s", student_id, e.kind)
            raise

        heartbeat = self._heartbeats.touch(lecture_id=lecture.lecture_id, student_id=payload.student_id, seen_at=now)
        self._attendance.upsert_observed(
            lecture_id=lecture.lecture_id,
            student_id=payload.student_id,
            status=AttendanceStatus.PRESENT,
            checked_in_at=heartbeat.joined_at,
            last_seen_at=now,
        )
        return HeartbeatAck(lecture_id=lecture.lecture_id, last_seen_at=now)

    def finalize_lecture(self, lecture_id: int, *, now: Optional[datetime] = None) -> FinalizeResult:
        now = now or self._clock()
        lecture = self._get_lecture(lecture_id)

        roster = self._enrollments.list_student_ids(lecture.section_id)
        trail = {hb.student_id: hb for hb in self._heartbeats.list_for_lecture(lecture.lecture_id)}

        records = []
        for student_id in roster:
            decision = self._classifier.decide(lecture=lecture, heartbeat=trail.get(student_id), now=now)
            records.append(
                AttendanceRecord(
                    lecture_id=lecture.lecture_id,
                    student_id=student_id,
                    status=decision.status,
                    checked_in_at=decision.checked_in_at,
                    last_seen_at=decision.last_seen_at,
                    minutes_attended=decision.minutes_attended,
                )
            )

        self._attendance.save_final(records)

        counts = Counter(r.status.value for r in records)
        logger.info("Finalized attendance: lecture=%s students=%s %s", lecture.lecture_id, len(records), dict(counts))
        return FinalizeResult(lecture_id=lecture.lecture_id, finalized_count=len(records))

    def live_attendance(
        self, lecture_id: int, *, instructor_id: int, now: Optional[datetime] = None
    ) -> list[LiveAttendanceRow]:
        """Whole-section roster with provisional statuses, best first. Instructor only."""
        now = now or self._clock()
        lecture = self._get_owned_lecture(lecture_id, instructor_id)

        roster = self._enrollments.list_student_ids(lecture.section_id)
        trail = {hb.student_id: hb for hb in self._heartbeats.list_for_lecture(lecture.lecture_id)}
        stored = {r.student_id: r for r in self._attendance.list_for_lecture(lecture.lecture_id)}

        rows = []
        for student_id in roster:
            heartbeat = trail.get(student_id)
            record = stored.get(student_id)

            if heartbeat and heartbeat.joined_at:
                decision = self._classifier.decide(lecture=lecture, heartbeat=heartbeat, now=now)
                rows.append(
                    LiveAttendanceRow(
                        student_id=student_id,
                        status=decision.status,
                        checked_in_at=decision.checked_in_at,
                        last_seen_at=decision.last_seen_at,
                        minutes_attended=decision.minutes_attended,
                    )
                )
            elif record:
                rows.append(
                    LiveAttendanceRow(
                        student_id=student_id,
                        status=record.status,
                        checked_in_at=record.checked_in_at,
                        last_seen_at=record.last_seen_at,
                        minutes_attended=record.minutes_attended,
                    )
                )
            else:
                rows.append(
                    LiveAttendanceRow(
                        student_id=student_id,
                        status=AttendanceStatus.ABSENT,
                        checked_in_at=None,
                        last_seen_at=None,
                        minutes_attended=0,
                    )
                )

        rows.sort(key=lambda r: _LIVE_ORDER[r.status])
        return rows

    def lecture_summary(self, lecture_id: int, *, instructor_id: int) -> AttendanceSummary:
        lecture = self._get_owned_lecture(lecture_id, instructor_id)
        counts = Counter(r.status for r in self._attendance.list_for_lecture(lecture.lecture_id))
        return AttendanceSummary(
            lecture_id=lecture.lecture_id,
            present_or_late=counts[AttendanceStatus.PRESENT] + counts[AttendanceStatus.LATE],
            left=counts[AttendanceStatus.LEFT],
            absent=counts[AttendanceStatus.ABSENT],
        )
