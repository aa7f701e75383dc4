from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Callable

from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.mysql_heartbeat_repository import MySQLHeartbeatRepository
from .attendance.repository import AttendanceRepository, HeartbeatRepository
from .attendance.service import AttendanceService
from .attendance.tracker_config import TrackerConfig
from .common.datetime_utils import now_local
from .database.connection import DBConfig, DatabaseConnection
from .enrollments.mysql_enrollment_repository import MySQLEnrollmentRepository
from .enrollments.repository import EnrollmentRepository
from .lectures.mysql_lecture_repository import MySQLLectureRepository
from .lectures.repository import LectureRepository
from .lectures.service import LectureLifecycleService


@dataclass(frozen=True)
class Container:
    lectures_repo: LectureRepository
    enrollments_repo: EnrollmentRepository
    heartbeats_repo: HeartbeatRepository
    attendance_repo: AttendanceRepository

    attendance_service: AttendanceService
    lecture_service: LectureLifecycleService


def assemble_container(
    *,
    lectures_repo: LectureRepository,
    enrollments_repo: EnrollmentRepository,
    heartbeats_repo: HeartbeatRepository,
    attendance_repo: AttendanceRepository,
    tracker_config: TrackerConfig,
    clock: Callable[[], datetime] = now_local,
) -> Container:
    attendance_service = AttendanceService(
        lectures_repo,
        enrollments_repo,
        heartbeats_repo,
        attendance_repo,
        config=tracker_config,
        clock=clock,
    )
    lecture_service = LectureLifecycleService(lectures_repo, attendance_service, clock=clock)

    return Container(
        lectures_repo=lectures_repo,
        enrollments_repo=enrollments_repo,
        heartbeats_repo=heartbeats_repo,
        attendance_repo=attendance_repo,
        attendance_service=attendance_service,
        lecture_service=lecture_service,
    )


def build_container(*, db_config: dict, tracker_config: TrackerConfig) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))

    return assemble_container(
        lectures_repo=MySQLLectureRepository(conn),
        enrollments_repo=MySQLEnrollmentRepository(conn),
        heartbeats_repo=MySQLHeartbeatRepository(conn),
        attendance_repo=MySQLAttendanceRepository(conn),
        tracker_config=tracker_config,
    )
