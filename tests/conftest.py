from __future__ import annotations

from dataclasses import replace
from datetime import datetime, timedelta
from typing import Optional

import pytest
from cryptography.fernet import Fernet

from lecture_attendance.attendance.model import AttendanceRecord, HeartbeatRecord
from lecture_attendance.attendance.service import AttendanceService
from lecture_attendance.attendance.tracker_config import TrackerConfig
from lecture_attendance.core.enums import LectureStatus
from lecture_attendance.lectures.model import Lecture


class FakeClock:
    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


class InMemoryLectures:
    def __init__(self, lectures=()):
        self._by_id = {lec.lecture_id: lec for lec in lectures}
        self._after_listing: dict[int, LectureStatus] = {}

    def add(self, lecture: Lecture) -> None:
        self._by_id[lecture.lecture_id] = lecture

    def get_by_id(self, lecture_id: int) -> Optional[Lecture]:
        return self._by_id.get(int(lecture_id))

    def list_overdue(self, *, status: LectureStatus, now: datetime):
        items = [lec for lec in self._by_id.values() if lec.status == status and lec.ends_at < now]
        items.sort(key=lambda lec: (lec.ends_at, lec.lecture_id))
        for lec in items:
            new_status = self._after_listing.pop(lec.lecture_id, None)
            if new_status:
                self._by_id[lec.lecture_id] = replace(lec, status=new_status)
        return items

    def change_after_listing(self, lecture_id: int, status: LectureStatus) -> None:
        """Simulate another writer changing the status once the lecture has been listed."""
        self._after_listing[int(lecture_id)] = status

    def _transition(self, lecture_id: int, expected_status: LectureStatus, **changes) -> bool:
        lec = self._by_id.get(int(lecture_id))
        if not lec or lec.status != expected_status:
            return False
        self._by_id[lec.lecture_id] = replace(lec, **changes)
        return True

    def mark_running(self, *, lecture_id: int, expected_status: LectureStatus = LectureStatus.SCHEDULED) -> bool:
        return self._transition(lecture_id, expected_status, status=LectureStatus.RUNNING)

    def mark_ended(
        self, *, lecture_id: int, ended_at: datetime, expected_status: LectureStatus = LectureStatus.RUNNING
    ) -> bool:
        return self._transition(lecture_id, expected_status, status=LectureStatus.ENDED, ended_at=ended_at)

    def mark_cancelled(self, *, lecture_id: int, expected_status: LectureStatus = LectureStatus.SCHEDULED) -> bool:
        return self._transition(lecture_id, expected_status, status=LectureStatus.CANCELLED)


class InMemoryEnrollments:
    def __init__(self, rosters: dict[int, list[int]]):
        self._rosters = rosters

    def is_enrolled(self, *, section_id: int, student_id: int) -> bool:
        return int(student_id) in self._rosters.get(int(section_id), [])

    def list_student_ids(self, section_id: int):
        return list(self._rosters.get(int(section_id), []))


class InMemoryHeartbeats:
    def __init__(self):
        self._rows: dict[tuple[int, int], HeartbeatRecord] = {}

    def seed(self, lecture_id: int, student_id: int, *, joined_at, last_seen_at) -> None:
        self._rows[(lecture_id, student_id)] = HeartbeatRecord(
            lecture_id=lecture_id,
            student_id=student_id,
            joined_at=joined_at,
            last_seen_at=last_seen_at,
        )

    def touch(self, *, lecture_id: int, student_id: int, seen_at: datetime) -> HeartbeatRecord:
        key = (int(lecture_id), int(student_id))
        existing = self._rows.get(key)
        if existing and existing.joined_at:
            row = replace(existing, last_seen_at=seen_at)
        else:
            row = HeartbeatRecord(lecture_id=key[0], student_id=key[1], joined_at=seen_at, last_seen_at=seen_at)
        self._rows[key] = row
        return row

    def get(self, *, lecture_id: int, student_id: int) -> Optional[HeartbeatRecord]:
        return self._rows.get((int(lecture_id), int(student_id)))

    def list_for_lecture(self, lecture_id: int):
        return [r for k, r in sorted(self._rows.items()) if k[0] == int(lecture_id)]


class InMemoryAttendance:
    def __init__(self):
        self._rows: dict[tuple[int, int], AttendanceRecord] = {}
        self.save_calls = 0

    def upsert_observed(self, *, lecture_id, student_id, status, checked_in_at, last_seen_at) -> None:
        key = (int(lecture_id), int(student_id))
        existing = self._rows.get(key)
        if existing:
            self._rows[key] = replace(existing, status=status, checked_in_at=checked_in_at, last_seen_at=last_seen_at)
        else:
            self._rows[key] = AttendanceRecord(
                lecture_id=key[0],
                student_id=key[1],
                status=status,
                checked_in_at=checked_in_at,
                last_seen_at=last_seen_at,
            )

    def save_final(self, records) -> None:
        self.save_calls += 1
        for rec in records:
            self._rows[(rec.lecture_id, rec.student_id)] = rec

    def get(self, *, lecture_id: int, student_id: int) -> Optional[AttendanceRecord]:
        return self._rows.get((int(lecture_id), int(student_id)))

    def list_for_lecture(self, lecture_id: int):
        return [r for k, r in sorted(self._rows.items()) if k[0] == int(lecture_id)]


SECTION_ID = 10
INSTRUCTOR_ID = 99
ROSTER = [1, 2, 3]


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2026, 3, 2, 9, 30, 0)


@pytest.fixture
def clock(fixed_now) -> FakeClock:
    return FakeClock(fixed_now)


@pytest.fixture
def lecture() -> Lecture:
    return Lecture(
        lecture_id=1,
        section_id=SECTION_ID,
        instructor_id=INSTRUCTOR_ID,
        starts_at=datetime(2026, 3, 2, 9, 0, 0),
        ends_at=datetime(2026, 3, 2, 11, 0, 0),
        status=LectureStatus.RUNNING,
    )


@pytest.fixture
def token_key() -> bytes:
    return Fernet.generate_key()


@pytest.fixture
def tracker_config(token_key) -> TrackerConfig:
    return TrackerConfig(key=token_key)


@pytest.fixture
def lectures(lecture) -> InMemoryLectures:
    return InMemoryLectures([lecture])


@pytest.fixture
def enrollments() -> InMemoryEnrollments:
    return InMemoryEnrollments({SECTION_ID: list(ROSTER)})


@pytest.fixture
def heartbeats() -> InMemoryHeartbeats:
    return InMemoryHeartbeats()


@pytest.fixture
def attendance_repo() -> InMemoryAttendance:
    return InMemoryAttendance()


@pytest.fixture
def service(lectures, enrollments, heartbeats, attendance_repo, tracker_config, clock) -> AttendanceService:
    return AttendanceService(lectures, enrollments, heartbeats, attendance_repo, config=tracker_config, clock=clock)

