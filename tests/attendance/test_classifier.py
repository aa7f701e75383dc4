from datetime import datetime

from lecture_attendance.attendance.classifier import AttendanceClassifier
from lecture_attendance.attendance.model import HeartbeatRecord
from lecture_attendance.core.enums import AttendanceStatus

FINALIZE_AT = datetime(2026, 3, 2, 11, 5)


def _hb(joined: datetime, last_seen: datetime) -> HeartbeatRecord:
    return HeartbeatRecord(lecture_id=1, student_id=1, joined_at=joined, last_seen_at=last_seen)


def test_on_time_and_active_is_present(lecture):
    decision = AttendanceClassifier().decide(
        lecture=lecture,
        heartbeat=_hb(datetime(2026, 3, 2, 9, 5), datetime(2026, 3, 2, 10, 58)),
        now=FINALIZE_AT,
    )

    assert decision.status == AttendanceStatus.PRESENT
    assert decision.minutes_attended == 113
    assert decision.checked_in_at == datetime(2026, 3, 2, 9, 5)
    assert decision.last_seen_at == datetime(2026, 3, 2, 10, 58)


def test_joined_after_late_threshold_is_late(lecture):
    decision = AttendanceClassifier().decide(
        lecture=lecture,
        heartbeat=_hb(datetime(2026, 3, 2, 9, 20), datetime(2026, 3, 2, 10, 58)),
        now=FINALIZE_AT,
    )

    assert decision.status == AttendanceStatus.LATE
    assert decision.minutes_attended == 98


def test_joined_exactly_at_threshold_is_not_late(lecture):
    decision = AttendanceClassifier().decide(
        lecture=lecture,
        heartbeat=_hb(datetime(2026, 3, 2, 9, 10), datetime(2026, 3, 2, 10, 58)),
        now=FINALIZE_AT,
    )

    assert decision.status == AttendanceStatus.PRESENT


def test_silent_for_longer_than_inactive_threshold_is_left(lecture):
    decision = AttendanceClassifier().decide(
        lecture=lecture,
        heartbeat=_hb(datetime(2026, 3, 2, 9, 5), datetime(2026, 3, 2, 10, 40)),
        now=FINALIZE_AT,
    )

    assert decision.status == AttendanceStatus.LEFT
    assert decision.minutes_attended == 95


def test_left_overrides_late(lecture):
    decision = AttendanceClassifier().decide(
        lecture=lecture,
        heartbeat=_hb(datetime(2026, 3, 2, 9, 30), datetime(2026, 3, 2, 10, 0)),
        now=FINALIZE_AT,
    )

    assert decision.status == AttendanceStatus.LEFT


def test_no_heartbeat_is_absent(lecture):
    decision = AttendanceClassifier().decide(lecture=lecture, heartbeat=None, now=FINALIZE_AT)

    assert decision.status == AttendanceStatus.ABSENT
    assert decision.checked_in_at is None
    assert decision.minutes_attended == 0


def test_minutes_are_clamped_to_lecture_end(lecture):
    decision = AttendanceClassifier().decide(
        lecture=lecture,
        heartbeat=_hb(datetime(2026, 3, 2, 9, 0), datetime(2026, 3, 2, 11, 3)),
        now=FINALIZE_AT,
    )

    assert decision.status == AttendanceStatus.PRESENT
    assert decision.minutes_attended == 120


def test_thresholds_are_configurable(lecture):
    strict = AttendanceClassifier(late_threshold_minutes=0, inactive_threshold_minutes=2)
    decision = strict.decide(
        lecture=lecture,
        heartbeat=_hb(datetime(2026, 3, 2, 9, 1), datetime(2026, 3, 2, 11, 2)),
        now=FINALIZE_AT,
    )

    assert decision.status == AttendanceStatus.LEFT
