from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

from ..core.enums import AttendanceStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import AttendanceRecord
from .repository import AttendanceRepository


def _to_record(r: dict) -> AttendanceRecord:
    return AttendanceRecord(
        lecture_id=int(r["lecture_id"]),
        student_id=int(r["student_id"]),
        status=AttendanceStatus(r["status"]),
        checked_in_at=r.get("checked_in_at"),
        last_seen_at=r.get("last_seen_at"),
        minutes_attended=int(r.get("minutes_attended") or 0),
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def upsert_observed(
        self,
        *,
        lecture_id: int,
        student_id: int,
        status: AttendanceStatus,
        checked_in_at: Optional[datetime],
        last_seen_at: datetime,
    ) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO attendances(lecture_id, student_id, status, checked_in_at, last_seen_at)
                VALUES(%s,%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE
                    status=VALUES(status),
                    checked_in_at=VALUES(checked_in_at),
                    last_seen_at=VALUES(last_seen_at)
                """,
                (int(lecture_id), int(student_id), status.value, checked_in_at, last_seen_at),
            )

    def save_final(self, records: Sequence[AttendanceRecord]) -> None:
        if not records:
            return
        rows = [
            (
                int(rec.lecture_id),
                int(rec.student_id),
                rec.status.value,
                rec.checked_in_at,
                rec.last_seen_at,
                int(rec.minutes_attended),
            )
            for rec in records
        ]
        # One connection, one transaction for the whole roster.
        with db_cursor(self._conn_factory) as (_, cur):
            cur.executemany(
                """
                INSERT INTO attendances(lecture_id, student_id, status, checked_in_at, last_seen_at, minutes_attended)
                VALUES(%s,%s,%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE
                    status=VALUES(status),
                    checked_in_at=VALUES(checked_in_at),
                    last_seen_at=VALUES(last_seen_at),
                    minutes_attended=VALUES(minutes_attended)
                """,
                rows,
            )

    def get(self, *, lecture_id: int, student_id: int) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT lecture_id, student_id, status, checked_in_at, last_seen_at, minutes_attended
                FROM attendances
                WHERE lecture_id=%s AND student_id=%s
                """,
                (int(lecture_id), int(student_id)),
            )
            r = fetchone(cur)
            return _to_record(r) if r else None

    def list_for_lecture(self, lecture_id: int) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT lecture_id, student_id, status, checked_in_at, last_seen_at, minutes_attended
                FROM attendances
                WHERE lecture_id=%s
                ORDER BY student_id ASC
                """,
                (int(lecture_id),),
            )
            return [_to_record(r) for r in fetchall(cur)]
