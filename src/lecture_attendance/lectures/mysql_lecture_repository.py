from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

from ..core.enums import LectureStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Lecture
from .repository import LectureRepository

_COLUMNS = "id, section_id, instructor_id, starts_at, ends_at, status, ended_at"


def _to_lecture(r: dict) -> Lecture:
    return Lecture(
        lecture_id=int(r["id"]),
        section_id=int(r["section_id"]),
        instructor_id=int(r["instructor_id"]),
        starts_at=r["starts_at"],
        ends_at=r["ends_at"],
        status=LectureStatus(r["status"]),
        ended_at=r.get("ended_at"),
    )


class MySQLLectureRepository(LectureRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, lecture_id: int) -> Optional[Lecture]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM lectures WHERE id=%s", (int(lecture_id),))
            r = fetchone(cur)
            return _to_lecture(r) if r else None

    def list_overdue(self, *, status: LectureStatus, now: datetime) -> Sequence[Lecture]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM lectures
                WHERE status=%s AND ends_at < %s
                ORDER BY ends_at ASC, id ASC
                """,
                (status.value, now),
            )
            return [_to_lecture(r) for r in fetchall(cur)]

    def mark_running(self, *, lecture_id: int, expected_status: LectureStatus = LectureStatus.SCHEDULED) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE lectures SET status=%s WHERE id=%s AND status=%s",
                (LectureStatus.RUNNING.value, int(lecture_id), expected_status.value),
            )
            return cur.rowcount > 0

    def mark_ended(
        self, *, lecture_id: int, ended_at: datetime, expected_status: LectureStatus = LectureStatus.RUNNING
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE lectures SET status=%s, ended_at=%s WHERE id=%s AND status=%s",
                (LectureStatus.ENDED.value, ended_at, int(lecture_id), expected_status.value),
            )
            return cur.rowcount > 0

    def mark_cancelled(self, *, lecture_id: int, expected_status: LectureStatus = LectureStatus.SCHEDULED) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE lectures SET status=%s WHERE id=%s AND status=%s",
                (LectureStatus.CANCELLED.value, int(lecture_id), expected_status.value),
            )
            return cur.rowcount > 0
