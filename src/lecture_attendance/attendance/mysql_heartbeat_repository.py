from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import HeartbeatRecord
from .repository import HeartbeatRepository


def _to_heartbeat(r: dict) -> HeartbeatRecord:
    return HeartbeatRecord(
        lecture_id=int(r["lecture_id"]),
        student_id=int(r["student_id"]),
        joined_at=r.get("joined_at"),
        last_seen_at=r.get("last_seen_at"),
    )


class MySQLHeartbeatRepository(HeartbeatRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def touch(self, *, lecture_id: int, student_id: int, seen_at: datetime) -> HeartbeatRecord:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO attendance_heartbeats(lecture_id, student_id, joined_at, last_seen_at)
                VALUES(%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE
                    joined_at=COALESCE(joined_at, VALUES(joined_at)),
                    last_seen_at=VALUES(last_seen_at)
                """,
                (int(lecture_id), int(student_id), seen_at, seen_at),
            )
            cur.execute(
                """
                SELECT lecture_id, student_id, joined_at, last_seen_at
                FROM attendance_heartbeats
                WHERE lecture_id=%s AND student_id=%s
                """,
                (int(lecture_id), int(student_id)),
            )
            return _to_heartbeat(fetchone(cur))

    def get(self, *, lecture_id: int, student_id: int) -> Optional[HeartbeatRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT lecture_id, student_id, joined_at, last_seen_at
                FROM attendance_heartbeats
                WHERE lecture_id=%s AND student_id=%s
                """,
                (int(lecture_id), int(student_id)),
            )
            r = fetchone(cur)
            return _to_heartbeat(r) if r else None

    def list_for_lecture(self, lecture_id: int) -> Sequence[HeartbeatRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT lecture_id, student_id, joined_at, last_seen_at
                FROM attendance_heartbeats
                WHERE lecture_id=%s
                ORDER BY student_id ASC
                """,
                (int(lecture_id),),
            )
            return [_to_heartbeat(r) for r in fetchall(cur)]
