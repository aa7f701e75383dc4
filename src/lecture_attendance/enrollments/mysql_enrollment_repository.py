from __future__ import annotations

from typing import Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .repository import EnrollmentRepository


class MySQLEnrollmentRepository(EnrollmentRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def is_enrolled(self, *, section_id: int, student_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT 1 AS hit FROM enrollments WHERE section_id=%s AND student_id=%s LIMIT 1",
                (int(section_id), int(student_id)),
            )
            return fetchone(cur) is not None

    def list_student_ids(self, section_id: int) -> Sequence[int]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT student_id FROM enrollments WHERE section_id=%s ORDER BY student_id ASC",
                (int(section_id),),
            )
            return [int(r["student_id"]) for r in fetchall(cur)]
