from __future__ import annotations

import logging
from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Student
from .repository import StudentRepository

logger = logging.getLogger(__name__)


def _to_student(row: dict) -> Optional[Student]:
    reg_no = (row.get("reg_no") or "").strip().upper()
    name = (row.get("name") or "").strip()
    if not reg_no or not name:
        logger.warning("Skipping malformed student row: %r", row)
        return None
    return Student(
        reg_no=reg_no,
        name=name,
        email=row.get("email") or None,
        parent_email=row.get("parent_email") or None,
        added=row["added"],
    )


class MySQLStudentRepository(StudentRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get(self, reg_no: str) -> Optional[Student]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT reg_no, name, email, parent_email, added
                FROM students
                WHERE reg_no=%s
                """,
                (reg_no,),
            )
            row = fetchone(cur)
            return _to_student(row) if row else None

    def list_all(self) -> Sequence[Student]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT reg_no, name, email, parent_email, added
                FROM students
                ORDER BY seq ASC
                """
            )
            students = (_to_student(r) for r in fetchall(cur))
            return [s for s in students if s is not None]

    def add(self, student: Student) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO students(reg_no, name, email, parent_email, added)
                VALUES(%s,%s,%s,%s,%s)
                """,
                (student.reg_no, student.name, student.email, student.parent_email, student.added),
            )

    def delete(self, reg_no: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM students WHERE reg_no=%s", (reg_no,))
            return cur.rowcount > 0
