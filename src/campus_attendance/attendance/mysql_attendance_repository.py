from __future__ import annotations

import logging
from datetime import date, time, timedelta
from typing import Any, Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import AttendanceRecord
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)

_COLUMNS = "record_key, reg_no, name, attendance_date, attendance_time, face, created_at"


def normalize_mysql_time(value: Any) -> Optional[time]:
    """Normalize MySQL TIME values across connector implementations.

    mysql-connector can return TIME as:
    - datetime.time
    - datetime.timedelta
    - string (e.g. '08:30:00')
    """

    if value is None:
        return None

    if isinstance(value, time):
        return value

    if isinstance(value, timedelta):
        total_seconds = int(value.total_seconds()) % 86400
        return time(hour=total_seconds // 3600, minute=(total_seconds % 3600) // 60, second=total_seconds % 60)

    if isinstance(value, str):
        parts = value.strip().split(":")
        if len(parts) < 2:
            raise ValueError(f"Invalid time string: {value!r}")
        seconds = int(parts[2]) if len(parts) >= 3 and parts[2] else 0
        return time(hour=int(parts[0]), minute=int(parts[1]), second=seconds)

    raise TypeError(f"Unsupported MySQL TIME value type: {type(value)!r}")


def _to_record(row: dict) -> Optional[AttendanceRecord]:
    try:
        return AttendanceRecord(
            record_key=row["record_key"],
            reg_no=str(row["reg_no"]).strip().upper(),
            name=row["name"],
            attendance_date=row["attendance_date"],
            attendance_time=normalize_mysql_time(row["attendance_time"]),
            created_at=row["created_at"],
            face=row.get("face") or None,
        )
    except (KeyError, TypeError, ValueError) as e:
        logger.warning("Skipping malformed attendance row %r: %s", row.get("record_key"), e)
        return None


def _to_records(rows) -> list[AttendanceRecord]:
    records = (_to_record(r) for r in rows)
    return [r for r in records if r is not None]


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get(self, reg_no: str, day: date) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM attendance WHERE reg_no=%s AND attendance_date=%s",
                (reg_no, day),
            )
            row = fetchone(cur)
            return _to_record(row) if row else None

    def list_for_date(self, day: date) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance
                WHERE attendance_date=%s
                ORDER BY attendance_time DESC, created_at DESC
                """,
                (day,),
            )
            return _to_records(fetchall(cur))

    def list_between(self, start: date, end: date) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance
                WHERE attendance_date BETWEEN %s AND %s
                ORDER BY attendance_date ASC, attendance_time ASC
                """,
                (start, end),
            )
            return _to_records(fetchall(cur))

    def create_if_absent(self, record: AttendanceRecord) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT IGNORE INTO attendance(record_key, reg_no, name, attendance_date, attendance_time, face, created_at)
                VALUES(%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    record.record_key,
                    record.reg_no,
                    record.name,
                    record.attendance_date,
                    record.attendance_time,
                    record.face,
                    record.created_at,
                ),
            )
            return cur.rowcount > 0

    def clear_all(self) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM attendance")
            return int(cur.rowcount or 0)
