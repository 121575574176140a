from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Callable, Optional, Sequence

from ..capture.photo import decode_photo_data_uri
from ..common.datetime_utils import date_key, now_local
from ..common.permissions import require_staff
from ..common.validators import normalize_name, normalize_reg_no
from ..core.enums import Role
from ..core.exceptions import DuplicateSubmissionError, ValidationError
from ..device_lock.session import DeviceSession, bind, ensure_can_submit
from ..students.repository import StudentRepository
from .absence import compute_absent
from .model import (
    AttendanceRecord,
    AttendanceSubmission,
    DailyStatistics,
    DashboardStats,
    Roster,
    StudentStatistics,
    make_record_key,
)
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SubmissionResult:
    record: AttendanceRecord
    device: DeviceSession


def _percentage(part: int, whole: int) -> str:
    if whole <= 0:
        return "0.0"
    return f"{part / whole * 100:.1f}"


class AttendanceService:
    def __init__(
        self,
        attendance: AttendanceRepository,
        students: StudentRepository,
        *,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self._attendance = attendance
        self._students = students
        self._clock = clock or now_local

    def submit_attendance(
        self,
        submission: AttendanceSubmission,
        device: DeviceSession,
        *,
        now: Optional[datetime] = None,
    ) -> SubmissionResult:
        reg_no = normalize_reg_no(submission.reg_no)
        name = normalize_name(submission.name)
        photo = decode_photo_data_uri(submission.photo)

        ensure_can_submit(device, reg_no)

        now = now or self._clock()
        today = now.date()
        if self._attendance.get(reg_no, today):
            raise DuplicateSubmissionError(f"Attendance for {reg_no} is already recorded today")

        record = AttendanceRecord(
            record_key=make_record_key(reg_no, today),
            reg_no=reg_no,
            name=name,
            attendance_date=today,
            attendance_time=now.time().replace(microsecond=0),
            created_at=now,
            face=photo.to_data_uri(),
        )
        if not self._attendance.create_if_absent(record):
            raise DuplicateSubmissionError(f"Attendance for {reg_no} is already recorded today")

        logger.info("Attendance recorded for %s on %s", reg_no, date_key(today))
        return SubmissionResult(record=record, device=bind(device, reg_no))

    def now(self) -> datetime:
        return self._clock()

    def today(self) -> date:
        return self.now().date()

    def list_for_date(self, day: Optional[date] = None) -> Sequence[AttendanceRecord]:
        return list(self._attendance.list_for_date(day or self.today()))

    def roster(self, day: Optional[date] = None) -> Roster:
        day = day or self.today()
        present = self.list_for_date(day)
        students = list(self._students.list_all())
        absent = compute_absent(students, (r.reg_no for r in present))

        total = len(students)
        stats = DashboardStats(
            total_registered=total,
            present_today=len(present),
            absent_today=len(absent),
            attendance_percentage=_percentage(total - len(absent), total),
        )
        return Roster(day=day, present=present, absent=absent, stats=stats)

    def clear_attendance(self, *, actor: Role) -> int:
        require_staff(actor)
        removed = self._attendance.clear_all()
        logger.warning("Cleared %d attendance records", removed)
        return removed

    def _sessions(self, start: date, end: date) -> dict[date, list[AttendanceRecord]]:
        if end < start:
            raise ValidationError("End date must not be before start date")
        by_day: dict[date, list[AttendanceRecord]] = {}
        for r in self._attendance.list_between(start, end):
            by_day.setdefault(r.attendance_date, []).append(r)
        return dict(sorted(by_day.items()))

    def daily_statistics(self, start: date, end: date) -> list[DailyStatistics]:
        """Present/absent counts for each date in range on which attendance was taken."""
        students = list(self._students.list_all())
        out: list[DailyStatistics] = []
        for day, records in self._sessions(start, end).items():
            absent = compute_absent(students, (r.reg_no for r in records))
            out.append(DailyStatistics(date=date_key(day), present=len(records), absent=len(absent)))
        return out

    def student_statistics(self, start: date, end: date) -> list[StudentStatistics]:
        sessions = self._sessions(start, end)
        days_present: dict[str, int] = {}
        for records in sessions.values():
            for r in records:
                days_present[r.reg_no] = days_present.get(r.reg_no, 0) + 1

        out = []
        for s in self._students.list_all():
            present = days_present.get(s.reg_no, 0)
            out.append(
                StudentStatistics(
                    name=s.name,
                    reg_no=s.reg_no,
                    total_days_present=present,
                    total_days_absent=len(sessions) - present,
                )
            )
        return out

    def history_window(self, days: int) -> tuple[date, date]:
        end = self.today()
        return end - timedelta(days=max(days, 1) - 1), end
