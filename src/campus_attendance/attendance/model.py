from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, time
from typing import Optional

from ..common.datetime_utils import date_key, time_key
from ..students.model import Student


def make_record_key(reg_no: str, day: date) -> str:
    """Deterministic storage key: one record per (reg no, date)."""
    return f"{reg_no}_{date_key(day)}"


@dataclass(frozen=True)
class AttendanceRecord:
    """A student's attendance for one date."""

    record_key: str
    reg_no: str
    name: str
    attendance_date: date
    attendance_time: time
    created_at: datetime
    face: Optional[str] = None

    @property
    def date_text(self) -> str:
        return date_key(self.attendance_date)

    @property
    def time_text(self) -> str:
        return time_key(self.attendance_time)


@dataclass(frozen=True)
class AttendanceSubmission:
    """What a student sends from the portal."""

    name: str
    reg_no: str
    photo: str


@dataclass(frozen=True)
class DashboardStats:
    total_registered: int
    present_today: int
    absent_today: int
    attendance_percentage: str


@dataclass(frozen=True)
class Roster:
    """Present/absent split for one date."""

    day: date
    present: list[AttendanceRecord] = field(default_factory=list)
    absent: list[Student] = field(default_factory=list)
    stats: Optional[DashboardStats] = None


@dataclass(frozen=True)
class DailyStatistics:
    date: str
    present: int
    absent: int

    @property
    def total(self) -> int:
        return self.present + self.absent

    @property
    def attendance_percentage(self) -> str:
        if not self.total:
            return "0.00%"
        return f"{self.present / self.total * 100:.2f}%"


@dataclass(frozen=True)
class StudentStatistics:
    name: str
    reg_no: str
    total_days_present: int
    total_days_absent: int

    @property
    def attendance_rate(self) -> str:
        days = self.total_days_present + self.total_days_absent
        if not days:
            return "0.0%"
        return f"{self.total_days_present / days * 100:.1f}%"
