from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional

from ..attendance.service import AttendanceService
from .export import (
    XLSX_MIMETYPE,
    build_export_rows,
    report_filename,
    write_analytics_xlsx,
    write_attendance_csv,
    write_attendance_xlsx,
    write_summary_xlsx,
)


@dataclass(frozen=True)
class ReportFile:
    filename: str
    mimetype: str
    content: bytes


class ReportService:
    """Use case: downloadable attendance reports for staff."""

    def __init__(self, attendance: AttendanceService):
        self._attendance = attendance

    def attendance_xlsx(self, day: Optional[date] = None) -> ReportFile:
        roster = self._attendance.roster(day)
        content = write_attendance_xlsx(build_export_rows(roster))
        return ReportFile(report_filename("Report", roster.day), XLSX_MIMETYPE, content)

    def attendance_csv(self, day: Optional[date] = None) -> ReportFile:
        roster = self._attendance.roster(day)
        content = write_attendance_csv(build_export_rows(roster))
        return ReportFile(report_filename("Report", roster.day, "csv"), "text/csv", content)

    def summary_xlsx(self, day: Optional[date] = None) -> ReportFile:
        roster = self._attendance.roster(day)
        content = write_summary_xlsx(roster.stats, roster.absent, generated_at=self._attendance.now())
        return ReportFile(report_filename("Summary", roster.day), XLSX_MIMETYPE, content)

    def analytics_xlsx(self, start: date, end: date) -> ReportFile:
        daily = self._attendance.daily_statistics(start, end)
        students = self._attendance.student_statistics(start, end)
        content = write_analytics_xlsx(daily, students)
        return ReportFile(report_filename("Analytics", end), XLSX_MIMETYPE, content)
