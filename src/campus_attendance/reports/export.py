from __future__ import annotations

import csv
import io
from dataclasses import dataclass
from datetime import datetime
from typing import Sequence

import pandas as pd
from openpyxl.styles import Alignment, Font, PatternFill
from openpyxl.utils import get_column_letter

from ..attendance.model import DailyStatistics, DashboardStats, Roster, StudentStatistics
from ..common.datetime_utils import date_key
from ..core.enums import PresenceStatus
from ..core.exceptions import NoDataError
from ..students.model import Student

XLSX_MIMETYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

_HEADER_FILL = PatternFill("solid", start_color="FF007A")
_HEADER_FONT = Font(bold=True, color="FFFFFF")
_STRIPE_FILL = PatternFill("solid", start_color="F5F5F5")

ATTENDANCE_COLUMNS = ["Name", "Registration Number", "Status", "Time", "Date"]
ATTENDANCE_WIDTHS = [25, 20, 12, 15, 15]


@dataclass(frozen=True)
class ExportRow:
    name: str
    reg_no: str
    status: PresenceStatus
    time: str
    date: str


def build_export_rows(roster: Roster) -> list[ExportRow]:
    """Present students first (newest first), then the absent list in roster order."""
    day = date_key(roster.day)
    rows = [
        ExportRow(name=r.name, reg_no=r.reg_no, status=PresenceStatus.PRESENT, time=r.time_text or "N/A", date=day)
        for r in roster.present
    ]
    rows.extend(
        ExportRow(name=s.name, reg_no=s.reg_no, status=PresenceStatus.ABSENT, time="N/A", date=day)
        for s in roster.absent
    )
    return rows


def _style_sheet(ws, widths: Sequence[int], *, striped: bool = False) -> None:
    for idx, width in enumerate(widths, start=1):
        ws.column_dimensions[get_column_letter(idx)].width = width

    for cell in ws[1]:
        cell.font = _HEADER_FONT
        cell.fill = _HEADER_FILL
        cell.alignment = Alignment(horizontal="center", vertical="center")

    if striped:
        for row in ws.iter_rows(min_row=2, max_row=ws.max_row):
            for cell in row:
                if cell.row % 2 == 0:
                    cell.fill = _STRIPE_FILL
                cell.alignment = Alignment(horizontal="left", vertical="center")


def write_attendance_xlsx(rows: Sequence[ExportRow]) -> bytes:
    if not rows:
        raise NoDataError("No attendance data to export")

    df = pd.DataFrame(
        [[r.name, r.reg_no, r.status.value, r.time or "N/A", r.date] for r in rows],
        columns=ATTENDANCE_COLUMNS,
    )

    out = io.BytesIO()
    with pd.ExcelWriter(out, engine="openpyxl") as writer:
        df.to_excel(writer, index=False, sheet_name="Attendance")
        _style_sheet(writer.sheets["Attendance"], ATTENDANCE_WIDTHS, striped=True)
    return out.getvalue()


def write_attendance_csv(rows: Sequence[ExportRow]) -> bytes:
    if not rows:
        raise NoDataError("No attendance data to export")

    out = io.StringIO()
    writer = csv.DictWriter(out, fieldnames=ATTENDANCE_COLUMNS)
    writer.writeheader()
    for r in rows:
        writer.writerow(
            {
                "Name": r.name,
                "Registration Number": r.reg_no,
                "Status": r.status.value,
                "Time": r.time or "N/A",
                "Date": r.date,
            }
        )
    return out.getvalue().encode("utf-8-sig")


def write_summary_xlsx(stats: DashboardStats, absent: Sequence[Student], *, generated_at: datetime) -> bytes:
    summary = pd.DataFrame(
        [
            ["Total Registered Students", stats.total_registered],
            ["Present Today", stats.present_today],
            ["Absent Today", stats.absent_today],
            ["Attendance Percentage", f"{stats.attendance_percentage}%"],
            ["Report Generated", generated_at.strftime("%Y-%m-%d %H:%M:%S")],
        ],
        columns=["ATTENDANCE REPORT SUMMARY", ""],
    )

    out = io.BytesIO()
    with pd.ExcelWriter(out, engine="openpyxl") as writer:
        summary.to_excel(writer, index=False, sheet_name="Summary")
        _style_sheet(writer.sheets["Summary"], [30, 20])

        if absent:
            absent_df = pd.DataFrame(
                [[s.name, s.reg_no, "ABSENT"] for s in absent],
                columns=["Name", "Registration Number", "Status"],
            )
            absent_df.to_excel(writer, index=False, sheet_name="Absent Students")
            _style_sheet(writer.sheets["Absent Students"], [25, 20, 12])
    return out.getvalue()


def write_analytics_xlsx(daily: Sequence[DailyStatistics], students: Sequence[StudentStatistics]) -> bytes:
    if not daily:
        raise NoDataError("No attendance data in the selected range")

    daily_df = pd.DataFrame(
        [[d.date, d.present, d.absent, d.total, d.attendance_percentage] for d in daily],
        columns=["Date", "Present", "Absent", "Total", "Attendance %"],
    )
    student_df = pd.DataFrame(
        [[s.name, s.reg_no, s.attendance_rate] for s in students],
        columns=["Student Name", "Registration Number", "Attendance Rate"],
    )

    out = io.BytesIO()
    with pd.ExcelWriter(out, engine="openpyxl") as writer:
        daily_df.to_excel(writer, index=False, sheet_name="Daily Statistics")
        _style_sheet(writer.sheets["Daily Statistics"], [15, 10, 10, 10, 15])
        student_df.to_excel(writer, index=False, sheet_name="Student Statistics")
        _style_sheet(writer.sheets["Student Statistics"], [25, 20, 18])
    return out.getvalue()


def report_filename(kind: str, day, extension: str = "xlsx") -> str:
    return f"Attendance_{kind}_{date_key(day)}.{extension}"
