from __future__ import annotations

from datetime import date
from typing import Optional

from ..attendance.model import Roster
from ..attendance.service import AttendanceService
from ..common.datetime_utils import date_key
from ..common.permissions import require_staff
from ..core.enums import Role
from ..core.exceptions import NoDataError, NotificationConfigError
from .model import AbsenceAlert, BulkSendResult
from .service import NotificationService


def alerts_for(roster: Roster) -> list[AbsenceAlert]:
    """One alert per absent student that has a parent email on file."""
    return [
        AbsenceAlert(
            parent_email=s.parent_email,
            student_name=s.name,
            registration_number=s.reg_no,
            attendance_date=date_key(roster.day),
        )
        for s in roster.absent
        if s.parent_email
    ]


class AbsenceAlertService:
    """Use case: email the parents of every student absent on a date."""

    def __init__(self, attendance: AttendanceService, notifications: NotificationService):
        self._attendance = attendance
        self._notifications = notifications

    def notify_absentees(self, *, actor: Role, day: Optional[date] = None) -> BulkSendResult:
        require_staff(actor)

        roster = self._attendance.roster(day)
        if not roster.absent:
            raise NoDataError("No absent students to notify")

        alerts = alerts_for(roster)
        if not alerts:
            raise NoDataError("No parent emails configured")

        if not self._notifications.verify_configuration():
            raise NotificationConfigError("Email service is not configured. Add your EmailJS credentials.")

        return self._notifications.send_bulk_absence_alerts(alerts)
