from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .auth.mysql_admin_config_repository import MySQLAdminConfigRepository
from .auth.otp import InMemoryOtpStore, OtpStore
from .auth.repository import AdminConfigRepository
from .auth.service import StaffAuthService
from .core.constants import DEFAULT_STAFF_PASSWORD, NOTIFY_DELAY_SECONDS
from .database.connection import DatabaseConnection, DBConfig
from .network.ip_gate import IpLookupClient, NetworkGate
from .notifications.absence_alerts import AbsenceAlertService
from .notifications.client import EmailClient, EmailJsClient
from .notifications.model import EmailSettings
from .notifications.service import NotificationService
from .reports.service import ReportService
from .students.mysql_student_repository import MySQLStudentRepository
from .students.repository import StudentRepository
from .students.service import StudentService


@dataclass(frozen=True)
class Container:
    students_repo: StudentRepository
    attendance_repo: AttendanceRepository
    admin_config_repo: AdminConfigRepository

    student_service: StudentService
    attendance_service: AttendanceService
    notification_service: NotificationService
    absence_alert_service: AbsenceAlertService
    auth_service: StaffAuthService
    report_service: ReportService
    network_gate: NetworkGate


def assemble(
    *,
    students_repo: StudentRepository,
    attendance_repo: AttendanceRepository,
    admin_config_repo: AdminConfigRepository,
    email_client: EmailClient,
    email_settings: EmailSettings,
    otp_store: Optional[OtpStore] = None,
    network_gate: Optional[NetworkGate] = None,
    default_password: str = DEFAULT_STAFF_PASSWORD,
    notify_delay: float = NOTIFY_DELAY_SECONDS,
    clock=None,
) -> Container:
    """Wire services over the given repositories and collaborators."""
    student_service = StudentService(students_repo, clock=clock)
    attendance_service = AttendanceService(attendance_repo, students_repo, clock=clock)
    notification_service = NotificationService(email_client, email_settings, delay=notify_delay)
    auth_service = StaffAuthService(
        admin_config_repo,
        notification_service,
        otp_store or InMemoryOtpStore(),
        default_password=default_password,
        clock=clock,
    )

    return Container(
        students_repo=students_repo,
        attendance_repo=attendance_repo,
        admin_config_repo=admin_config_repo,
        student_service=student_service,
        attendance_service=attendance_service,
        notification_service=notification_service,
        absence_alert_service=AbsenceAlertService(attendance_service, notification_service),
        auth_service=auth_service,
        report_service=ReportService(attendance_service),
        network_gate=network_gate or NetworkGate(),
    )


def build_container(settings) -> Container:
    """Production wiring from a settings module (see ``config``)."""
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(getattr(settings, "DB_CONFIG")))

    email_cfg = dict(getattr(settings, "EMAILJS", {}) or {})
    email_settings = EmailSettings(
        service_id=email_cfg.get("service_id", ""),
        template_id=email_cfg.get("template_id", ""),
        otp_template_id=email_cfg.get("otp_template_id", ""),
        public_key=email_cfg.get("public_key", ""),
        private_key=email_cfg.get("private_key", ""),
    )
    email_client = EmailJsClient(email_settings.public_key, private_key=email_settings.private_key)

    lookup = IpLookupClient() if getattr(settings, "IP_LOOKUP_ENABLED", False) else None
    gate = NetworkGate(getattr(settings, "AUTHORIZED_IPS", []) or [], lookup=lookup)

    return assemble(
        students_repo=MySQLStudentRepository(conn),
        attendance_repo=MySQLAttendanceRepository(conn),
        admin_config_repo=MySQLAdminConfigRepository(conn),
        email_client=email_client,
        email_settings=email_settings,
        network_gate=gate,
        default_password=getattr(settings, "STAFF_DEFAULT_PASSWORD", DEFAULT_STAFF_PASSWORD),
        notify_delay=float(getattr(settings, "NOTIFY_DELAY_SECONDS", NOTIFY_DELAY_SECONDS)),
    )
