from __future__ import annotations

import base64
import io
from datetime import date, datetime
from typing import Optional

import pytest
from PIL import Image

from campus_attendance.attendance.model import AttendanceRecord
from campus_attendance.auth.model import AdminPasswordConfig
from campus_attendance.container import assemble
from campus_attendance.notifications.model import EmailSettings
from campus_attendance.students.model import Student


class InMemoryStudents:
    def __init__(self, students=()):
        self._by_reg: dict[str, Student] = {}
        for s in students:
            self.add(s)

    def get(self, reg_no: str) -> Optional[Student]:
        return self._by_reg.get(reg_no)

    def list_all(self):
        return list(self._by_reg.values())

    def add(self, student: Student) -> None:
        self._by_reg[student.reg_no] = student

    def delete(self, reg_no: str) -> bool:
        return self._by_reg.pop(reg_no, None) is not None


class InMemoryAttendance:
    def __init__(self):
        self.records: dict[str, AttendanceRecord] = {}

    def get(self, reg_no: str, day: date) -> Optional[AttendanceRecord]:
        return next(
            (r for r in self.records.values() if r.reg_no == reg_no and r.attendance_date == day),
            None,
        )

    def list_for_date(self, day: date):
        rows = [r for r in self.records.values() if r.attendance_date == day]
        return sorted(rows, key=lambda r: r.created_at, reverse=True)

    def list_between(self, start: date, end: date):
        return [r for r in self.records.values() if start <= r.attendance_date <= end]

    def create_if_absent(self, record: AttendanceRecord) -> bool:
        if record.record_key in self.records:
            return False
        self.records[record.record_key] = record
        return True

    def clear_all(self) -> int:
        n = len(self.records)
        self.records.clear()
        return n


class InMemoryAdminConfig:
    def __init__(self, config: Optional[AdminPasswordConfig] = None):
        self.config = config

    def get(self) -> Optional[AdminPasswordConfig]:
        return self.config

    def save(self, config: AdminPasswordConfig) -> None:
        self.config = config


class FakeEmailClient:
    """Records every send; recipients listed in ``fail_for`` get a 400."""

    def __init__(self, fail_for=(), status: int = 200):
        self.sent: list[tuple[str, str, dict]] = []
        self.fail_for = set(fail_for)
        self.status = status

    def send(self, service_id, template_id, variables) -> int:
        self.sent.append((service_id, template_id, dict(variables)))
        if variables.get("to_email") in self.fail_for:
            return 400
        return self.status


def make_student(reg_no: str, name: str, parent_email: Optional[str] = None) -> Student:
    return Student(
        reg_no=reg_no,
        name=name,
        email=parent_email,
        parent_email=parent_email,
        added=datetime(2026, 1, 1, 8, 0),
    )


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2026, 3, 2, 9, 15, 30)


@pytest.fixture
def photo_uri() -> str:
    buf = io.BytesIO()
    Image.new("RGB", (8, 8), color=(255, 0, 122)).save(buf, format="PNG")
    return "data:image/png;base64," + base64.b64encode(buf.getvalue()).decode("ascii")


@pytest.fixture
def email_settings() -> EmailSettings:
    return EmailSettings(
        service_id="service_test",
        template_id="template_absent",
        otp_template_id="template_otp",
        public_key="test-public-key",
    )


@pytest.fixture
def students_repo() -> InMemoryStudents:
    return InMemoryStudents(
        [
            make_student("21CS001", "Arun Kumar", "arun.parent@example.com"),
            make_student("21CS002", "Divya Raman", "divya.parent@example.com"),
            make_student("21CS003", "Karthik Selvam"),
        ]
    )


@pytest.fixture
def attendance_repo() -> InMemoryAttendance:
    return InMemoryAttendance()


@pytest.fixture
def admin_config_repo() -> InMemoryAdminConfig:
    return InMemoryAdminConfig()


@pytest.fixture
def email_client() -> FakeEmailClient:
    return FakeEmailClient()


@pytest.fixture
def container(students_repo, attendance_repo, admin_config_repo, email_client, email_settings, fixed_now):
    return assemble(
        students_repo=students_repo,
        attendance_repo=attendance_repo,
        admin_config_repo=admin_config_repo,
        email_client=email_client,
        email_settings=email_settings,
        notify_delay=0.0,
        clock=lambda: fixed_now,
    )


@pytest.fixture
def app(container):
    from campus_attendance.main import create_app

    flask_app = create_app(container, settings_module="config.testing")
    return flask_app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def staff_client(client):
    with client.session_transaction() as sess:
        sess["role"] = "staff"
    return client
