from __future__ import annotations

from datetime import date, datetime, timedelta

import pytest

from campus_attendance.attendance.model import AttendanceSubmission, make_record_key
from campus_attendance.attendance.service import AttendanceService
from campus_attendance.core.enums import Role
from campus_attendance.core.exceptions import (
    AuthorizationError,
    DeviceLockedError,
    DuplicateSubmissionError,
    StoreError,
    ValidationError,
)
from campus_attendance.device_lock.session import DeviceSession


def _service(attendance_repo, students_repo, fixed_now):
    return AttendanceService(attendance_repo, students_repo, clock=lambda: fixed_now)


def test_submit_records_attendance_and_binds_device(attendance_repo, students_repo, fixed_now, photo_uri):
    svc = _service(attendance_repo, students_repo, fixed_now)

    result = svc.submit_attendance(AttendanceSubmission("Arun Kumar", " 21cs001", photo_uri), DeviceSession())

    assert result.record.reg_no == "21CS001"
    assert result.record.record_key == "21CS001_2026-03-02"
    assert result.record.time_text == "09:15:30"
    assert result.record.face.startswith("data:image/png;base64,")
    assert result.device.bound_reg_no == "21CS001"
    assert list(attendance_repo.records) == ["21CS001_2026-03-02"]


def test_second_submission_same_day_is_rejected(attendance_repo, students_repo, fixed_now, photo_uri):
    svc = _service(attendance_repo, students_repo, fixed_now)
    first = svc.submit_attendance(AttendanceSubmission("Arun", "21CS001", photo_uri), DeviceSession())

    with pytest.raises(DuplicateSubmissionError):
        svc.submit_attendance(AttendanceSubmission("Arun", "21CS001", photo_uri), first.device)

    assert len(attendance_repo.records) == 1


def test_lost_race_on_store_is_a_duplicate(attendance_repo, students_repo, fixed_now, photo_uri):
    class RacingRepo(type(attendance_repo)):
        def get(self, reg_no, day):
            return None

        def create_if_absent(self, record):
            return False

    svc = _service(RacingRepo(), students_repo, fixed_now)

    with pytest.raises(DuplicateSubmissionError):
        svc.submit_attendance(AttendanceSubmission("Arun", "21CS001", photo_uri), DeviceSession())


def test_next_day_submission_is_accepted(attendance_repo, students_repo, fixed_now, photo_uri):
    svc = _service(attendance_repo, students_repo, fixed_now)
    svc.submit_attendance(AttendanceSubmission("Arun", "21CS001", photo_uri), DeviceSession())

    svc.submit_attendance(
        AttendanceSubmission("Arun", "21CS001", photo_uri),
        DeviceSession("21CS001"),
        now=fixed_now + timedelta(days=1),
    )

    assert len(attendance_repo.records) == 2


def test_locked_device_refuses_other_reg_no(attendance_repo, students_repo, fixed_now, photo_uri):
    svc = _service(attendance_repo, students_repo, fixed_now)

    with pytest.raises(DeviceLockedError, match="locked to 21CS001"):
        svc.submit_attendance(AttendanceSubmission("Divya", "21CS002", photo_uri), DeviceSession("21CS001"))

    assert attendance_repo.records == {}


@pytest.mark.parametrize(
    "name, reg_no, photo",
    [
        ("", "21CS001", "PHOTO"),
        ("Arun", "  ", "PHOTO"),
        ("Arun", "21CS001", ""),
        ("Arun", "21CS001", "data:text/plain;base64,aGk="),
        ("Arun", "X" * 200, "PHOTO"),
        ("N" * 500, "21CS001", "PHOTO"),
    ],
)
def test_invalid_submission_never_reaches_store(attendance_repo, students_repo, fixed_now, photo_uri, name, reg_no, photo):
    class ExplodingRepo(type(attendance_repo)):
        def get(self, reg_no, day):
            raise AssertionError("store must not be called")

    svc = _service(ExplodingRepo(), students_repo, fixed_now)

    with pytest.raises(ValidationError):
        svc.submit_attendance(AttendanceSubmission(name, reg_no, photo_uri if photo == "PHOTO" else photo), DeviceSession())


def test_store_error_propagates_verbatim(attendance_repo, students_repo, fixed_now, photo_uri):
    class BrokenRepo(type(attendance_repo)):
        def create_if_absent(self, record):
            raise StoreError("Lost connection to MySQL server")

    svc = _service(BrokenRepo(), students_repo, fixed_now)

    with pytest.raises(StoreError, match="Lost connection to MySQL server"):
        svc.submit_attendance(AttendanceSubmission("Arun", "21CS001", photo_uri), DeviceSession())


def test_roster_splits_present_and_absent(attendance_repo, students_repo, fixed_now, photo_uri):
    svc = _service(attendance_repo, students_repo, fixed_now)
    svc.submit_attendance(AttendanceSubmission("Divya", "21CS002", photo_uri), DeviceSession())

    roster = svc.roster()

    assert [r.reg_no for r in roster.present] == ["21CS002"]
    assert [s.reg_no for s in roster.absent] == ["21CS001", "21CS003"]
    assert roster.stats.total_registered == 3
    assert roster.stats.present_today == 1
    assert roster.stats.absent_today == 2
    assert roster.stats.attendance_percentage == "33.3"


def test_roster_with_no_students(attendance_repo, fixed_now):
    from conftest import InMemoryStudents

    roster = _service(attendance_repo, InMemoryStudents(), fixed_now).roster()

    assert roster.stats.attendance_percentage == "0.0"
    assert roster.absent == []


def test_clear_attendance_requires_staff(attendance_repo, students_repo, fixed_now, photo_uri):
    svc = _service(attendance_repo, students_repo, fixed_now)
    svc.submit_attendance(AttendanceSubmission("Arun", "21CS001", photo_uri), DeviceSession())

    with pytest.raises(AuthorizationError):
        svc.clear_attendance(actor=Role.STUDENT)

    assert svc.clear_attendance(actor=Role.STAFF) == 1
    assert attendance_repo.records == {}


def test_statistics_only_count_days_with_records(attendance_repo, students_repo, fixed_now, photo_uri):
    svc = _service(attendance_repo, students_repo, fixed_now)
    day1 = fixed_now
    day3 = fixed_now + timedelta(days=2)
    svc.submit_attendance(AttendanceSubmission("Arun", "21CS001", photo_uri), DeviceSession(), now=day1)
    svc.submit_attendance(AttendanceSubmission("Divya", "21CS002", photo_uri), DeviceSession(), now=day1)
    svc.submit_attendance(AttendanceSubmission("Arun", "21CS001", photo_uri), DeviceSession(), now=day3)

    daily = svc.daily_statistics(date(2026, 3, 1), date(2026, 3, 31))
    students = {s.reg_no: s for s in svc.student_statistics(date(2026, 3, 1), date(2026, 3, 31))}

    assert [(d.date, d.present, d.absent) for d in daily] == [("2026-03-02", 2, 1), ("2026-03-04", 1, 2)]
    assert daily[0].attendance_percentage == "66.67%"
    assert students["21CS001"].attendance_rate == "100.0%"
    assert students["21CS002"].attendance_rate == "50.0%"
    assert students["21CS003"].attendance_rate == "0.0%"


def test_statistics_reject_inverted_range(attendance_repo, students_repo, fixed_now):
    with pytest.raises(ValidationError):
        _service(attendance_repo, students_repo, fixed_now).daily_statistics(date(2026, 3, 5), date(2026, 3, 1))


def test_record_key_is_deterministic():
    assert make_record_key("21CS001", date(2026, 3, 2)) == "21CS001_2026-03-02"


def test_history_window(attendance_repo, students_repo, fixed_now):
    start, end = _service(attendance_repo, students_repo, fixed_now).history_window(30)
    assert end == date(2026, 3, 2)
    assert (end - start).days == 29
    assert isinstance(start, date) and not isinstance(start, datetime)
