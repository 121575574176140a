from __future__ import annotations

from datetime import datetime, timedelta

import pytest
from werkzeug.security import generate_password_hash

from campus_attendance.auth.model import AdminPasswordConfig
from campus_attendance.auth.otp import InMemoryOtpStore, generate_otp
from campus_attendance.auth.service import StaffAuthService
from campus_attendance.core.enums import Role
from campus_attendance.core.exceptions import AuthenticationError, AuthorizationError, ValidationError
from campus_attendance.notifications.service import NotificationService
from conftest import FakeEmailClient, InMemoryAdminConfig


class Clock:
    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now


def _service(config, email_settings, *, clock, client=None, otp="123456"):
    notifications = NotificationService(client or FakeEmailClient(), email_settings, delay=0)
    return StaffAuthService(
        config,
        notifications,
        InMemoryOtpStore(),
        clock=clock,
        otp_factory=lambda: otp,
    )


def _stored(password: str, email=None) -> InMemoryAdminConfig:
    return InMemoryAdminConfig(
        AdminPasswordConfig(generate_password_hash(password), datetime(2026, 1, 1), email)
    )


def test_first_run_accepts_default_password(email_settings, fixed_now):
    svc = _service(InMemoryAdminConfig(), email_settings, clock=Clock(fixed_now))

    assert svc.authenticate("admin123").role is Role.STAFF
    with pytest.raises(AuthenticationError, match="Incorrect password"):
        svc.authenticate("admin1234")


def test_stored_hash_replaces_default(email_settings, fixed_now):
    svc = _service(_stored("Campus#2026", "staff@example.com"), email_settings, clock=Clock(fixed_now))

    assert svc.authenticate("Campus#2026").email == "staff@example.com"
    with pytest.raises(AuthenticationError):
        svc.authenticate("admin123")


def test_change_password_stores_salted_hash(email_settings, fixed_now):
    config = InMemoryAdminConfig()
    svc = _service(config, email_settings, clock=Clock(fixed_now))

    svc.change_password(actor=Role.STAFF, current="admin123", new="Campus#2026", confirm="Campus#2026")

    assert config.config.password_hash != "Campus#2026"
    assert config.config.last_updated == fixed_now
    svc.authenticate("Campus#2026")


@pytest.mark.parametrize(
    "current, new, confirm, message",
    [
        ("", "Campus#2026", "Campus#2026", "current password"),
        ("admin123", "", "", "new password"),
        ("admin123", "Campus#2026", "Campus#2027", "do not match"),
        ("admin123", "admin123", "admin123", "must be different"),
        ("admin123", "campus2026", "campus2026", "uppercase"),
        ("wrong", "Campus#2026", "Campus#2026", "Incorrect current password"),
    ],
)
def test_change_password_rejections(email_settings, fixed_now, current, new, confirm, message):
    config = InMemoryAdminConfig()
    svc = _service(config, email_settings, clock=Clock(fixed_now))

    with pytest.raises(ValidationError, match=message):
        svc.change_password(actor=Role.STAFF, current=current, new=new, confirm=confirm)
    assert config.config is None


def test_change_password_requires_staff(email_settings, fixed_now):
    svc = _service(InMemoryAdminConfig(), email_settings, clock=Clock(fixed_now))
    with pytest.raises(AuthorizationError):
        svc.change_password(actor=Role.STUDENT, current="admin123", new="Campus#2026", confirm="Campus#2026")


def test_otp_reset_flow(email_settings, fixed_now):
    client = FakeEmailClient()
    config = _stored("Old#Pass1", "staff@example.com")
    svc = _service(config, email_settings, clock=Clock(fixed_now), client=client)

    svc.request_reset("Staff@Example.com")
    _, template_id, variables = client.sent[-1]
    assert template_id == "template_otp"
    assert variables["otp_code"] == "123456"
    assert variables["expiry_time"] == "5 minutes"

    svc.verify_otp("staff@example.com", "123456")
    svc.reset_password(email="staff@example.com", new="New#Pass22", confirm="New#Pass22")

    svc.authenticate("New#Pass22")
    with pytest.raises(ValidationError):
        svc.reset_password(email="staff@example.com", new="New#Pass33", confirm="New#Pass33")


def test_reset_email_must_match_stored_email(email_settings, fixed_now):
    svc = _service(_stored("Old#Pass1", "staff@example.com"), email_settings, clock=Clock(fixed_now))
    with pytest.raises(ValidationError, match="does not match"):
        svc.request_reset("intruder@example.com")


def test_reset_requires_verified_otp(email_settings, fixed_now):
    svc = _service(InMemoryAdminConfig(), email_settings, clock=Clock(fixed_now))
    svc.request_reset("staff@example.com")

    with pytest.raises(ValidationError, match="Verify the OTP"):
        svc.reset_password(email="staff@example.com", new="New#Pass22", confirm="New#Pass22")


def test_three_wrong_codes_discard_the_otp(email_settings, fixed_now):
    svc = _service(InMemoryAdminConfig(), email_settings, clock=Clock(fixed_now))
    svc.request_reset("staff@example.com")

    with pytest.raises(ValidationError, match="2 attempt"):
        svc.verify_otp("staff@example.com", "000000")
    with pytest.raises(ValidationError, match="1 attempt"):
        svc.verify_otp("staff@example.com", "000000")
    with pytest.raises(ValidationError, match="Too many"):
        svc.verify_otp("staff@example.com", "000000")

    with pytest.raises(ValidationError, match="No OTP"):
        svc.verify_otp("staff@example.com", "123456")


def test_expired_otp_rejected(email_settings, fixed_now):
    clock = Clock(fixed_now)
    svc = _service(InMemoryAdminConfig(), email_settings, clock=clock)
    svc.request_reset("staff@example.com")

    clock.now = fixed_now + timedelta(minutes=5, seconds=1)

    with pytest.raises(ValidationError, match="expired"):
        svc.verify_otp("staff@example.com", "123456")


def test_failed_otp_email_discards_code(email_settings, fixed_now):
    client = FakeEmailClient(status=500)
    svc = _service(InMemoryAdminConfig(), email_settings, clock=Clock(fixed_now), client=client)

    with pytest.raises(ValidationError, match="Failed to send OTP"):
        svc.request_reset("staff@example.com")
    with pytest.raises(ValidationError, match="No OTP"):
        svc.verify_otp("staff@example.com", "123456")


def test_generated_otp_is_six_digits():
    for _ in range(50):
        code = generate_otp()
        assert len(code) == 6 and code.isdigit() and code[0] != "0"


def test_otp_discarded_when_client_crashes(email_settings, fixed_now):
    class CrashingClient(FakeEmailClient):
        def send(self, service_id, template_id, variables):
            raise RuntimeError("template renderer crashed")

    svc = _service(InMemoryAdminConfig(), email_settings, clock=Clock(fixed_now), client=CrashingClient())

    with pytest.raises(RuntimeError):
        svc.request_reset("staff@example.com")
    with pytest.raises(ValidationError, match="No OTP"):
        svc.verify_otp("staff@example.com", "123456")
