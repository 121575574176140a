from __future__ import annotations

import pytest
import requests

from campus_attendance.notifications.client import EmailJsClient
from campus_attendance.notifications.model import AbsenceAlert, EmailSettings
from campus_attendance.notifications.service import NotificationService
from conftest import FakeEmailClient


def _alert(i: int) -> AbsenceAlert:
    return AbsenceAlert(
        parent_email=f"parent{i}@example.com",
        student_name=f"Student {i}",
        registration_number=f"21CS{i:03d}",
        attendance_date="2026-03-02",
    )


def test_absence_alert_template_variables(email_settings):
    client = FakeEmailClient()
    result = NotificationService(client, email_settings, delay=0).send_absence_alert(_alert(1))

    assert result.success
    service_id, template_id, variables = client.sent[0]
    assert (service_id, template_id) == ("service_test", "template_absent")
    assert variables == {
        "parent_name": "Parent",
        "student_name": "Student 1",
        "registration_number": "21CS001",
        "attendance_date": "2026-03-02",
        "to_email": "parent1@example.com",
    }


@pytest.mark.parametrize("n, failing", [(5, {2, 4}), (3, set()), (4, {0, 1, 2, 3})])
def test_bulk_counts_partial_failures(email_settings, n, failing):
    client = FakeEmailClient(fail_for={f"parent{i}@example.com" for i in failing})
    svc = NotificationService(client, email_settings, delay=0)

    result = svc.send_bulk_absence_alerts([_alert(i) for i in range(n)])

    assert result.sent == n - len(failing)
    assert result.failed == len(failing)
    assert len(result.errors) == len(failing)
    assert all(e.endswith(": Failed to send email") for e in result.errors)


def test_bulk_survives_client_exceptions(email_settings):
    class FlakyClient(FakeEmailClient):
        def send(self, service_id, template_id, variables):
            if variables["to_email"] == "parent1@example.com":
                raise requests.ConnectionError("connection reset")
            if variables["to_email"] == "parent2@example.com":
                raise RuntimeError("boom")
            return super().send(service_id, template_id, variables)

    result = NotificationService(FlakyClient(), email_settings, delay=0).send_bulk_absence_alerts(
        [_alert(i) for i in range(4)]
    )

    assert (result.sent, result.failed) == (2, 2)
    assert result.errors == [
        "Student 1: Error sending email: connection reset",
        "Student 2: boom",
    ]


def test_bulk_sleeps_between_sends(email_settings):
    pauses = []
    svc = NotificationService(FakeEmailClient(), email_settings, delay=0.1, sleep=pauses.append)

    svc.send_bulk_absence_alerts([_alert(i) for i in range(3)])

    assert pauses == [0.1, 0.1, 0.1]


def test_reported_errors_are_capped(email_settings):
    client = FakeEmailClient(status=500)
    svc = NotificationService(client, email_settings, delay=0, max_errors=2)

    result = svc.send_bulk_absence_alerts([_alert(i) for i in range(5)])

    assert result.failed == 5
    assert len(result.errors) == 2


def test_placeholder_key_is_not_configured(email_settings):
    placeholder = EmailSettings("svc", "tpl", "otp", "your_emailjs_public_key")
    assert not NotificationService(FakeEmailClient(), placeholder).verify_configuration()
    assert NotificationService(FakeEmailClient(), email_settings).verify_configuration()


def test_emailjs_client_payload():
    class FakeResponse:
        status_code = 200
        text = "OK"

    class FakeSession:
        def __init__(self):
            self.calls = []

        def post(self, url, json=None, timeout=None):
            self.calls.append((url, json, timeout))
            return FakeResponse()

    session = FakeSession()
    client = EmailJsClient("pub", private_key="priv", session=session, timeout=3)

    assert client.send("svc", "tpl", {"to_email": "a@b.org"}) == 200
    url, payload, timeout = session.calls[0]
    assert url == "https://api.emailjs.com/api/v1.0/email/send"
    assert payload == {
        "service_id": "svc",
        "template_id": "tpl",
        "user_id": "pub",
        "template_params": {"to_email": "a@b.org"},
        "accessToken": "priv",
    }
    assert timeout == 3
