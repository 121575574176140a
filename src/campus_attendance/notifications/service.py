from __future__ import annotations

import logging
import time
from typing import Callable, Iterable, Optional

import requests

from ..core.constants import MAX_REPORTED_ERRORS, NOTIFY_DELAY_SECONDS, OTP_TTL_MINUTES
from .client import EmailClient
from .model import AbsenceAlert, BulkSendResult, EmailSettings, SendResult

logger = logging.getLogger(__name__)


class NotificationService:
    """Parent absence alerts and staff OTP emails through a transactional email API."""

    def __init__(
        self,
        client: EmailClient,
        settings: EmailSettings,
        *,
        delay: float = NOTIFY_DELAY_SECONDS,
        sleep: Callable[[float], None] = time.sleep,
        max_errors: int = MAX_REPORTED_ERRORS,
    ):
        self._client = client
        self._settings = settings
        self._delay = float(delay)
        self._sleep = sleep
        self._max_errors = int(max_errors)

    def verify_configuration(self) -> bool:
        return self._settings.is_configured

    def _send(self, template_id: str, variables: dict, *, ok: str, failed: str) -> SendResult:
        try:
            status = self._client.send(self._settings.service_id, template_id, variables)
        except requests.RequestException as e:
            logger.error("Email send error: %s", e)
            return SendResult(False, f"Error sending email: {e}")

        if status == 200:
            return SendResult(True, ok)
        return SendResult(False, failed)

    def send_absence_alert(self, alert: AbsenceAlert) -> SendResult:
        variables = {
            "parent_name": alert.parent_name or "Parent",
            "student_name": alert.student_name,
            "registration_number": alert.registration_number,
            "attendance_date": alert.attendance_date,
            "to_email": alert.parent_email,
        }
        return self._send(
            self._settings.template_id,
            variables,
            ok=f"Absence alert sent to {alert.parent_email}",
            failed="Failed to send email",
        )

    def send_bulk_absence_alerts(self, alerts: Iterable[AbsenceAlert], *, delay: Optional[float] = None) -> BulkSendResult:
        """Send alerts one at a time with a pause between calls.

        Never raises for a single recipient; failures are counted and the
        first ``max_errors`` messages are kept.
        """
        delay = self._delay if delay is None else float(delay)
        result = BulkSendResult()

        for alert in alerts:
            try:
                outcome = self.send_absence_alert(alert)
            except Exception as e:  # a broken client must not abort the batch
                logger.exception("Unexpected error sending alert for %s", alert.registration_number)
                outcome = SendResult(False, str(e) or type(e).__name__)

            if outcome.success:
                result.sent += 1
            else:
                result.failed += 1
                if len(result.errors) < self._max_errors:
                    result.errors.append(f"{alert.student_name}: {outcome.message}")

            if delay > 0:
                self._sleep(delay)

        logger.info("Absence alerts: %d sent, %d failed", result.sent, result.failed)
        return result

    def send_otp_email(self, staff_email: str, otp: str) -> SendResult:
        variables = {
            "staff_email": staff_email,
            "otp_code": otp,
            "expiry_time": f"{OTP_TTL_MINUTES} minutes",
            "to_email": staff_email,
        }
        return self._send(
            self._settings.otp_template_id,
            variables,
            ok=f"OTP sent to {staff_email}",
            failed="Failed to send OTP",
        )
