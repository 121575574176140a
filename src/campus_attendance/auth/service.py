from __future__ import annotations

import hmac
import logging
from dataclasses import replace
from datetime import datetime, timedelta
from typing import Callable, Optional

from werkzeug.security import check_password_hash, generate_password_hash

from ..common.datetime_utils import now_local
from ..common.permissions import require_staff
from ..common.validators import optional_email, validate_otp_format, validate_password_strength
from ..core.constants import DEFAULT_STAFF_PASSWORD, OTP_MAX_ATTEMPTS, OTP_TTL_MINUTES
from ..core.enums import Role
from ..core.exceptions import AuthenticationError, ValidationError
from ..notifications.service import NotificationService
from .model import AdminPasswordConfig, OtpEntry, StaffSession
from .otp import OtpStore, generate_otp
from .repository import AdminConfigRepository

logger = logging.getLogger(__name__)


class StaffAuthService:
    """Use cases: staff login, password change and emailed-OTP reset."""

    def __init__(
        self,
        config: AdminConfigRepository,
        notifications: NotificationService,
        otps: OtpStore,
        *,
        default_password: str = DEFAULT_STAFF_PASSWORD,
        clock: Optional[Callable[[], datetime]] = None,
        otp_factory: Callable[[], str] = generate_otp,
    ):
        self._config = config
        self._notifications = notifications
        self._otps = otps
        self._default_password = default_password
        self._clock = clock or now_local
        self._otp_factory = otp_factory

    def _password_matches(self, password: str, stored: Optional[AdminPasswordConfig]) -> bool:
        if stored is None:
            # First run: no password has been set yet.
            return hmac.compare_digest(password.encode("utf-8"), self._default_password.encode("utf-8"))
        try:
            return check_password_hash(stored.password_hash, password)
        except (ValueError, TypeError):
            # e.g. corrupted or legacy non-werkzeug hashes
            return False

    def _store_password(self, password: str, *, email: Optional[str]) -> None:
        self._config.save(
            AdminPasswordConfig(
                password_hash=generate_password_hash(password),
                last_updated=self._clock(),
                email=email,
            )
        )

    def authenticate(self, password: str) -> StaffSession:
        stored = self._config.get()
        if not password or not self._password_matches(password, stored):
            raise AuthenticationError("Incorrect password. Try again.")
        return StaffSession(role=Role.STAFF, email=stored.email if stored else None)

    def change_password(self, *, actor: Role, current: str, new: str, confirm: str) -> None:
        require_staff(actor)

        if not (current or "").strip():
            raise ValidationError("Please enter your current password")
        if not (new or "").strip():
            raise ValidationError("Please enter a new password")
        if new != confirm:
            raise ValidationError("Passwords do not match")
        if current == new:
            raise ValidationError("New password must be different from current password")

        strength = validate_password_strength(new)
        if not strength.is_valid:
            raise ValidationError(strength.errors[0])

        stored = self._config.get()
        if not self._password_matches(current, stored):
            raise ValidationError("Incorrect current password")

        self._store_password(new, email=stored.email if stored else None)
        logger.info("Staff password changed")

    def request_reset(self, email: str) -> None:
        email = optional_email(email)
        if not email:
            raise ValidationError("Please enter your email")

        stored = self._config.get()
        if stored and stored.email and stored.email.lower() != email.lower():
            raise ValidationError("Email does not match the staff account")

        otp = self._otp_factory()
        self._otps.put(
            OtpEntry(
                code=otp,
                email=email,
                expires_at=self._clock() + timedelta(minutes=OTP_TTL_MINUTES),
            )
        )

        try:
            result = self._notifications.send_otp_email(email, otp)
        except Exception:
            self._otps.discard(email)
            raise
        if not result.success:
            self._otps.discard(email)
            raise ValidationError(result.message)
        logger.info("Password reset OTP sent to %s", email)

    def _active_entry(self, email: str) -> OtpEntry:
        entry = self._otps.get(email or "")
        if entry is None:
            raise ValidationError("No OTP has been requested for this email")
        if entry.is_expired(self._clock()):
            self._otps.discard(email)
            raise ValidationError("OTP has expired. Request a new one.")
        return entry

    def verify_otp(self, email: str, code: str) -> None:
        if not validate_otp_format(code):
            raise ValidationError("Please enter a valid 6-digit OTP")

        entry = self._active_entry(email)
        if hmac.compare_digest(entry.code, code):
            self._otps.put(replace(entry, verified=True))
            return

        attempts = entry.attempts + 1
        if attempts >= OTP_MAX_ATTEMPTS:
            self._otps.discard(email)
            raise ValidationError("Too many incorrect attempts. Request a new OTP.")
        self._otps.put(replace(entry, attempts=attempts))
        raise ValidationError(f"Incorrect OTP. {OTP_MAX_ATTEMPTS - attempts} attempt(s) left.")

    def reset_password(self, *, email: str, new: str, confirm: str) -> None:
        entry = self._active_entry(email)
        if not entry.verified:
            raise ValidationError("Verify the OTP before setting a new password")

        if not (new or "").strip():
            raise ValidationError("Please enter a new password")
        if new != confirm:
            raise ValidationError("Passwords do not match")
        strength = validate_password_strength(new)
        if not strength.is_valid:
            raise ValidationError(strength.errors[0])

        self._store_password(new, email=entry.email)
        self._otps.discard(email)
        logger.info("Staff password reset via OTP for %s", entry.email)
