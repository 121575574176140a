from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Optional

from ..core.constants import MAX_EMAIL_LENGTH, MAX_NAME_LENGTH, MAX_REG_NO_LENGTH, MIN_PASSWORD_LENGTH, OTP_LENGTH
from ..core.exceptions import ValidationError

_OTP_RE = re.compile(rf"^[0-9]{{{OTP_LENGTH}}}$")


def require_non_empty(value: Optional[str], field_name: str, *, max_length: Optional[int] = None) -> str:
    if not value or not value.strip():
        raise ValidationError(f"{field_name} is required")
    value = value.strip()
    if max_length is not None and len(value) > max_length:
        raise ValidationError(f"{field_name} must be at most {max_length} characters")
    return value


def normalize_reg_no(value: Optional[str]) -> str:
    """Registration numbers are keyed upper-case with surrounding spaces dropped."""
    return require_non_empty(value, "Registration number", max_length=MAX_REG_NO_LENGTH).upper()


def normalize_name(value: Optional[str]) -> str:
    return require_non_empty(value, "Name", max_length=MAX_NAME_LENGTH)


def optional_email(value: Optional[str], field_name: str = "Email") -> Optional[str]:
    if value is None or not value.strip():
        return None
    value = value.strip()
    if "@" not in value:
        raise ValidationError(f"{field_name} is not a valid address")
    if len(value) > MAX_EMAIL_LENGTH:
        raise ValidationError(f"{field_name} must be at most {MAX_EMAIL_LENGTH} characters")
    return value


@dataclass(frozen=True)
class PasswordStrength:
    is_valid: bool
    errors: list[str] = field(default_factory=list)


def validate_password_strength(password: str) -> PasswordStrength:
    errors: list[str] = []
    password = password or ""

    if len(password) < MIN_PASSWORD_LENGTH:
        errors.append(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")
    if not re.search(r"[A-Z]", password):
        errors.append("Password must contain an uppercase letter")
    if not re.search(r"[a-z]", password):
        errors.append("Password must contain a lowercase letter")
    if not re.search(r"[0-9]", password):
        errors.append("Password must contain a number")
    if not re.search(r"[^A-Za-z0-9]", password):
        errors.append("Password must contain a special character")

    return PasswordStrength(is_valid=not errors, errors=errors)


def validate_otp_format(code: Optional[str]) -> bool:
    return bool(code) and bool(_OTP_RE.match(code))
