from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import Role


@dataclass(frozen=True)
class AdminPasswordConfig:
    """The single staff password record."""

    password_hash: str
    last_updated: datetime
    email: Optional[str] = None


@dataclass(frozen=True)
class StaffSession:
    """What we store into the Flask session after staff login."""

    role: Role
    email: Optional[str] = None


@dataclass(frozen=True)
class OtpEntry:
    code: str
    email: str
    expires_at: datetime
    attempts: int = 0
    verified: bool = False

    def is_expired(self, now: datetime) -> bool:
        return now > self.expires_at
