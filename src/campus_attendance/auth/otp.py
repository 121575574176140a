from __future__ import annotations

import secrets
import threading
from typing import Optional, Protocol

from ..core.constants import OTP_LENGTH
from .model import OtpEntry


def generate_otp() -> str:
    """Random numeric code without a leading zero (100000-999999)."""
    low = 10 ** (OTP_LENGTH - 1)
    return str(low + secrets.randbelow(9 * low))


class OtpStore(Protocol):
    def get(self, email: str) -> Optional[OtpEntry]:
        raise NotImplementedError

    def put(self, entry: OtpEntry) -> None:
        raise NotImplementedError

    def discard(self, email: str) -> None:
        raise NotImplementedError


class InMemoryOtpStore(OtpStore):
    """Process-local OTP store keyed by lower-cased email."""

    def __init__(self):
        self._entries: dict[str, OtpEntry] = {}
        self._lock = threading.Lock()

    def get(self, email: str) -> Optional[OtpEntry]:
        with self._lock:
            return self._entries.get(email.lower())

    def put(self, entry: OtpEntry) -> None:
        with self._lock:
            self._entries[entry.email.lower()] = entry

    def discard(self, email: str) -> None:
        with self._lock:
            self._entries.pop(email.lower(), None)
