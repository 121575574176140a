"""Browser-to-student binding.

The first successful submission from a browser binds it to that registration
number. Later submissions for any other number are refused until the binding
is cleared. The state lives in the caller's session (a cookie for the web
layer), so clearing it bypasses the check: this is a nudge, not access control.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..common.validators import normalize_reg_no
from ..core.exceptions import DeviceLockedError

SESSION_KEY = "device_reg_no"


@dataclass(frozen=True)
class DeviceSession:
    bound_reg_no: Optional[str] = None

    @property
    def is_bound(self) -> bool:
        return self.bound_reg_no is not None

    @classmethod
    def from_mapping(cls, data) -> "DeviceSession":
        value = str(data.get(SESSION_KEY) or "").strip().upper()
        return cls(bound_reg_no=value or None)

    def store(self, data) -> None:
        if self.bound_reg_no:
            data[SESSION_KEY] = self.bound_reg_no
        else:
            data.pop(SESSION_KEY, None)


def ensure_can_submit(device: DeviceSession, reg_no: str) -> None:
    reg_no = normalize_reg_no(reg_no)
    if device.is_bound and device.bound_reg_no != reg_no:
        raise DeviceLockedError(
            f"This device is locked to {device.bound_reg_no}. Ask staff to unlock it."
        )


def bind(device: DeviceSession, reg_no: str) -> DeviceSession:
    ensure_can_submit(device, reg_no)
    return DeviceSession(bound_reg_no=normalize_reg_no(reg_no))


def unlock(device: DeviceSession) -> DeviceSession:
    return DeviceSession()
