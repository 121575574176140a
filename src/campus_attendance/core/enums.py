from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Who is acting on the portal."""

    STAFF = "staff"
    STUDENT = "student"


class PresenceStatus(str, Enum):
    """Derived presence of a registered student for one date."""

    PRESENT = "Present"
    ABSENT = "Absent"


class CameraErrorKind(str, Enum):
    """Human-facing categories for camera acquisition failures."""

    DENIED = "denied"
    NOT_FOUND = "not_found"
    IN_USE = "in_use"
    OTHER = "other"
