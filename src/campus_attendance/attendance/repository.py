from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from .model import AttendanceRecord


class AttendanceRepository(Protocol):
    def get(self, reg_no: str, day: date) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def list_for_date(self, day: date) -> Sequence[AttendanceRecord]:
        """Records for one date, newest first."""
        raise NotImplementedError

    def list_between(self, start: date, end: date) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def create_if_absent(self, record: AttendanceRecord) -> bool:
        """Store ``record`` under its key; False if the key already exists."""
        raise NotImplementedError

    def clear_all(self) -> int:
        raise NotImplementedError
