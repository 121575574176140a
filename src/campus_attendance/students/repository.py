from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Student


class StudentRepository(Protocol):
    """Repository interface for the student roster.

    Services depend on this interface, not on a concrete database.
    """

    def get(self, reg_no: str) -> Optional[Student]:
        raise NotImplementedError

    def list_all(self) -> Sequence[Student]:
        """All students in the order they were added."""
        raise NotImplementedError

    def add(self, student: Student) -> None:
        raise NotImplementedError

    def delete(self, reg_no: str) -> bool:
        raise NotImplementedError
