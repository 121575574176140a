from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, Optional, Sequence

from ..common.datetime_utils import now_local
from ..common.validators import normalize_name, normalize_reg_no, optional_email
from ..common.permissions import require_staff
from ..core.enums import Role
from ..core.exceptions import ValidationError
from .model import Student
from .repository import StudentRepository

logger = logging.getLogger(__name__)


class StudentService:
    """Use case: manage the student roster (staff)."""

    def __init__(self, students: StudentRepository, *, clock: Optional[Callable[[], datetime]] = None):
        self._students = students
        self._clock = clock or now_local

    def add_student(
        self,
        *,
        actor: Role,
        name: str,
        reg_no: str,
        email: Optional[str] = None,
        parent_email: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> Student:
        require_staff(actor)
        name = normalize_name(name)
        reg_no = normalize_reg_no(reg_no)
        email = optional_email(email)
        parent_email = optional_email(parent_email, "Parent email") or email

        if self._students.get(reg_no):
            raise ValidationError(f"Student {reg_no} already exists")

        student = Student(
            reg_no=reg_no,
            name=name,
            email=email,
            parent_email=parent_email,
            added=now or self._clock(),
        )
        self._students.add(student)
        logger.info("Added student %s", reg_no)
        return student

    def delete_student(self, *, actor: Role, reg_no: str) -> None:
        require_staff(actor)
        reg_no = normalize_reg_no(reg_no)
        if not self._students.delete(reg_no):
            raise ValidationError(f"Student {reg_no} does not exist")
        logger.info("Deleted student %s", reg_no)

    def get(self, reg_no: str) -> Optional[Student]:
        return self._students.get(normalize_reg_no(reg_no))

    def list_students(self) -> Sequence[Student]:
        return list(self._students.list_all())

    def search(self, query: Optional[str]) -> Sequence[Student]:
        students = self.list_students()
        q = (query or "").strip().lower()
        if not q:
            return students
        return [s for s in students if q in s.reg_no.lower() or q in s.name.lower()]
