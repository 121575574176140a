from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class Student:
    """A registered student, keyed by upper-case registration number."""

    reg_no: str
    name: str
    email: Optional[str]
    parent_email: Optional[str]
    added: datetime
